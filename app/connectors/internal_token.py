"""
app/connectors/internal_token.py

Short-lived service credential for calls to the internal report endpoints.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from app.config import DatasetSourceSettings

_ALGORITHM = "HS256"


def mint_internal_token(settings: DatasetSourceSettings, now: datetime | None = None) -> str:
    """
    Sign a bearer token valid for a single outbound fetch.
    """

    issued_at = now or datetime.now(tz=timezone.utc)
    payload = {
        "service": settings.token_service_name,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.token_ttl_seconds),
    }
    return jwt.encode(payload, settings.token_secret, algorithm=_ALGORITHM)


def decode_token(token: str, secret: str) -> dict:
    """
    Verify signature and expiry; raises ``jwt.InvalidTokenError`` on failure.
    """

    return jwt.decode(token, secret, algorithms=[_ALGORITHM])
