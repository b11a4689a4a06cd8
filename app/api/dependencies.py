"""
app/api/dependencies.py

Shared FastAPI dependencies for caller authentication.
"""

from __future__ import annotations

import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_dataset_source_settings
from app.connectors.internal_token import decode_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def require_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> dict:
    """
    Verify the caller's bearer JWT and return its claims.
    """

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token.",
        )

    try:
        return decode_token(credentials.credentials, get_dataset_source_settings().token_secret)
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected caller token error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
        ) from exc
