"""
app/config.py

Environment-backed settings for the report service. Every getter is
cached; tests clear the caches after patching the environment.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TypeVar

_ALLOWED_LLM_ADAPTERS = {"openai", "mock"}
_ALLOWED_LANGUAGES = {"vi", "en"}
_ENV_FILENAMES = (".env", ".env.local")

_Number = TypeVar("_Number", int, float)


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip().strip("\"'")


def load_env_files() -> None:
    """
    Copy KEY=VALUE lines from the repository's ``.env`` then ``.env.local``
    into ``os.environ``. Variables already set in the process win.
    """

    root = Path(__file__).resolve().parents[1]
    for path in (root / name for name in _ENV_FILENAMES):
        if not path.is_file():
            continue
        for raw_line in path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


@lru_cache(maxsize=1)
def _env_files_loaded() -> bool:
    load_env_files()
    return True


def _read_env(name: str) -> str | None:
    """Stripped value of *name*; blank counts as unset."""
    _env_files_loaded()
    value = (os.environ.get(name) or "").strip()
    return value or None


def _env_str(name: str, default: str) -> str:
    return _read_env(name) or default


def _env_number(name: str, default: _Number, cast: Callable[[str], _Number]) -> _Number:
    raw_value = _read_env(name)
    if raw_value is None:
        return default
    try:
        return cast(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class CompletionSettings:
    """
    Completion service settings shared by every report generator.
    """

    adapter: str = "openai"
    model: str = "gpt-4.1"
    api_key: str | None = None
    base_url: str | None = None


@dataclass(frozen=True)
class DatasetSourceSettings:
    """
    Internal report endpoint settings used by the dataset provider.
    """

    base_url: str = "http://localhost:4000/api"
    timeout_seconds: float = 15.0
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    token_secret: str = "dev-secret-change-me"
    token_ttl_seconds: int = 60
    token_service_name: str = "report-ai"


@dataclass(frozen=True)
class ReportDefaults:
    """
    Defaults applied when a request leaves a parameter unset.
    """

    year: int = 2024
    language: str = "vi"
    projection_years: int = 5


@lru_cache(maxsize=1)
def get_completion_settings() -> CompletionSettings:
    """
    Return cached completion settings from environment variables.
    """

    return CompletionSettings(
        adapter=_env_str("LLM_ADAPTER", "openai").lower(),
        model=_env_str("LLM_MODEL", "gpt-4.1"),
        api_key=_read_env("LLM_API_KEY") or _read_env("OPENAI_API_KEY"),
        base_url=_read_env("LLM_BASE_URL"),
    )


@lru_cache(maxsize=1)
def get_dataset_source_settings() -> DatasetSourceSettings:
    """
    Return cached internal dataset endpoint settings from environment variables.
    """

    return DatasetSourceSettings(
        base_url=_env_str("DATASET_API_BASE", "http://localhost:4000/api"),
        timeout_seconds=max(1.0, _env_number("DATASET_HTTP_TIMEOUT_SECONDS", 15.0, float)),
        max_retries=max(0, _env_number("DATASET_HTTP_MAX_RETRIES", 0, int)),
        backoff_initial_seconds=max(0.1, _env_number("DATASET_HTTP_BACKOFF_INITIAL_SECONDS", 0.5, float)),
        backoff_multiplier=max(1.0, _env_number("DATASET_HTTP_BACKOFF_MULTIPLIER", 2.0, float)),
        token_secret=_env_str("JWT_SECRET", "dev-secret-change-me"),
        token_ttl_seconds=max(1, _env_number("INTERNAL_TOKEN_TTL_SECONDS", 60, int)),
        token_service_name=_env_str("INTERNAL_TOKEN_SERVICE", "report-ai"),
    )


@lru_cache(maxsize=1)
def get_report_defaults() -> ReportDefaults:
    """
    Return cached request defaults from environment variables.
    """

    language = _env_str("REPORT_DEFAULT_LANGUAGE", "vi").lower()
    return ReportDefaults(
        year=_env_number("REPORT_DEFAULT_YEAR", 2024, int),
        language=language if language in _ALLOWED_LANGUAGES else "vi",
        projection_years=max(0, _env_number("REPORT_DEFAULT_PROJECTION_YEARS", 5, int)),
    )


def validate_settings() -> list[str]:
    """
    Return a list of human-readable problems with the current environment.
    """

    errors: list[str] = []

    completion = get_completion_settings()
    if completion.adapter not in _ALLOWED_LLM_ADAPTERS:
        errors.append(
            f"LLM_ADAPTER='{completion.adapter}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LLM_ADAPTERS)}."
        )

    dataset_source = get_dataset_source_settings()
    if not dataset_source.base_url.startswith(("http://", "https://")):
        errors.append(
            f"DATASET_API_BASE='{dataset_source.base_url}' must be an http(s) URL."
        )

    defaults = get_report_defaults()
    if not 2000 <= defaults.year <= 2100:
        errors.append(
            f"REPORT_DEFAULT_YEAR={defaults.year} is outside the supported range 2000-2100."
        )

    return errors
