"""
tests/test_config.py

Pytest unit tests for environment-derived settings.
"""

from __future__ import annotations

import pytest

from app import config


@pytest.fixture(autouse=True)
def _fresh_settings():
    getters = (
        config.get_completion_settings,
        config.get_dataset_source_settings,
        config.get_report_defaults,
    )
    for getter in getters:
        getter.cache_clear()
    yield
    for getter in getters:
        getter.cache_clear()


class TestCompletionSettings:
    def test_llm_key_takes_precedence(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_API_KEY", "sk-llm")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        assert config.get_completion_settings().api_key == "sk-llm"

    def test_openai_key_fallback_and_blank_values(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_API_KEY", "   ")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("LLM_MODEL", "")
        settings = config.get_completion_settings()
        assert settings.api_key == "sk-openai"
        assert settings.model == "gpt-4.1"


class TestDatasetSourceSettings:
    def test_invalid_numbers_fall_back(self, monkeypatch) -> None:
        monkeypatch.setenv("DATASET_HTTP_TIMEOUT_SECONDS", "soon")
        monkeypatch.setenv("DATASET_HTTP_MAX_RETRIES", "-3")
        settings = config.get_dataset_source_settings()
        assert settings.timeout_seconds == 15.0
        assert settings.max_retries == 0


class TestValidateSettings:
    def test_defaults_are_valid(self, monkeypatch) -> None:
        for name in ("LLM_ADAPTER", "DATASET_API_BASE", "REPORT_DEFAULT_YEAR"):
            monkeypatch.delenv(name, raising=False)
        assert config.validate_settings() == []

    def test_every_problem_is_reported(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "anthropic")
        monkeypatch.setenv("DATASET_API_BASE", "ftp://reports")
        monkeypatch.setenv("REPORT_DEFAULT_YEAR", "1800")
        errors = config.validate_settings()
        assert len(errors) == 3

    def test_unsupported_default_language_falls_back(self, monkeypatch) -> None:
        monkeypatch.setenv("REPORT_DEFAULT_LANGUAGE", "fr")
        assert config.get_report_defaults().language == "vi"


class TestEnvFileParsing:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ('LLM_MODEL="gpt-4.1-mini"', ("LLM_MODEL", "gpt-4.1-mini")),
            ("  JWT_SECRET = s3cr=t ", ("JWT_SECRET", "s3cr=t")),
            ("# LLM_ADAPTER=mock", None),
            ("", None),
            ("NOT_AN_ASSIGNMENT", None),
            ("=orphan", None),
        ],
    )
    def test_line_forms(self, line, expected) -> None:
        assert config._parse_env_line(line) == expected
