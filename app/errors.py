"""
app/errors.py

Exception taxonomy for the report pipeline.

Each class maps to exactly one HTTP outcome in ``app/main.py``. Reply
normalization fallback has no class here: it is a recovered state, not
an error.
"""

from __future__ import annotations


class ReportPipelineError(Exception):
    """Base exception for report pipeline failures."""


class ReportValidationError(ReportPipelineError):
    """Raised when a required request field or dataset is missing or invalid."""


class CompletionError(ReportPipelineError):
    """Base exception for completion gateway failures."""


class CompletionConfigurationError(CompletionError):
    """Raised when the completion service credential is absent."""


class CompletionUpstreamError(CompletionError):
    """
    Raised when the completion service answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the service.
        body: Raw response body, kept for diagnostics.
    """

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Completion service returned status {status_code}.")


class CompletionTransportError(CompletionError):
    """Raised when the completion service cannot be reached."""
