"""Domain exceptions surfaced to the HTTP layer."""

from __future__ import annotations


class SummarizerError(Exception):
    """Base class for errors raised by the summarizer service."""


class SummaryValidationError(SummarizerError):
    """The request was rejected before any summarization work started."""


class UploadRejected(SummarizerError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MailerError(SummarizerError):
    """Sending mail through the configured SMTP server failed."""
