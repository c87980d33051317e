"""Summarization orchestration: remote model first, extractive fallback second."""

from __future__ import annotations

from typing import Optional
import logging

from notes_summarizer.config import Settings
from notes_summarizer.errors import SummaryValidationError
from notes_summarizer.summarizer.engines.extractive import ExtractiveSummarizer
from notes_summarizer.summarizer.engines.remote import RemoteSummarizationClient
from notes_summarizer.summarizer.models import (
    RemoteSummary,
    RemoteUnavailable,
    SummarizationRequest,
    SummarizationResult,
)

logger = logging.getLogger(__name__)


def validate_request(request: SummarizationRequest) -> str:
    text = request.text
    if not isinstance(text, str) or not text.strip():
        raise SummaryValidationError("Text is required")
    return text


class SummarizationService:
    """
    Runs one summarization request through at most two paths.

    The remote client is tried once when configured. Any ``RemoteUnavailable``
    outcome switches to the extractive summarizer; remote failures are never
    reported to the caller except through ``used_fallback``.
    """

    def __init__(
        self,
        fallback: ExtractiveSummarizer,
        remote: Optional[RemoteSummarizationClient] = None,
    ) -> None:
        self.fallback = fallback
        self.remote = remote

    async def summarize(self, request: SummarizationRequest) -> SummarizationResult:
        text = validate_request(request)
        style_hint = request.style_hint or ""
        logger.info(f"Summarizing {len(text)} characters, style hint: {style_hint!r}")

        if self.remote is None:
            outcome = RemoteUnavailable("remote summarization disabled")
        else:
            outcome = await self.remote.summarize(text, style_hint)

        if isinstance(outcome, RemoteSummary):
            return SummarizationResult.build(text, outcome.summary, used_fallback=False)

        logger.warning(f"Remote summarization unavailable ({outcome.reason}), using fallback")
        summary = self.fallback.summarize(text, style_hint)
        return SummarizationResult.build(text, summary, used_fallback=True)


def build_summarization_service(settings: Settings) -> SummarizationService:
    """Assemble the service from configuration."""
    fallback = ExtractiveSummarizer.from_settings(settings)
    remote: Optional[RemoteSummarizationClient] = None
    if settings.remote_enabled:
        if not settings.hugging_face_token:
            logger.warning(
                "HUGGING_FACE_TOKEN not configured, remote calls will be anonymous"
            )
        remote = RemoteSummarizationClient.from_settings(settings)
        logger.info(f"Remote summarization enabled: {settings.summarization_model_url}")
    else:
        logger.info("Remote summarization disabled, using extractive summaries only")
    return SummarizationService(fallback=fallback, remote=remote)
