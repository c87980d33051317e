"""
Client for the hosted summarization model.

The client never raises for remote problems. Every failure mode (transport
error, non-success status, unreadable body, missing summary) comes back as a
``RemoteUnavailable`` value so the caller can decide what to do next.
"""

from typing import Any, Dict, Optional
import logging

import httpx
import orjson

from notes_summarizer.config import Settings
from notes_summarizer.summarizer.models import (
    RemoteOutcome,
    RemoteSummary,
    RemoteUnavailable,
)
from notes_summarizer.summarizer.style import format_model_summary, resolve_directive

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ("summary_text", "generated_text")


def truncate_input(text: str, limit: int) -> str:
    """Hard cut at ``limit`` characters, without looking for sentence ends."""
    if len(text) > limit:
        logger.info(f"Text truncated to {limit} characters")
        return text[:limit]
    return text


def extract_summary(payload: Any) -> Optional[str]:
    """Pull the summary string out of an inference API response body."""
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    for field_name in SUMMARY_FIELDS:
        value = first.get(field_name)
        if isinstance(value, str) and value:
            return value
    return None


class RemoteSummarizationClient:
    """Hugging Face Inference API client for summarization models."""

    name = "remote"

    def __init__(
        self,
        model_url: str,
        token: Optional[str] = None,
        max_input_chars: int = 4000,
        max_length: int = 500,
        min_length: int = 50,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            model_url: Full inference endpoint URL of the model
            token: Optional API token sent as a bearer credential
            max_input_chars: Inputs longer than this are cut before sending
            max_length: Upper bound on generated summary length
            min_length: Lower bound on generated summary length
            timeout: Seconds before the outbound request is abandoned
            transport: Optional httpx transport, mainly for tests
        """
        self.model_url = model_url
        self.token = token
        self.max_input_chars = max_input_chars
        self.max_length = max_length
        self.min_length = min_length
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RemoteSummarizationClient":
        return cls(
            model_url=settings.summarization_model_url,
            token=settings.hugging_face_token,
            max_input_chars=settings.remote_max_input_chars,
            max_length=settings.remote_max_length,
            min_length=settings.remote_min_length,
            timeout=settings.remote_timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def build_payload(self, text: str) -> Dict[str, Any]:
        return {
            "inputs": truncate_input(text, self.max_input_chars),
            "parameters": {
                "max_length": self.max_length,
                "min_length": self.min_length,
                "do_sample": False,
            },
        }

    async def generate(self, text: str) -> RemoteOutcome:
        """Send ``text`` to the model and return its raw, unstyled summary."""
        payload = self.build_payload(text)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    self.model_url, content=orjson.dumps(payload), headers=self._headers()
                )
        except httpx.HTTPError as exc:
            logger.error(f"Summarization request failed: {exc!r}")
            return RemoteUnavailable("request failed", details=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error calling the summarization API")
            return RemoteUnavailable("request failed", details=str(exc))

        logger.info(f"Summarization API response status: {response.status_code}")
        if not response.is_success:
            logger.error(
                f"Summarization API error: {response.status_code} - {response.text}"
            )
            return RemoteUnavailable(
                f"HTTP error status {response.status_code}", details=response.text
            )

        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            logger.error(f"Summarization API returned malformed JSON: {exc}")
            return RemoteUnavailable("malformed response body", details=str(exc))

        summary = extract_summary(body)
        if not summary:
            return RemoteUnavailable("no summary produced", details=response.text)
        return RemoteSummary(summary)

    async def summarize(self, text: str, style_hint: str = "") -> RemoteOutcome:
        """Summarize ``text`` remotely and shape the result per ``style_hint``."""
        outcome = await self.generate(text)
        if isinstance(outcome, RemoteUnavailable):
            return outcome
        styled = format_model_summary(outcome.summary, resolve_directive(style_hint))
        logger.info("Remote summary generated successfully")
        return RemoteSummary(styled)
