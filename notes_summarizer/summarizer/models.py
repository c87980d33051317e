from __future__ import annotations

"""Domain models shared across the summarization pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class StyleDirective(str, Enum):
    BULLETS = "bullets"
    ACTION_ITEMS = "action_items"
    EXECUTIVE = "executive"
    PLAIN = "plain"


@dataclass(slots=True)
class SummarizationRequest:
    text: Optional[str]
    style_hint: str = ""


@dataclass(slots=True)
class SummarizationResult:
    summary: str
    used_fallback: bool
    original_length: int
    summary_length: int

    @classmethod
    def build(cls, text: str, summary: str, used_fallback: bool) -> "SummarizationResult":
        return cls(
            summary=summary,
            used_fallback=used_fallback,
            original_length=len(text),
            summary_length=len(summary),
        )


@dataclass(frozen=True, slots=True)
class RemoteSummary:
    """Styled summary returned by the hosted model."""

    summary: str


@dataclass(frozen=True, slots=True)
class RemoteUnavailable:
    """The hosted model could not produce a summary."""

    reason: str
    details: Optional[str] = None


RemoteOutcome = Union[RemoteSummary, RemoteUnavailable]
