"""Extractive fallback summarizer used when the hosted model is unavailable."""

from __future__ import annotations

import logging
import re
from typing import List

from notes_summarizer.config import Settings
from notes_summarizer.summarizer.style import format_sentences, resolve_directive

logger = logging.getLogger(__name__)

SENTENCE_DELIMITER = re.compile(r"[.!?]+")


class ExtractiveSummarizer:
    """
    Picks the leading sentences of the input that are long enough to carry
    content.

    No ranking and no external calls: the same text always yields the same
    sentences in the same order.
    """

    name = "extractive"

    def __init__(self, max_sentences: int = 5, min_sentence_chars: int = 20) -> None:
        self.max_sentences = max_sentences
        self.min_sentence_chars = min_sentence_chars

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractiveSummarizer":
        return cls(
            max_sentences=settings.fallback_max_sentences,
            min_sentence_chars=settings.fallback_min_sentence_chars,
        )

    def select_sentences(self, text: str) -> List[str]:
        candidates = [
            piece
            for piece in SENTENCE_DELIMITER.split(text)
            if len(piece.strip()) > self.min_sentence_chars
        ]
        return candidates[: min(self.max_sentences, len(candidates))]

    def summarize(self, text: str, style_hint: str = "") -> str:
        sentences = self.select_sentences(text)
        logger.info(f"Creating fallback summary from {len(sentences)} sentences")
        return format_sentences(sentences, resolve_directive(style_hint))
