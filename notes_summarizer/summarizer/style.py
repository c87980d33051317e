"""Style hint resolution and summary formatting."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from notes_summarizer.summarizer.models import StyleDirective


# Checked in order; the first keyword found in the hint wins.
DIRECTIVE_KEYWORDS: Tuple[Tuple[StyleDirective, Tuple[str, ...]], ...] = (
    (StyleDirective.BULLETS, ("bullet", "points")),
    (StyleDirective.ACTION_ITEMS, ("action",)),
    (StyleDirective.EXECUTIVE, ("executive",)),
)

BULLETS_HEADER = "Key Points:"
ACTION_ITEMS_HEADER = "Action Items:"
EXECUTIVE_HEADER = "Executive Summary:"


def resolve_directive(style_hint: Optional[str]) -> StyleDirective:
    """Map a free-text style hint onto a formatting directive."""
    hint = (style_hint or "").lower()
    for directive, keywords in DIRECTIVE_KEYWORDS:
        if any(keyword in hint for keyword in keywords):
            return directive
    return StyleDirective.PLAIN


def _join_sentences(sentences: Iterable[str]) -> str:
    return ". ".join(sentences) + "."


def _bullet_lines(sentences: Sequence[str]) -> str:
    lines = [f"• {sentence.strip()}." for sentence in sentences]
    return BULLETS_HEADER + "\n" + "\n".join(lines)


def _action_lines(sentences: Sequence[str]) -> str:
    lines = [
        f"{index}. {sentence.strip()}."
        for index, sentence in enumerate(sentences, start=1)
    ]
    return ACTION_ITEMS_HEADER + "\n" + "\n".join(lines)


def format_sentences(sentences: Sequence[str], directive: StyleDirective) -> str:
    """
    Render an ordered sentence list under the given directive.

    Used by the extractive fallback, which already works in sentences.
    """
    if directive is StyleDirective.BULLETS:
        return _bullet_lines(sentences)
    if directive is StyleDirective.ACTION_ITEMS:
        return _action_lines(sentences)
    if directive is StyleDirective.EXECUTIVE:
        return f"{EXECUTIVE_HEADER}\n\n{_join_sentences(sentences)}"
    return _join_sentences(sentences)


def split_model_sentences(summary: str) -> List[str]:
    return [piece for piece in summary.split(".") if piece.strip()]


def format_model_summary(summary: str, directive: StyleDirective) -> str:
    """
    Render prose returned by the hosted model under the given directive.

    Executive and plain output keep the model text as returned; bullets and
    action items re-split it on periods first.
    """
    if directive is StyleDirective.BULLETS:
        return _bullet_lines(split_model_sentences(summary))
    if directive is StyleDirective.ACTION_ITEMS:
        return _action_lines(split_model_sentences(summary))
    if directive is StyleDirective.EXECUTIVE:
        return f"{EXECUTIVE_HEADER}\n\n{summary}"
    return summary
