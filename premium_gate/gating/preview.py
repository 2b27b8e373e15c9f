"""
Preview for denied readers: first N words of the plain-text body.
Read time always reflects the whole article, not the preview.
"""
from __future__ import annotations

import html
import math
import re

from premium_gate.gating.config import get_preview_words, get_words_per_minute
from premium_gate.gating.models import AccessDecision, PreviewResult

_TAG_RE = re.compile(r"<[^>]*>")
ELLIPSIS = "…"


def plain_text(content: str) -> str:
    """Strip markup and entities, collapse whitespace."""
    text = _TAG_RE.sub(" ", content or "")
    text = html.unescape(text)
    return " ".join(text.split())


def estimate_read_time(word_count: int, words_per_minute: int | None = None) -> int:
    """Minutes to read word_count words; at least 1."""
    wpm = words_per_minute or get_words_per_minute()
    return max(1, math.ceil(word_count / wpm))


def generate_preview(
    full_content: str,
    decision: AccessDecision,
    limit_words: int | None = None,
    words_per_minute: int | None = None,
) -> PreviewResult:
    """
    Build a deterministic preview of full_content.

    limit_words defaults to decision.preview_words, then the member preview size.
    A decision that grants access gets the whole text back, untruncated.
    """
    words = plain_text(full_content).split()
    word_count = len(words)
    read_time = estimate_read_time(word_count, words_per_minute)

    if decision.has_access:
        text = " ".join(words)
        return PreviewResult(
            preview_text=text,
            preview_html=_wrap(text, truncated=False),
            word_count=word_count,
            preview_word_count=word_count,
            estimated_read_time=read_time,
            truncated=False,
        )

    if limit_words is not None:
        limit = limit_words
    elif decision.preview_words is not None:
        limit = decision.preview_words
    else:
        limit = get_preview_words(anonymous=False)
    kept = words[: max(0, limit)]
    truncated = len(kept) < word_count
    text = " ".join(kept)
    return PreviewResult(
        preview_text=text,
        preview_html=_wrap(text, truncated=truncated),
        word_count=word_count,
        preview_word_count=len(kept),
        estimated_read_time=read_time,
        truncated=truncated,
    )


def _wrap(text: str, truncated: bool) -> str:
    if not text:
        return ""
    suffix = ELLIPSIS if truncated else ""
    return f"<p>{html.escape(text)}{suffix}</p>"
