#!/usr/bin/env python3
"""Text normalization shared by the tagger, the store and the query engine."""

from __future__ import annotations

import re
import unicodedata
from typing import Any


WHITESPACE_RE = re.compile(r"\s+")


def _strip_marks(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold(text: Any) -> str:
    """Case and diacritic folding without touching punctuation."""
    if text is None:
        return ""
    # casefold can reintroduce combining marks ("İ"), so strip twice.
    return _strip_marks(_strip_marks(str(text)).casefold())


def normalize(text: Any) -> str:
    folded = fold(text)
    sanitized = "".join(ch if ch.isalnum() else " " for ch in folded)
    return WHITESPACE_RE.sub(" ", sanitized).strip()


def tokens(text: Any) -> list[str]:
    normalized = normalize(text)
    if not normalized:
        return []
    return normalized.split(" ")
