"""Cleanup of raw excerpt text returned by the NDL Lab search."""

from __future__ import annotations

import re

_EM_OPEN = re.compile(r"<em[^>]*>")
_EM_CLOSE = re.compile(r"</em>")
_WHITESPACE = re.compile(r"\s+")


def clean_snippet(text: str | None) -> str:
    """Drop highlight tags, decode `&#x2F;` and collapse whitespace."""
    if not text:
        return ""
    text = _EM_OPEN.sub("", text)
    text = _EM_CLOSE.sub("", text)
    text = text.replace("&#x2F;", "/")
    return _WHITESPACE.sub(" ", text).strip()
