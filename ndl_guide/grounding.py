"""Binding of inline citation markers back to evidence items."""

from __future__ import annotations

import re

from ndl_guide.models import AnnotatedText, CitationSegment, EvidenceItem

CITE_PATTERN = re.compile(r'<cite id="(\d+)">([\s\S]*?)</cite>')


def cited_indices(text: str) -> list[int]:
    return [int(match.group(1)) for match in CITE_PATTERN.finditer(text or "")]


def resolve_citations(text: str, evidence: list[EvidenceItem]) -> AnnotatedText:
    """
    Split generated text into plain and cited segments.

    A marker `<cite id="N">phrase</cite>` resolves to evidence[N - 1]. Markers
    whose index is out of range keep their phrase as unlinked text.
    """
    segments: list[CitationSegment] = []
    cursor = 0
    text = text or ""
    for match in CITE_PATTERN.finditer(text):
        if match.start() > cursor:
            segments.append(CitationSegment(text=text[cursor : match.start()]))
        index = int(match.group(1))
        inner = match.group(2)
        if 1 <= index <= len(evidence):
            segments.append(CitationSegment(text=inner, index=index, source=evidence[index - 1]))
        else:
            segments.append(CitationSegment(text=inner))
        cursor = match.end()
    if cursor < len(text):
        segments.append(CitationSegment(text=text[cursor:]))
    return AnnotatedText(segments=segments)
