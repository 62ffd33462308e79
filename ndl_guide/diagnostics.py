"""Connectivity checks for the generation service and the NDL Lab endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ndl_guide.errors import NDLSearchError
from ndl_guide.llm_client import LLMClient

log = logging.getLogger(__name__)

SAMPLE_BOOK_QUERY = "江戸 怪談"
SAMPLE_PAGE_KEYWORD = "猫"


@dataclass(frozen=True)
class CheckResult:
    name: str
    ok: bool
    detail: str


def check_generation(llm: LLMClient, models: list[str]) -> list[CheckResult]:
    results: list[CheckResult] = []
    for model in models:
        try:
            response = llm.generate("Hi, are you working?", model=model, max_tokens=32)
        except Exception as exc:
            log.warning("Model %s failed: %s", model, exc)
            results.append(CheckResult(name=f"model:{model}", ok=False, detail=str(exc)))
            continue
        results.append(CheckResult(name=f"model:{model}", ok=True, detail=response.text[:80]))
    return results


def check_search(client) -> list[CheckResult]:
    """Book search with a sample query, then page search inside the first hit."""
    try:
        books = client.search_books(SAMPLE_BOOK_QUERY, size=5)
    except NDLSearchError as exc:
        return [CheckResult(name="ndl:book_search", ok=False, detail=str(exc))]
    if not books:
        return [CheckResult(name="ndl:book_search", ok=False, detail="no books returned")]
    results = [
        CheckResult(name="ndl:book_search", ok=True, detail=f"{books[0].id} {books[0].title}")
    ]
    try:
        pages = client.search_pages(books[0].id, SAMPLE_PAGE_KEYWORD, size=2)
    except NDLSearchError as exc:
        results.append(CheckResult(name="ndl:page_search", ok=False, detail=str(exc)))
        return results
    detail = f"{len(pages)} snippets" if pages else f"no {SAMPLE_PAGE_KEYWORD!r} in this book"
    results.append(CheckResult(name="ndl:page_search", ok=True, detail=detail))
    return results
