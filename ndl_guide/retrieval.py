"""Evidence retrieval over the NDL Lab book and page search endpoints."""

from __future__ import annotations

import logging
import random
import re
from typing import Protocol

from ndl_guide.config import (
    BOOK_SEARCH_SIZE,
    FALLBACK_BOOK_SEARCH_SIZE,
    MAX_EVIDENCE,
    MIN_SNIPPET_CHARS,
    NDL_VIEWER_URL,
    PASSAGE_SOFT_CAP,
    PASSAGES_PER_KEYWORD,
    RANDOM_FOCUS_KEYWORDS,
    RANDOM_MAX_EVIDENCE,
    RANDOM_OFFSET_RANGE,
    RANDOM_PAGE_SIZE,
    RANDOM_TOPIC_KEYWORDS,
)
from ndl_guide.models import BookRecord, EvidenceItem, PageRecord
from ndl_guide.snippets import clean_snippet

log = logging.getLogger(__name__)

# Highlights embed the page image name, e.g. "...(0012.jp2)".
_HIGHLIGHT_PAGE = re.compile(r"\((\d+)\.jp2\)")
DEFAULT_HIGHLIGHT_PAGE = "1"


class SearchClient(Protocol):
    def search_books(
        self, keyword: str, *, size: int, offset: int | None = None
    ) -> list[BookRecord]: ...

    def search_pages(self, book_id: str, keyword: str, *, size: int) -> list[PageRecord]: ...


def build_link(pid: str, page: str) -> str:
    return f"{NDL_VIEWER_URL}/{pid}/{page}"


def page_from_highlight(highlight: str) -> str:
    match = _HIGHLIGHT_PAGE.search(highlight or "")
    if not match:
        return DEFAULT_HIGHLIGHT_PAGE
    return str(int(match.group(1)))


def _evidence(book: BookRecord, page: str, raw_snippet: str) -> EvidenceItem:
    return EvidenceItem(
        title=book.title,
        pid=book.id,
        page=page,
        snippet=clean_snippet(raw_snippet),
        link=build_link(book.id, page),
    )


class EvidenceRetriever:
    """
    Collects evidence snippets for a topic from the NDL Lab search.

    Books come from the book search in result order. Each book is scanned with
    the page search once per focus keyword; books with no page hits fall back
    to the highlight fragments carried on the book record.
    """

    def __init__(self, search_client: SearchClient, rng: random.Random | None = None) -> None:
        self._search = search_client
        self._rng = rng or random.Random()

    def retrieve_by_topic(
        self,
        query: str,
        focus_keywords: list[str] | str,
        max_items: int = MAX_EVIDENCE,
    ) -> list[EvidenceItem]:
        keywords = [focus_keywords] if isinstance(focus_keywords, str) else list(focus_keywords)
        log.info("Topic search: query=%r focus_keywords=%s", query, keywords)
        try:
            results = self._collect(query, keywords)
        except Exception:
            log.exception("Topic search failed for query=%r", query)
            return []
        kept = [item for item in results if len(item.snippet) > MIN_SNIPPET_CHARS]
        log.info(
            "Topic search done: query=%r collected=%d kept=%d",
            query,
            len(results),
            min(len(kept), max_items),
        )
        return kept[:max_items]

    def retrieve_random_topic(self) -> list[EvidenceItem]:
        try:
            keyword = self._rng.choice(RANDOM_TOPIC_KEYWORDS)
            offset = self._rng.randrange(RANDOM_OFFSET_RANGE)
            books = self._search.search_books(keyword, size=RANDOM_PAGE_SIZE, offset=offset)
            if not books:
                log.info("Random pick: no books for keyword=%r offset=%d", keyword, offset)
                return []
            book = self._rng.choice(books)
        except Exception:
            log.exception("Random pick failed")
            return []
        log.info("Random pick: keyword=%r offset=%d book=%s %r", keyword, offset, book.id, book.title)
        return self.retrieve_by_topic(
            book.title, RANDOM_FOCUS_KEYWORDS, max_items=RANDOM_MAX_EVIDENCE
        )

    def _find_books(self, query: str) -> list[BookRecord]:
        books = self._search.search_books(query, size=BOOK_SEARCH_SIZE)
        if books:
            return books
        loosened = query.split(" ")[0]
        log.info("No books for %r, retrying with %r", query, loosened)
        return self._search.search_books(loosened, size=FALLBACK_BOOK_SEARCH_SIZE)

    def _collect(self, query: str, keywords: list[str]) -> list[EvidenceItem]:
        results: list[EvidenceItem] = []
        seen: set[str] = set()
        for book in self._find_books(query):
            if book.id in seen:
                continue
            if len(results) >= PASSAGE_SOFT_CAP:
                break
            before = len(results)
            soft_cap_hit = self._collect_passages(book, keywords, results)
            if len(results) == before and book.highlights:
                results.extend(
                    _evidence(book, page_from_highlight(hl), hl) for hl in book.highlights
                )
            seen.add(book.id)
            # The soft cap ends the whole scan, even below MAX_EVIDENCE.
            if soft_cap_hit or len(results) >= MAX_EVIDENCE:
                break
        return results

    def _collect_passages(
        self, book: BookRecord, keywords: list[str], results: list[EvidenceItem]
    ) -> bool:
        """Append page-search hits for `book`; True once the soft cap is reached."""
        for keyword in keywords:
            try:
                pages = self._search.search_pages(book.id, keyword, size=PASSAGES_PER_KEYWORD)
            except Exception as exc:
                log.debug("Page search skipped book=%s keyword=%r: %s", book.id, keyword, exc)
                continue
            for page in pages:
                results.append(_evidence(book, page.page, page.snippet))
                if len(results) >= PASSAGE_SOFT_CAP:
                    return True
        return False
