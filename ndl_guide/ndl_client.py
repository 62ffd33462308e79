"""HTTP client for the NDL Lab book and page search endpoints."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ndl_guide.config import NDL_BOOK_SEARCH_URL, NDL_HTTP_TIMEOUT_S, NDL_PAGE_SEARCH_URL
from ndl_guide.errors import NDLSearchError
from ndl_guide.models import BookRecord, PageRecord

log = logging.getLogger(__name__)


class NDLLabClient:
    """Thin wrapper over the two read-only NDL Lab search endpoints."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        book_search_url: str = NDL_BOOK_SEARCH_URL,
        page_search_url: str = NDL_PAGE_SEARCH_URL,
        timeout: float = NDL_HTTP_TIMEOUT_S,
    ) -> None:
        self._http = http_client or httpx.Client(timeout=timeout)
        self._book_search_url = book_search_url
        self._page_search_url = page_search_url

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "NDLLabClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json(self, url: str, params: dict):
        try:
            res = self._http.get(url, params=params)
            res.raise_for_status()
            return res.json()
        except httpx.HTTPError as exc:
            raise NDLSearchError(f"NDL request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise NDLSearchError(f"NDL response from {url} is not JSON: {exc}") from exc

    def search_books(
        self, keyword: str, *, size: int, offset: int | None = None
    ) -> list[BookRecord]:
        params: dict = {"keyword": keyword, "size": size}
        if offset is not None:
            params["from"] = offset
        data = self._get_json(self._book_search_url, params)
        rows = data.get("list") if isinstance(data, dict) else None
        try:
            books = [BookRecord.model_validate(row) for row in rows or []]
        except ValidationError as exc:
            raise NDLSearchError(f"Unexpected book record shape: {exc}") from exc
        log.debug("ndl.book_search keyword=%r from=%s hits=%d", keyword, offset, len(books))
        return books

    def search_pages(self, book_id: str, keyword: str, *, size: int) -> list[PageRecord]:
        params = {"f-book": book_id, "q-contents": keyword, "size": size}
        data = self._get_json(self._page_search_url, params)
        if not isinstance(data, list):
            return []
        try:
            pages = [PageRecord.model_validate(row) for row in data]
        except ValidationError as exc:
            raise NDLSearchError(f"Unexpected page record shape: {exc}") from exc
        log.debug("ndl.page_search book=%s keyword=%r hits=%d", book_id, keyword, len(pages))
        return pages
