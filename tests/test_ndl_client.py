import httpx
import pytest

from ndl_guide.errors import NDLSearchError
from ndl_guide.ndl_client import NDLLabClient

BOOK_URL = "https://lab.example/book/search"
PAGE_URL = "https://lab.example/page/search"


def _client(handler) -> NDLLabClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return NDLLabClient(http, book_search_url=BOOK_URL, page_search_url=PAGE_URL)


def test_search_books_sends_params_and_parses_list() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "list": [
                    {"id": 1234567, "title": "尾張怪談集", "highlights": ["<em>猫</em> (0003.jp2)"]},
                    {"id": "7654321", "title": "奇談百話", "highlights": None},
                ]
            },
        )

    with _client(handler) as client:
        books = client.search_books("尾張 怪談", size=15, offset=20)

    assert seen["params"] == {"keyword": "尾張 怪談", "size": "15", "from": "20"}
    assert [b.id for b in books] == ["1234567", "7654321"]
    assert books[0].highlights == ["<em>猫</em> (0003.jp2)"]
    assert books[1].highlights == []


def test_search_books_without_offset_omits_from() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"list": []})

    with _client(handler) as client:
        assert client.search_books("怪談", size=5) == []
    assert "from" not in seen["params"]


def test_search_pages_coerces_page_labels() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["f-book"] == "1234567"
        assert request.url.params["q-contents"] == "猫"
        assert request.url.params["size"] == "2"
        return httpx.Response(200, json=[{"page": 12, "snippet": "猫が化けた"}, {"page": "13"}])

    with _client(handler) as client:
        pages = client.search_pages("1234567", "猫", size=2)

    assert [p.page for p in pages] == ["12", "13"]
    assert pages[1].snippet == ""


def test_http_error_is_wrapped() -> None:
    with _client(lambda request: httpx.Response(500, text="down")) as client:
        with pytest.raises(NDLSearchError):
            client.search_books("怪談", size=5)


def test_non_json_body_is_wrapped() -> None:
    with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(NDLSearchError):
            client.search_pages("1", "猫", size=2)


def test_search_books_tolerates_null_title() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"list": [{"id": "1", "title": None}, {"id": "2", "title": "奇談"}]})

    with _client(handler) as client:
        books = client.search_books("奇談", size=5)

    assert [(b.id, b.title) for b in books] == [("1", ""), ("2", "奇談")]
