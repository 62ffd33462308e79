import json

import pytest

from ndl_guide.diagnostics import check_generation, check_search
from ndl_guide.errors import NDLSearchError
from ndl_guide.llm_client import LLMClient, LLMResponse
from ndl_guide.main import build_parser
from ndl_guide.models import BookRecord, ChatResponse, ErrorResponse, PageRecord
from ndl_guide.pipeline import ChatOutcome


def test_parser_accepts_offline_flag() -> None:
    args = build_parser().parse_args(["--message", "猫の怪談", "--offline", "--model", "m"])
    assert args.offline is True
    assert args.message == "猫の怪談"
    assert args.model == "m"
    assert args.diagnose is False


def test_main_prints_reply(monkeypatch, capsys) -> None:
    import ndl_guide.main as main_mod

    seen = {}

    def fake_handle_chat(request):
        seen["request"] = request
        return ChatOutcome(200, ChatResponse(reply="猫の話", sources=[]))

    monkeypatch.setattr("ndl_guide.pipeline.handle_chat", fake_handle_chat)
    monkeypatch.setenv("OFFLINE_MODE", "0")
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setattr("sys.argv", ["prog", "--message", "猫の怪談", "--offline"])
    main_mod.main()

    printed = json.loads(capsys.readouterr().out)
    assert printed == {"reply": "猫の話", "sources": []}
    assert seen["request"].message == "猫の怪談"


def test_main_exits_nonzero_on_error(monkeypatch, capsys) -> None:
    import ndl_guide.main as main_mod

    monkeypatch.setattr(
        "ndl_guide.pipeline.handle_chat",
        lambda request: ChatOutcome(500, ErrorResponse(error="Internal Server Error", details="boom")),
    )
    monkeypatch.setenv("OFFLINE_MODE", "0")
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setattr("sys.argv", ["prog", "--message", "猫", "--offline"])
    with pytest.raises(SystemExit) as excinfo:
        main_mod.main()
    assert excinfo.value.code == 1
    assert "boom" in capsys.readouterr().out


def test_main_requires_message(monkeypatch) -> None:
    import ndl_guide.main as main_mod

    monkeypatch.setattr("sys.argv", ["prog"])
    with pytest.raises(SystemExit) as excinfo:
        main_mod.main()
    assert excinfo.value.code == 2


class _PickyLLM(LLMClient):
    def generate(self, prompt, *, system="", model=None, temperature=None, max_tokens=None):
        if model == "broken":
            raise RuntimeError("404 model not found")
        return LLMResponse(text="はい、動いています", input_tokens=0, output_tokens=0)


def test_check_generation_reports_each_model() -> None:
    results = check_generation(_PickyLLM(), ["good", "broken"])
    assert [(r.name, r.ok) for r in results] == [("model:good", True), ("model:broken", False)]


class _Search:
    def __init__(self, books, fail_pages=False):
        self.books = books
        self.fail_pages = fail_pages

    def search_books(self, keyword, *, size, offset=None):
        return self.books

    def search_pages(self, book_id, keyword, *, size):
        if self.fail_pages:
            raise NDLSearchError("page api down")
        return [PageRecord(page="3", snippet="猫")]


def test_check_search_calls_both_endpoints() -> None:
    results = check_search(_Search([BookRecord(id="1", title="江戸怪談")]))
    assert [(r.name, r.ok) for r in results] == [("ndl:book_search", True), ("ndl:page_search", True)]


def test_check_search_reports_failures() -> None:
    assert check_search(_Search([]))[0].ok is False
    results = check_search(_Search([BookRecord(id="1", title="x")], fail_pages=True))
    assert results[1].ok is False
