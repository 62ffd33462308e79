import pytest

from ndl_guide.config import INTENT_MODEL
from ndl_guide.errors import IntentParseError
from ndl_guide.intent import extract_intent, parse_intent
from ndl_guide.llm_client import LLMClient, LLMResponse
from ndl_guide.models import SearchIntent


class CannedLLM(LLMClient):
    def __init__(self, text: str) -> None:
        self.text = text
        self.calls = []

    def generate(self, prompt, *, system="", model=None, temperature=None, max_tokens=None):
        self.calls.append({"prompt": prompt, "model": model})
        return LLMResponse(text=self.text, input_tokens=0, output_tokens=0)


def test_parse_intent_accepts_fenced_json() -> None:
    raw = '```json\n{"query": "尾張 怪談", "focusKeywords": ["狐", "祟り"], "isRandom": false}\n```'
    intent = parse_intent(raw)
    assert intent == SearchIntent(query="尾張 怪談", focus_keywords=["狐", "祟り"], is_random=False)


def test_parse_intent_wraps_single_keyword() -> None:
    intent = parse_intent('{"query": "幽霊", "focusKeywords": "幽霊"}')
    assert intent.focus_keywords == ["幽霊"]
    assert intent.is_random is False


@pytest.mark.parametrize(
    "raw",
    [
        "検索クエリは「尾張 怪談」です",
        '["尾張", "怪談"]',
        '{"focusKeywords": ["狐"]}',
        "",
    ],
)
def test_parse_intent_rejects_unusable_payloads(raw) -> None:
    with pytest.raises(IntentParseError):
        parse_intent(raw)


def test_extract_intent_uses_fixed_model_and_parses() -> None:
    llm = CannedLLM('{"query": "江戸 化物", "focusKeywords": ["化物", "妖怪"], "isRandom": true}')
    intent = extract_intent(llm, "江戸のお化けを何か教えて")
    assert intent.query == "江戸 化物"
    assert intent.is_random is True
    assert llm.calls[0]["model"] == INTENT_MODEL
    assert "江戸のお化けを何か教えて" in llm.calls[0]["prompt"]
    assert '"focusKeywords"' in llm.calls[0]["prompt"]


def test_extract_intent_falls_back_on_unparseable_response() -> None:
    message = "猫の怪談"
    intent = extract_intent(CannedLLM("すみません、JSONでは答えられません"), message)
    assert intent == SearchIntent(query=message, focus_keywords=[message], is_random=False)
