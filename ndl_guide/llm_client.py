"""Provider-agnostic generation client."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass

from ndl_guide.errors import MissingCredentialError

log = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?")


@dataclass(frozen=True)
class LLMResponse:
    text: str
    input_tokens: int
    output_tokens: int


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences such as ```json ... ``` around a payload."""
    return _FENCE.sub("", text or "").strip()


class LLMClient:
    """Abstract base class for generation providers."""

    provider: str = "base"

    def generate(
        self,
        prompt: str,
        *,
        system: str = "",
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        raise NotImplementedError


class GeminiClient(LLMClient):
    """Gemini through its OpenAI-compatible chat completions endpoint."""

    provider = "gemini"

    def __init__(self) -> None:
        from openai import OpenAI

        from ndl_guide.config import GEMINI_API_KEY, GEMINI_ENDPOINT

        if not GEMINI_API_KEY:
            raise MissingCredentialError(
                "GEMINI_API_KEY is not set. Add it to .env (or the environment) and restart."
            )
        # Retries are handled by ndl_guide.resilience, not the SDK.
        self._client = OpenAI(base_url=GEMINI_ENDPOINT, api_key=GEMINI_API_KEY, max_retries=0)

    def generate(
        self,
        prompt: str,
        *,
        system: str = "",
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        from ndl_guide.config import GENERATION_MODEL, GENERATION_TEMPERATURE

        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict = {
            "model": model or GENERATION_MODEL,
            "messages": messages,
            "temperature": temperature if temperature is not None else GENERATION_TEMPERATURE,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        resp = self._client.chat.completions.create(**kwargs)
        usage = resp.usage
        return LLMResponse(
            text=resp.choices[0].message.content or "",
            input_tokens=getattr(usage, "prompt_tokens", 0) if usage else 0,
            output_tokens=getattr(usage, "completion_tokens", 0) if usage else 0,
        )


class MockOfflineClient(LLMClient):
    """Deterministic stand-in that answers from the prompt text alone."""

    provider = "mock"

    _QUESTION = re.compile(r"ユーザーの質問:\s*(?P<q>.+)")
    _MATERIAL = re.compile(r"資料(?P<idx>\d+):\s*(?P<title>.+?)\s*\(コマ番号:")

    def _intent_payload(self, prompt: str) -> dict:
        match = self._QUESTION.search(prompt)
        question = match.group("q").strip() if match else ""
        terms = question.split() or [question]
        return {
            "query": " ".join(terms[:2]),
            "focusKeywords": terms[:8],
            "isRandom": "ランダム" in question,
        }

    def _cited_answer(self, prompt: str) -> str:
        lines = [
            f'資料{m.group("idx")}には<cite id="{m.group("idx")}">{m.group("title")}</cite>の記述がございます。'
            for m in self._MATERIAL.finditer(prompt)
        ]
        return "\n".join(lines) or "資料を読み解くことができませんでした。"

    def generate(
        self,
        prompt: str,
        *,
        system: str = "",
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        del system, model, temperature, max_tokens
        if '"focusKeywords"' in prompt:
            text = json.dumps(self._intent_payload(prompt), ensure_ascii=False)
        elif "【資料内容】" in prompt:
            text = self._cited_answer(prompt)
        else:
            text = "申し訳ございません。資料が見つかりませんでした。地名や「奇談」「実録」などの語を添えてお尋ねください。"
        return LLMResponse(text=text, input_tokens=0, output_tokens=0)


def is_offline() -> bool:
    from ndl_guide.config import OFFLINE_MODE

    return os.getenv("OFFLINE_MODE", "1" if OFFLINE_MODE else "0").strip().lower() in {
        "1",
        "true",
        "yes",
    }


def get_llm_client() -> LLMClient:
    from ndl_guide.config import LLM_PROVIDER

    provider = os.getenv("LLM_PROVIDER", LLM_PROVIDER).strip().lower()
    if is_offline() or provider == "mock":
        return MockOfflineClient()
    if provider == "gemini":
        return GeminiClient()
    raise ValueError(f"Unknown LLM_PROVIDER={provider!r}")
