"""Turns a free-text question into a structured search intent."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ndl_guide.config import INTENT_MODEL
from ndl_guide.errors import IntentParseError
from ndl_guide.llm_client import LLMClient, strip_code_fences
from ndl_guide.models import SearchIntent
from ndl_guide.prompts import build_intent_prompt
from ndl_guide.resilience import call_with_retry

log = logging.getLogger(__name__)


def parse_intent(raw: str) -> SearchIntent:
    text = strip_code_fences(raw)
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise IntentParseError(f"Intent response is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise IntentParseError("Intent response is not a JSON object.")
    try:
        return SearchIntent.model_validate(payload)
    except ValidationError as exc:
        raise IntentParseError(f"Intent response has an unexpected shape: {exc}") from exc


def fallback_intent(message: str) -> SearchIntent:
    return SearchIntent(query=message, focus_keywords=[message], is_random=False)


def extract_intent(llm: LLMClient, message: str) -> SearchIntent:
    prompt = build_intent_prompt(message)
    response = call_with_retry(lambda: llm.generate(prompt, model=INTENT_MODEL))
    try:
        intent = parse_intent(response.text)
    except IntentParseError as exc:
        log.warning("Using degraded intent for %r: %s", message, exc)
        return fallback_intent(message)
    log.info(
        "Intent: query=%r focus_keywords=%s is_random=%s",
        intent.query,
        intent.focus_keywords,
        intent.is_random,
    )
    return intent
