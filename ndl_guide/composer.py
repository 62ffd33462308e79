"""Evidence-conditioned answer generation."""

from __future__ import annotations

import logging

from ndl_guide.llm_client import LLMClient
from ndl_guide.models import EvidenceItem, GroundedAnswer
from ndl_guide.prompts import build_answer_prompt, build_no_evidence_prompt
from ndl_guide.resilience import call_with_retry

log = logging.getLogger(__name__)


def compose_answer(
    llm: LLMClient,
    message: str,
    evidence: list[EvidenceItem],
    model: str | None = None,
) -> GroundedAnswer:
    """Generate the cited answer; the text is returned exactly as produced."""
    if not evidence:
        raise ValueError("compose_answer requires at least one evidence item.")
    prompt = build_answer_prompt(message, evidence)
    response = call_with_retry(lambda: llm.generate(prompt, model=model))
    log.info("Composed answer from %d evidence items (%d chars)", len(evidence), len(response.text))
    return GroundedAnswer(text=response.text, citations=list(evidence))


def compose_no_evidence_reply(llm: LLMClient, message: str, model: str | None = None) -> str:
    prompt = build_no_evidence_prompt(message)
    response = call_with_retry(lambda: llm.generate(prompt, model=model))
    return response.text
