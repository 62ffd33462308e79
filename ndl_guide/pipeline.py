"""End-to-end pipeline: intent, retrieval, grounded answer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ndl_guide.composer import compose_answer, compose_no_evidence_reply
from ndl_guide.config import BROADEN_SUFFIX, RANDOM_CUES
from ndl_guide.errors import MissingCredentialError
from ndl_guide.intent import extract_intent
from ndl_guide.llm_client import LLMClient, get_llm_client
from ndl_guide.models import ChatRequest, ChatResponse, ErrorResponse, EvidenceItem, SearchIntent
from ndl_guide.ndl_client import NDLLabClient
from ndl_guide.resilience import is_transient_error
from ndl_guide.retrieval import EvidenceRetriever

log = logging.getLogger(__name__)

QUOTA_DETAILS = (
    "選択中のモデルが混み合っているか、利用上限に達しました。"
    "別のモデルを選んで、もう一度お試しください。"
)


class Retriever(Protocol):
    def retrieve_by_topic(
        self, query: str, focus_keywords: list[str] | str
    ) -> list[EvidenceItem]: ...

    def retrieve_random_topic(self) -> list[EvidenceItem]: ...


@dataclass
class ChatOutcome:
    status_code: int
    body: ChatResponse | ErrorResponse


def wants_random(intent: SearchIntent, message: str) -> bool:
    return intent.is_random or any(cue in message for cue in RANDOM_CUES)


def broadened_query(query: str) -> str:
    return query.split(" ")[0] + BROADEN_SUFFIX


def gather_evidence(retriever: Retriever, intent: SearchIntent, message: str) -> list[EvidenceItem]:
    if wants_random(intent, message):
        return retriever.retrieve_random_topic()

    evidence = retriever.retrieve_by_topic(intent.query, intent.focus_keywords)
    if not evidence:
        broader = broadened_query(intent.query)
        log.info("No evidence for %r, broadening to %r", intent.query, broader)
        evidence = retriever.retrieve_by_topic(broader, intent.focus_keywords)
    return evidence


def run_chat(request: ChatRequest, *, llm: LLMClient, retriever: Retriever) -> ChatResponse:
    intent = extract_intent(llm, request.message)
    evidence = gather_evidence(retriever, intent, request.message)
    if not evidence:
        reply = compose_no_evidence_reply(llm, request.message, model=request.model)
        return ChatResponse(reply=reply, sources=[])
    answer = compose_answer(llm, request.message, evidence, model=request.model)
    return ChatResponse(reply=answer.text, sources=answer.citations)


def handle_chat(
    request: ChatRequest,
    *,
    llm: LLMClient | None = None,
    retriever: Retriever | None = None,
) -> ChatOutcome:
    """Run one chat request and map every failure to a structured error."""
    try:
        llm = llm or get_llm_client()
    except MissingCredentialError as exc:
        log.error("Generation credential missing: %s", exc)
        return ChatOutcome(
            status_code=500,
            body=ErrorResponse(error="API key is not configured", details=str(exc)),
        )

    try:
        if retriever is not None:
            response = run_chat(request, llm=llm, retriever=retriever)
        else:
            with NDLLabClient() as client:
                response = run_chat(request, llm=llm, retriever=EvidenceRetriever(client))
    except Exception as exc:
        if is_transient_error(exc):
            log.warning("Generation quota exhausted for model=%s: %s", request.model, exc)
            return ChatOutcome(
                status_code=429,
                body=ErrorResponse(error="Model quota exceeded", details=QUOTA_DETAILS),
            )
        log.exception("Chat request failed")
        return ChatOutcome(
            status_code=500,
            body=ErrorResponse(
                error="Internal Server Error",
                details=str(exc) or "予期せぬエラーが発生しました。",
            ),
        )
    return ChatOutcome(status_code=200, body=response)
