"""HTTP boundary: POST /api/chat delegating to the pipeline."""

# Run from project root: uvicorn ndl_guide.api:app --reload

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ndl_guide.config import ALLOWED_MODELS, GENERATION_MODEL, LOG_FORMAT, LOG_LEVEL
from ndl_guide.models import ChatRequest
from ndl_guide.pipeline import handle_chat

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt="%H:%M:%S")
log = logging.getLogger(__name__)

app = FastAPI(title="NDL Folklore Guide")


@app.get("/health", tags=["system"])
def health() -> dict:
    return {"ok": True}


@app.get("/api/models", tags=["chat"], summary="Models the caller may pick from")
def list_models() -> dict:
    return {"default": GENERATION_MODEL, "models": ALLOWED_MODELS}


@app.post(
    "/api/chat",
    tags=["chat"],
    summary="Answer a question from NDL excerpts",
    description="Returns {reply, sources} on success, {error, details} otherwise. 429 means pick another model.",
)
def post_chat(body: ChatRequest) -> JSONResponse:
    log.info("[api:post_chat] IN  message=%r model=%s", body.message, body.model)
    outcome = handle_chat(body)
    log.info("[api:post_chat] OUT status=%d", outcome.status_code)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body.model_dump())
