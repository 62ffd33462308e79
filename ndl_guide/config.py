"""Centralized configuration for the NDL folklore guide."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"

# LLM provider configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini")
OFFLINE_MODE = os.getenv("OFFLINE_MODE", "0").strip().lower() in {"1", "true", "yes"}

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_ENDPOINT = os.getenv(
    "GEMINI_ENDPOINT",
    "https://generativelanguage.googleapis.com/v1beta/openai/",
)
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "gemini-flash-latest")
# Intent extraction always runs on this model, whatever the caller picked.
INTENT_MODEL = os.getenv("INTENT_MODEL", "gemini-flash-lite-latest")
ALLOWED_MODELS = [
    m.strip()
    for m in os.getenv(
        "ALLOWED_MODELS",
        "gemini-flash-latest,gemini-flash-lite-latest,gemini-pro-latest",
    ).split(",")
    if m.strip()
]

# Generation and reliability
GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
LLM_BACKOFF_STEP_S = float(os.getenv("LLM_BACKOFF_STEP_S", "1.5"))
TRANSIENT_STATUS_CODES = frozenset({429, 503, 504})

# NDL Lab endpoints
NDL_BOOK_SEARCH_URL = os.getenv(
    "NDL_BOOK_SEARCH_URL", "https://lab.ndl.go.jp/dl/api/book/search"
)
NDL_PAGE_SEARCH_URL = os.getenv(
    "NDL_PAGE_SEARCH_URL", "https://lab.ndl.go.jp/dl/api/page/search"
)
NDL_VIEWER_URL = os.getenv("NDL_VIEWER_URL", "https://dl.ndl.go.jp/pid")
NDL_HTTP_TIMEOUT_S = float(os.getenv("NDL_HTTP_TIMEOUT_S", "15.0"))

# Retrieval policy
BOOK_SEARCH_SIZE = int(os.getenv("BOOK_SEARCH_SIZE", "15"))
FALLBACK_BOOK_SEARCH_SIZE = int(os.getenv("FALLBACK_BOOK_SEARCH_SIZE", "10"))
PASSAGES_PER_KEYWORD = int(os.getenv("PASSAGES_PER_KEYWORD", "2"))
PASSAGE_SOFT_CAP = int(os.getenv("PASSAGE_SOFT_CAP", "8"))
MAX_EVIDENCE = int(os.getenv("MAX_EVIDENCE", "10"))
MIN_SNIPPET_CHARS = int(os.getenv("MIN_SNIPPET_CHARS", "5"))

# Random topic sampling
RANDOM_TOPIC_KEYWORDS = ["怪談", "奇談", "実録", "百物語", "怪異", "化物", "幽霊", "笑話"]
RANDOM_FOCUS_KEYWORDS = ["怪", "鬼", "女", "男", "死", "霊"]
RANDOM_OFFSET_RANGE = int(os.getenv("RANDOM_OFFSET_RANGE", "50"))
RANDOM_PAGE_SIZE = int(os.getenv("RANDOM_PAGE_SIZE", "5"))
RANDOM_MAX_EVIDENCE = int(os.getenv("RANDOM_MAX_EVIDENCE", "5"))
RANDOM_CUES = ("ランダム", "何か")

# Broadened query used when a targeted search finds nothing
BROADEN_SUFFIX = " 奇談 珍事 実録"
