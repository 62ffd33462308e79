"""Retry wrapper for calls to the generation service."""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, TypeVar

from ndl_guide.config import LLM_BACKOFF_STEP_S, LLM_MAX_RETRIES, TRANSIENT_STATUS_CODES

log = logging.getLogger(__name__)

_STATUS_IN_TEXT = re.compile(r"\b(\d{3})\b")

T = TypeVar("T")


def is_transient_error(exc: Exception) -> bool:
    """True for rate-limit or overload failures (429/503/504)."""
    status_code = getattr(exc, "status_code", None)
    if status_code in TRANSIENT_STATUS_CODES:
        return True
    return any(int(code) in TRANSIENT_STATUS_CODES for code in _STATUS_IN_TEXT.findall(str(exc)))


def call_with_retry(
    call: Callable[[], T],
    *,
    max_retries: int = LLM_MAX_RETRIES,
    backoff_s: float = LLM_BACKOFF_STEP_S,
    sleep: Callable[[float], None] | None = None,
) -> T:
    """
    Invoke `call`, retrying transient failures with linear backoff.

    Attempt n (1-based) that fails transiently waits backoff_s * n before the
    next try. Non-transient errors, and the last transient one, are re-raised
    as they are.
    """
    attempt = 0
    while True:
        try:
            return call()
        except Exception as exc:
            attempt += 1
            if attempt > max_retries or not is_transient_error(exc):
                raise
            wait = backoff_s * attempt
            log.warning(
                "Transient generation error (retry %d/%d in %.1fs): %s",
                attempt,
                max_retries,
                wait,
                exc,
            )
            (sleep or time.sleep)(wait)
