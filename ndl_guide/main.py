"""CLI entrypoint for asking the folklore guide a question."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from ndl_guide.config import ALLOWED_MODELS, LOG_FORMAT, LOG_LEVEL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Answer a question from NDL digitized-book excerpts with inline citations."
    )
    parser.add_argument(
        "--message",
        help="Question to answer, e.g. '猫の怪談'.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Generation model for the answer (intent extraction uses a fixed model).",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the deterministic mock generation client (NDL search stays live).",
    )
    parser.add_argument(
        "--diagnose",
        action="store_true",
        help="Check the generation service and NDL endpoints instead of answering.",
    )
    return parser


def _diagnose() -> int:
    from ndl_guide.diagnostics import check_generation, check_search
    from ndl_guide.errors import MissingCredentialError
    from ndl_guide.llm_client import get_llm_client
    from ndl_guide.ndl_client import NDLLabClient

    results = []
    try:
        results.extend(check_generation(get_llm_client(), ALLOWED_MODELS))
    except MissingCredentialError as exc:
        print(f"generation: {exc}")
    with NDLLabClient() as client:
        results.extend(check_search(client))
    for result in results:
        print(f"{'OK ' if result.ok else 'NG '} {result.name}: {result.detail}")
    return 0 if results and all(r.ok for r in results) else 1


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt="%H:%M:%S")
    if args.offline:
        os.environ["OFFLINE_MODE"] = "1"
        os.environ["LLM_PROVIDER"] = "mock"
    if args.diagnose:
        sys.exit(_diagnose())
    if not args.message:
        parser.error("--message is required unless --diagnose is given")

    from ndl_guide.models import ChatRequest
    from ndl_guide.pipeline import handle_chat

    outcome = handle_chat(ChatRequest(message=args.message, model=args.model))
    print(json.dumps(outcome.body.model_dump(), indent=2, ensure_ascii=False))
    if outcome.status_code != 200:
        sys.exit(1)


if __name__ == "__main__":
    main()
