"""
Command-line entry point.

Usage:
  claim-verifier verify "The Earth orbits the Sun" --language en
  claim-verifier serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import sys
import time

from rich.console import Console
from rich.markdown import Markdown

from .errors import ClaimVerifierError
from .llm.prompts import DEFAULT_LANGUAGE
from .log import setup_logging, get_logger
from .pipeline.run import ClaimVerifier
from .rendering.console import render_result_to_markdown

logger = get_logger("cli")
console = Console()


async def run_verify(claim: str, language: str) -> int:
    verifier = ClaimVerifier.from_settings()
    try:
        start = time.perf_counter()
        result = await verifier.verify(claim, language)
        elapsed = time.perf_counter() - start
    finally:
        await verifier.aclose()

    console.print(Markdown(render_result_to_markdown(result, elapsed_seconds=elapsed)))
    return 0


def run_serve(host: str, port: int):
    import uvicorn

    uvicorn.run("claim_verifier.main_api:app", host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="claim-verifier", description="Evidence-based claim verification")
    sub = p.add_subparsers(dest="command", required=True)

    verify = sub.add_parser("verify", help="Verify a single claim and print the result")
    verify.add_argument("claim", help="Claim text to verify")
    verify.add_argument("--language", default=DEFAULT_LANGUAGE.value, help="Language code (en, he, ar)")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "serve":
        run_serve(args.host, args.port)
        return 0

    try:
        return asyncio.run(run_verify(args.claim, args.language))
    except ClaimVerifierError as e:
        logger.error(f"Verification failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
