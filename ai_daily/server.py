#!/usr/bin/env python3
"""Launch the AI Daily HTTP API with uvicorn.

Usage:
    ai-daily-server [--host HOST] [--port PORT] [--reload]

Host and port default to AI_DAILY_HOST / AI_DAILY_PORT. Without
OPENROUTER_API_KEY the server still runs, but only template reports are
generated.
"""

import argparse
import logging
from typing import List, Optional

import uvicorn

from .chains import is_llm_enabled
from .config import LLM_MODEL_NAME, SERVER_HOST, SERVER_PORT

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "GET  /api/health",
    "GET  /api/generate-article",
    "POST /api/generate-article",
    "POST /api/parse-markdown",
    "GET  /metrics",
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve the AI Daily report API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Template reports only
    ai-daily-server

    # LLM rewriting through OpenRouter, listening on all interfaces
    OPENROUTER_API_KEY=... ai-daily-server --host 0.0.0.0 --port 8080
""",
    )
    parser.add_argument("--host", default=SERVER_HOST, help=f"Host to bind to (default: {SERVER_HOST})")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help=f"Port to bind to (default: {SERVER_PORT})")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the API server."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if is_llm_enabled():
        logger.info(f"LLM rewriting enabled with model {LLM_MODEL_NAME}")
    else:
        logger.warning("OPENROUTER_API_KEY not set, only template reports will be generated")

    base_url = f"http://{args.host}:{args.port}"
    print("=" * 60)
    print("AI DAILY REPORT API")
    print("=" * 60)
    for endpoint in ENDPOINTS:
        method, path = endpoint.split()
        print(f"{method:<5} {base_url}{path}")
    print(f"Docs  {base_url}/docs")
    print("=" * 60)

    uvicorn.run(
        "ai_daily.frontend_api:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        factory=True,
    )


if __name__ == "__main__":
    main()
