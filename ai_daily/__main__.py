#!/usr/bin/env python3
"""AI Daily - CLI entrypoint for rendering a daily report from curated topics."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from .chains import generate_article, is_llm_enabled
from .config import DEFAULT_OUTPUT_DIR
from .models import Topic
from .utils import generate_filename

logger = logging.getLogger(__name__)


def load_topics(path: str) -> List[Topic]:
    """Load curated topics from a JSON file containing an array of topic records.

    Args:
        path: Path to the JSON file.

    Returns:
        Topics in file order.

    Raises:
        ValueError: If the file is not valid JSON or not a list of topics.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
        return TypeAdapter(List[Topic]).validate_json(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid topic file '{path}': {e}") from e


def main():
    """Main entry point for the AI Daily CLI."""
    parser = argparse.ArgumentParser(
        description="AI Daily - Render curated AI news into a Markdown daily report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Template report written to ./reports
  python -m ai_daily topics.json

  # Polish the report with the LLM (needs OPENROUTER_API_KEY)
  python -m ai_daily topics.json --use-llm

  # Print the Markdown instead of writing a file
  python -m ai_daily topics.json --stdout
""",
    )
    parser.add_argument("topics_file", type=str, help="JSON file with an array of topic records")
    parser.add_argument(
        "--use-llm",
        action="store_true",
        help="Rewrite the report with the LLM, falling back to the template on failure",
    )
    parser.add_argument(
        "--out-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for reports (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the Markdown to stdout instead of writing a file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be done without generating anything",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    try:
        topics = load_topics(args.topics_file)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not topics:
        print("Error: No topics found. Select at least one topic before generating a report.")
        sys.exit(1)

    if args.use_llm and not is_llm_enabled():
        print("Warning: OPENROUTER_API_KEY not set - falling back to the template report")

    if args.dry_run:
        print("Dry run mode - would perform the following:")
        print(f"  - Topics: {len(topics)}")
        print(f"  - Use LLM: {args.use_llm and is_llm_enabled()}")
        print(f"  - Output: {'stdout' if args.stdout else args.out_dir}")
        return

    result = generate_article(topics, use_llm=args.use_llm and is_llm_enabled())
    if result.error:
        print(f"Warning: LLM rewrite failed ({result.error}), using the template report")

    if args.stdout:
        print(result.markdown)
        return

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    filepath = out_dir / generate_filename(result.article.title)

    try:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(result.markdown + "\n")
    except (OSError, UnicodeEncodeError) as e:
        print(f"Error: Failed to write report to '{filepath}': {e}")
        sys.exit(1)

    print("=" * 60)
    print("SUCCESS! Daily report generated.")
    print(f"  File: {filepath}")
    print(f"  Title: {result.article.title}")
    print(f"  Blocks: {len(result.article.blocks)}")
    print(f"  LLM used: {result.llm_used}")
    print("=" * 60)


if __name__ == "__main__":
    main()
