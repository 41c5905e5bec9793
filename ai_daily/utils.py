"""Utility functions for the AI Daily report generator."""

import re
from datetime import datetime
from typing import List, Optional

from slugify import slugify as python_slugify

from .config import PLACEHOLDER_IMAGE_PATTERN

# Sentence boundary: after a Chinese or Western terminator, swallowing any
# whitespace that follows it.
_SENTENCE_BOUNDARY = re.compile(r"(?<=[。！？!?.])\s*")
_LINE_BREAKS = re.compile(r"\r\n?|\\n")
_WEEKDAYS = ("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日")


def slugify(text: str, max_length: int = 100) -> str:
    """Convert text to a URL-friendly slug.

    Args:
        text: The text to convert to a slug.
        max_length: Maximum length of the slug (default: 100).

    Returns:
        A URL-friendly slug version of the text.
    """
    return python_slugify(text, max_length=max_length)


def get_date_string(now: Optional[datetime] = None) -> str:
    """Get the current date as a string for filenames.

    Returns:
        Current date in YYYY-MM-DD format.
    """
    return (now or datetime.now()).strftime("%Y-%m-%d")


def get_published_at(now: Optional[datetime] = None, with_weekday: bool = True) -> str:
    """Format a date the way the daily report displays it.

    Args:
        now: The date to format (default: current local time).
        with_weekday: Whether to append the Chinese weekday name.

    Returns:
        A long localized date, e.g. "2024年3月15日星期五".
    """
    now = now or datetime.now()
    text = f"{now.year}年{now.month}月{now.day}日"
    if with_weekday:
        text += _WEEKDAYS[now.weekday()]
    return text


def generate_filename(title: str) -> str:
    """Generate a filename for a rendered report.

    Args:
        title: The title of the article.

    Returns:
        A filename in the format 'YYYY-MM-DD-slug.md'.
    """
    date_str = get_date_string()
    slug = slugify(title) or "report"
    return f"{date_str}-{slug}.md"


def is_placeholder_image(url: Optional[str]) -> bool:
    """Return True when the URL is empty or points at a placeholder image."""
    return not url or bool(PLACEHOLDER_IMAGE_PATTERN.search(url))


def normalize_newlines(text: str) -> str:
    """Turn CRLF, CR and literal backslash-n sequences into real line breaks."""
    return _LINE_BREAKS.sub("\n", text)


def split_into_sentences(paragraph: str) -> List[str]:
    """Split one line of text into sentences, keeping each terminator.

    Args:
        paragraph: A single chunk of text without line breaks.

    Returns:
        Trimmed, non-empty sentences. A non-empty chunk without any usable
        split comes back whole.
    """
    sentences = [part.strip() for part in _SENTENCE_BOUNDARY.split(paragraph)]
    sentences = [sentence for sentence in sentences if sentence]
    if not sentences and paragraph.strip():
        sentences.append(paragraph.strip())
    return sentences


def sanitize_summary(summary: Optional[str]) -> List[str]:
    """Break a topic summary into sentence-level paragraphs.

    The summary is first split on line breaks, then each chunk is split into
    sentences.

    Args:
        summary: Free text, possibly multi-paragraph.

    Returns:
        Ordered list of sentences; empty when the summary has no content.
    """
    if not summary:
        return []
    segments: List[str] = []
    for chunk in normalize_newlines(summary).split("\n"):
        chunk = chunk.strip()
        if chunk:
            segments.extend(split_into_sentences(chunk))
    return segments
