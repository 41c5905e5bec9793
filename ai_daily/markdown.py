"""Markdown encoding and decoding for generated articles.

The encoder renders a GeneratedArticle into the canonical Markdown shared
with readers. The decoder reads Markdown back into a GeneratedArticle. Its
input is usually LLM output, which may be truncated or loosely formatted,
so it is a flat line classifier rather than a Markdown grammar: every line
that matches no structural pattern simply becomes paragraph text.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional

from .builder import build_empty_article
from .config import (
    CLOSE_LEAD,
    DEFAULT_IMAGE_LABEL,
    DEFAULT_TITLE,
    HERO_IMAGE_ALT,
    PUBLISHED_AT_LABEL,
    QUOTE_ATTRIBUTION_PREFIX,
    SOURCES_HEADING,
)
from .models import (
    ArticleBlock,
    GeneratedArticle,
    HeadingBlock,
    ImageBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
)
from .utils import get_published_at

logger = logging.getLogger(__name__)

IMAGE_PATTERN = re.compile(r"^!\[([^\]]*)\]\(([^)]+)\)")
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.\s+(.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^[-*+]\s+(.*)$")


# ============================================================================
# Encoder
# ============================================================================


def block_to_markdown(block: ArticleBlock) -> List[str]:
    """Render one content block as Markdown lines, including the trailing blank line."""
    if isinstance(block, HeadingBlock):
        prefix = "###" if block.level == 3 else "##"
        lines = [f"{prefix} {block.content}"]
    elif isinstance(block, ParagraphBlock):
        lines = [block.content]
    elif isinstance(block, QuoteBlock):
        lines = [f"> {block.content}"]
        if block.attribution:
            lines.append(f"> {QUOTE_ATTRIBUTION_PREFIX}{block.attribution}")
    elif isinstance(block, ListBlock):
        if block.style == "ordered":
            lines = [f"{index}. {item}" for index, item in enumerate(block.items, 1)]
        else:
            lines = [f"- {item}" for item in block.items]
    elif isinstance(block, ImageBlock):
        label = block.caption or block.alt or DEFAULT_IMAGE_LABEL
        lines = [f"![{label}]({block.url})"]
    elif isinstance(block, LinkBlock):
        link = f"[{block.label}]({block.url})"
        lines = [f"{link}：{block.description}" if block.description else link]
    else:
        raise TypeError(f"Unsupported block type: {type(block).__name__}")
    lines.append("")
    return lines


def article_to_markdown(article: GeneratedArticle) -> str:
    """Render an article as canonical Markdown.

    Args:
        article: The article to render.

    Returns:
        The Markdown text, stripped of leading and trailing whitespace.
    """
    lines: List[str] = [f"# {article.title}"]
    if article.subtitle:
        lines.append(f"_{article.subtitle}_")
    lines.append(f"> {PUBLISHED_AT_LABEL}{article.published_at}")
    lines.append("")
    lines.append(article.excerpt)
    lines.append("")

    if article.hero_image:
        lines.append(f"![{HERO_IMAGE_ALT}]({article.hero_image})")
        lines.append("")

    for block in article.blocks:
        lines.extend(block_to_markdown(block))

    if article.sources:
        lines.append(f"## {SOURCES_HEADING}")
        lines.append("")
        lines.extend(f"- [{source.title}]({source.url})" for source in article.sources)
        lines.append("")

    return "\n".join(lines).strip()


# ============================================================================
# Decoder
# ============================================================================


class MarkdownArticleParser:
    """Single-pass line scanner that rebuilds an article from Markdown.

    The scanner keeps two open buffers, one for the paragraph being
    assembled and one for the list being assembled, and flushes them
    whenever a structural line (heading, image, quote, blank line, ...)
    ends them. Create a fresh parser for every document.
    """

    def __init__(self) -> None:
        self.title: str = DEFAULT_TITLE
        self.subtitle: Optional[str] = None
        self.hero_image: Optional[str] = None
        self.encoded_excerpt: Optional[str] = None
        self.blocks: List[ArticleBlock] = []
        self._paragraph: List[str] = []
        self._list_items: Optional[List[str]] = None
        self._list_ordered = False
        # Set after the encoder's "published at" line until the first block;
        # the paragraph that follows it is the encoded excerpt.
        self._expect_excerpt = False
        self._previous_was_quote = False

    # --- buffers -----------------------------------------------------------

    def _emit(self, block: ArticleBlock) -> None:
        self._expect_excerpt = False
        self.blocks.append(block)

    def flush_paragraph(self) -> None:
        if not self._paragraph:
            return
        content = "\n".join(self._paragraph).strip()
        self._paragraph = []
        if not content:
            return
        if self._expect_excerpt:
            self.encoded_excerpt = content
            self._expect_excerpt = False
            return
        self._emit(ParagraphBlock(content=content))

    def flush_list(self) -> None:
        if self._list_items:
            style = "ordered" if self._list_ordered else "unordered"
            self._emit(ListBlock(style=style, items=self._list_items))
        self._list_items = None
        self._list_ordered = False

    def flush_all(self) -> None:
        self.flush_paragraph()
        self.flush_list()

    def _add_list_item(self, item: str, ordered: bool) -> None:
        self.flush_paragraph()
        if self._list_items is not None and self._list_ordered != ordered:
            self.flush_list()
        if self._list_items is None:
            self._list_items = []
            self._list_ordered = ordered
        self._list_items.append(item.strip())

    # --- line classification ----------------------------------------------

    def _handle_quote(self, text: str) -> None:
        self.flush_all()
        if text.startswith(PUBLISHED_AT_LABEL) and not self.blocks:
            self._expect_excerpt = True
            return
        last = self.blocks[-1] if self.blocks else None
        if (
            self._previous_was_quote
            and text.startswith(QUOTE_ATTRIBUTION_PREFIX)
            and isinstance(last, QuoteBlock)
            and last.attribution is None
        ):
            attribution = text[len(QUOTE_ATTRIBUTION_PREFIX):].strip()
            self.blocks[-1] = last.model_copy(update={"attribution": attribution or None})
            return
        self._emit(QuoteBlock(content=text))

    def feed_line(self, line: str) -> None:
        """Classify one line and update the parser state."""
        trimmed = line.rstrip()
        is_quote = False

        if line.startswith("# "):
            self.flush_all()
            self.title = re.sub(r"^#\s*", "", trimmed).strip() or self.title
        elif (
            self.subtitle is None
            and len(trimmed) > 2
            and trimmed.startswith("_")
            and trimmed.endswith("_")
        ):
            self.flush_all()
            self.subtitle = trimmed[1:-1].strip() or None
        elif IMAGE_PATTERN.match(line):
            alt, url = IMAGE_PATTERN.match(line).groups()
            alt, url = alt.strip(), url.strip()
            self.flush_all()
            if self.hero_image is None:
                self.hero_image = url
            # Only the hero line of the preamble is metadata; a body image keeps its block.
            if alt != HERO_IMAGE_ALT or self.blocks:
                self._emit(ImageBlock(url=url, alt=alt or None, caption=alt or None))
        elif not trimmed:
            self.flush_all()
        elif trimmed.startswith("## "):
            self.flush_all()
            self._emit(HeadingBlock(level=2, content=trimmed[3:].strip()))
        elif trimmed.startswith("### "):
            self.flush_all()
            self._emit(HeadingBlock(level=3, content=trimmed[4:].strip()))
        elif trimmed.startswith(">"):
            self._handle_quote(re.sub(r"^>\s?", "", trimmed).strip())
            is_quote = True
        elif ORDERED_ITEM_PATTERN.match(trimmed):
            self._add_list_item(ORDERED_ITEM_PATTERN.match(trimmed).group(1), ordered=True)
        elif UNORDERED_ITEM_PATTERN.match(trimmed):
            self._add_list_item(UNORDERED_ITEM_PATTERN.match(trimmed).group(1), ordered=False)
        else:
            if self._list_items is not None:
                self.flush_list()
            self._paragraph.append(trimmed)

        self._previous_was_quote = is_quote

    def _excerpt_repeated(self, excerpt: str) -> bool:
        """Whether the excerpt text also appears as the subtitle or in the body paragraphs."""
        squashed = re.sub(r"\s+", "", excerpt)
        if self.subtitle and re.sub(r"\s+", "", self.subtitle) == squashed:
            return True
        body = "".join(
            re.sub(r"\s+", "", block.content) for block in self.blocks if isinstance(block, ParagraphBlock)
        )
        return squashed in body

    def finish(self, now: Optional[datetime] = None) -> GeneratedArticle:
        """Flush open buffers and assemble the article.

        An encoded excerpt that is not repeated in the body was real content
        and is restored as the first block.
        """
        self.flush_all()

        blocks = list(self.blocks)
        if self.encoded_excerpt is not None and not self._excerpt_repeated(self.encoded_excerpt):
            # LLM output may carry a date line of its own; the paragraph after
            # it is then body text, usually the intro lead.
            blocks.insert(0, ParagraphBlock(content=self.encoded_excerpt))
            self.encoded_excerpt = None
        first_paragraph = next((block for block in blocks if isinstance(block, ParagraphBlock)), None)

        has_closing = any(isinstance(block, ParagraphBlock) and CLOSE_LEAD in block.content for block in blocks)
        if not has_closing:
            logger.debug("Closing sentence missing from markdown, appending it")
            blocks.append(ParagraphBlock(content=CLOSE_LEAD))

        fallback = build_empty_article(now)
        if first_paragraph is not None:
            paragraph_excerpt = first_paragraph.content
        else:
            paragraph_excerpt = fallback.excerpt

        return GeneratedArticle(
            title=self.title,
            subtitle=self.subtitle,
            excerpt=self.subtitle or self.encoded_excerpt or paragraph_excerpt,
            published_at=get_published_at(now, with_weekday=False),
            hero_image=self.hero_image,
            blocks=blocks or fallback.blocks,
            sources=[],
        )


def extract_article_from_markdown(markdown: str, now: Optional[datetime] = None) -> GeneratedArticle:
    """Parse Markdown (typically LLM output) into a GeneratedArticle.

    Malformed lines become paragraph text, a missing closing sentence is
    appended, and the publish date is always recomputed.

    Args:
        markdown: The Markdown text. A continuation may have been
            concatenated onto the first draft with a blank line.
        now: Date used for the publish date (default: now).

    Returns:
        A GeneratedArticle with at least one block.
    """
    parser = MarkdownArticleParser()
    for line in re.split(r"\r?\n", markdown):
        parser.feed_line(line)
    return parser.finish(now)
