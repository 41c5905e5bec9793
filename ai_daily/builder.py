"""Template builder: turns curated topics into a daily report article.

This is the deterministic, LLM-free path. It always succeeds and is the
fallback whenever the rewrite path fails.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .config import (
    CLOSE_LEAD,
    DEFAULT_SUBTITLE,
    DEFAULT_TITLE,
    EMPTY_EXPLANATION,
    EMPTY_SUBTITLE,
    FALLBACK_PARAGRAPH,
    IMAGE_CAPTION,
    INTRO_LEAD,
    TITLE_PREFIX,
    TOPIC_COUNT_TEMPLATE,
)
from .models import ArticleBlock, GeneratedArticle, HeadingBlock, ImageBlock, ParagraphBlock, Topic
from .utils import get_published_at, is_placeholder_image, sanitize_summary

logger = logging.getLogger(__name__)


def pick_hero_image(topics: Sequence[Topic]) -> Optional[str]:
    """Pick the first real (non-placeholder) image among the topics.

    Args:
        topics: Topics in reading order.

    Returns:
        The image URL, or None when no topic has a real image.
    """
    for topic in topics:
        if not is_placeholder_image(topic.image):
            return topic.image
    return None


def build_topic_blocks(topic: Topic, index: int) -> List[ArticleBlock]:
    """Build the heading, paragraphs and image for one topic.

    Args:
        topic: The topic to render.
        index: Zero-based position of the topic in the article.

    Returns:
        Blocks for this topic in reading order.
    """
    blocks: List[ArticleBlock] = [HeadingBlock(level=2, content=f"{index + 1}. {topic.title}")]

    sentences = sanitize_summary(topic.summary)
    if sentences:
        blocks.extend(ParagraphBlock(content=sentence) for sentence in sentences)
    else:
        blocks.append(ParagraphBlock(content=FALLBACK_PARAGRAPH))

    if not is_placeholder_image(topic.image):
        blocks.append(ImageBlock(url=topic.image, alt=topic.title, caption=IMAGE_CAPTION))

    return blocks


def build_empty_article(now: Optional[datetime] = None) -> GeneratedArticle:
    """Build the placeholder article shown before any topic is selected."""
    intro = [INTRO_LEAD, EMPTY_EXPLANATION]
    return GeneratedArticle(
        title=DEFAULT_TITLE,
        subtitle=EMPTY_SUBTITLE,
        excerpt=" ".join(intro),
        published_at=get_published_at(now),
        blocks=[ParagraphBlock(content=content) for content in intro],
        sources=[],
    )


def build_template_article(topics: Sequence[Topic], now: Optional[datetime] = None) -> GeneratedArticle:
    """Build a daily report from curated topics without calling an LLM.

    Args:
        topics: Curated topics; input order is the article's reading order.
        now: Date used for the title and publish date (default: now).

    Returns:
        A GeneratedArticle with at least one block.
    """
    if not topics:
        return build_empty_article(now)

    published_at = get_published_at(now)
    intro = [INTRO_LEAD, TOPIC_COUNT_TEMPLATE.format(count=len(topics))]
    excerpt = intro[-1]

    blocks: List[ArticleBlock] = [ParagraphBlock(content=content) for content in intro]
    for index, topic in enumerate(topics):
        blocks.extend(build_topic_blocks(topic, index))
    blocks.append(ParagraphBlock(content=CLOSE_LEAD))

    logger.debug(f"Built template article from {len(topics)} topics ({len(blocks)} blocks)")

    return GeneratedArticle(
        title=f"{TITLE_PREFIX}{published_at}",
        subtitle=DEFAULT_SUBTITLE,
        excerpt=excerpt,
        published_at=published_at,
        hero_image=pick_hero_image(topics),
        blocks=blocks,
        sources=[],
    )
