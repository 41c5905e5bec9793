"""AI Daily package.

Requires Python 3.9 or higher.
"""

from .builder import build_empty_article, build_template_article, pick_hero_image
from .chains import (
    ArticleGenerationError,
    GenerationResult,
    build_llm_prompt,
    generate_article,
    is_llm_enabled,
    rewrite_article,
)
from .config import CLOSE_LEAD, DEFAULT_TITLE, INTRO_LEAD, LLM_MODEL_NAME
from .markdown import MarkdownArticleParser, article_to_markdown, extract_article_from_markdown
from .models import (
    ArticleBlock,
    GeneratedArticle,
    HeadingBlock,
    ImageBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    SourceLink,
    Topic,
)
from .utils import generate_filename, get_published_at, sanitize_summary, slugify, split_into_sentences

__all__ = [
    # Builder
    "build_empty_article",
    "build_template_article",
    "pick_hero_image",
    # Chains
    "ArticleGenerationError",
    "GenerationResult",
    "build_llm_prompt",
    "generate_article",
    "is_llm_enabled",
    "rewrite_article",
    # Config
    "CLOSE_LEAD",
    "DEFAULT_TITLE",
    "INTRO_LEAD",
    "LLM_MODEL_NAME",
    # Markdown
    "MarkdownArticleParser",
    "article_to_markdown",
    "extract_article_from_markdown",
    # Models
    "ArticleBlock",
    "GeneratedArticle",
    "HeadingBlock",
    "ImageBlock",
    "LinkBlock",
    "ListBlock",
    "ParagraphBlock",
    "QuoteBlock",
    "SourceLink",
    "Topic",
    # Utils
    "generate_filename",
    "get_published_at",
    "sanitize_summary",
    "slugify",
    "split_into_sentences",
]
