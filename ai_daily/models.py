"""Pydantic models for topics and generated articles.

Content blocks form a tagged union discriminated on their ``type`` field,
so serialized articles carry the same shape the presentation layer reads.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Topic(BaseModel):
    """A single curated news item produced by the scraper."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    summary: str = ""
    url: str = ""
    image: str = ""
    video: Optional[str] = None
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    published_at: Optional[str] = Field(default=None, alias="publishedAt")


class HeadingBlock(BaseModel):
    """A section heading (level 2 or 3)."""

    type: Literal["heading"] = "heading"
    level: Literal[2, 3] = 2
    content: str


class ParagraphBlock(BaseModel):
    """A single paragraph of body text."""

    type: Literal["paragraph"] = "paragraph"
    content: str


class ImageBlock(BaseModel):
    """An inline image with optional alt text and caption."""

    type: Literal["image"] = "image"
    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None


class QuoteBlock(BaseModel):
    """A block quote with optional attribution."""

    type: Literal["quote"] = "quote"
    content: str
    attribution: Optional[str] = None


class ListBlock(BaseModel):
    """An ordered or unordered list of items."""

    type: Literal["list"] = "list"
    style: Literal["ordered", "unordered"] = "unordered"
    items: List[str] = Field(default_factory=list)


class LinkBlock(BaseModel):
    """A labelled link. Only produced programmatically, never decoded."""

    type: Literal["link"] = "link"
    label: str
    url: str
    description: Optional[str] = None


ArticleBlock = Annotated[
    Union[HeadingBlock, ParagraphBlock, ImageBlock, QuoteBlock, ListBlock, LinkBlock],
    Field(discriminator="type"),
]


class SourceLink(BaseModel):
    """A provenance entry listed at the end of an article."""

    title: str
    url: str


class GeneratedArticle(BaseModel):
    """The structured, block-based representation of a daily report.

    Attributes:
        title: Article title, never empty.
        subtitle: Optional one-line subtitle.
        excerpt: Teaser text shown in previews.
        published_at: Localized date string computed at construction time.
        hero_image: Optional image promoted to the top of the article.
        blocks: Content blocks in reading order.
        sources: Provenance links (reserved, currently always empty).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    subtitle: Optional[str] = None
    excerpt: str
    published_at: str = Field(alias="publishedAt")
    hero_image: Optional[str] = Field(default=None, alias="heroImage")
    blocks: List[ArticleBlock] = Field(default_factory=list)
    sources: List[SourceLink] = Field(default_factory=list)
