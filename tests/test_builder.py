"""Tests for the template article builder."""

from datetime import datetime

import pytest

from ai_daily.builder import build_empty_article, build_template_article, build_topic_blocks, pick_hero_image
from ai_daily.config import (
    CLOSE_LEAD,
    DEFAULT_SUBTITLE,
    DEFAULT_TITLE,
    EMPTY_EXPLANATION,
    FALLBACK_PARAGRAPH,
    IMAGE_CAPTION,
    INTRO_LEAD,
)
from ai_daily.models import HeadingBlock, ImageBlock, ParagraphBlock, Topic

NOW = datetime(2024, 3, 15, 9, 30)


@pytest.fixture
def topics():
    """Three topics with distinct titles, one placeholder image."""
    return [
        Topic(
            id=1,
            title="OpenAI 发布新模型",
            summary="新模型更快。价格更低！\n开发者可以立即试用。",
            url="https://example.com/1",
            image="https://placehold.co/600x400",
        ),
        Topic(
            id=2,
            title="谷歌开源推理框架",
            summary="框架支持多种硬件。",
            url="https://example.com/2",
            image="https://cdn.example.com/2.png",
        ),
        Topic(
            id=3,
            title="芯片出口新规",
            summary="",
            url="https://example.com/3",
            image="",
        ),
    ]


class TestEmptyInput:
    """Tests for the placeholder article."""

    def test_empty_article(self):
        """Test that no topics yields the fixed placeholder article."""
        article = build_template_article([], now=NOW)
        assert article.title == DEFAULT_TITLE
        assert [block.content for block in article.blocks] == [INTRO_LEAD, EMPTY_EXPLANATION]
        assert all(isinstance(block, ParagraphBlock) for block in article.blocks)
        assert article.hero_image is None
        assert article.sources == []

    def test_build_empty_article_matches(self):
        assert build_empty_article(NOW) == build_template_article([], now=NOW)


class TestTemplateArticle:
    """Tests for build_template_article with topics."""

    def test_title_and_metadata(self, topics):
        article = build_template_article(topics, now=NOW)
        assert article.published_at == "2024年3月15日星期五"
        assert article.title == "今日 AI 观察｜2024年3月15日星期五"
        assert article.subtitle == DEFAULT_SUBTITLE
        assert article.sources == []

    def test_intro_and_excerpt(self, topics):
        article = build_template_article(topics, now=NOW)
        assert article.blocks[0].content == INTRO_LEAD
        assert "3 条" in article.blocks[1].content
        assert article.excerpt == article.blocks[1].content

    def test_closing_paragraph_last(self, topics):
        article = build_template_article(topics, now=NOW)
        assert isinstance(article.blocks[-1], ParagraphBlock)
        assert article.blocks[-1].content == CLOSE_LEAD

    def test_heading_order(self, topics):
        """Test that headings follow the input order."""
        article = build_template_article(topics, now=NOW)
        headings = [block.content for block in article.blocks if isinstance(block, HeadingBlock)]
        assert headings == ["1. OpenAI 发布新模型", "2. 谷歌开源推理框架", "3. 芯片出口新规"]
        positions = [
            next(i for i, block in enumerate(article.blocks) if isinstance(block, HeadingBlock) and t.title in block.content)
            for t in topics
        ]
        assert positions == sorted(positions)

    def test_hero_image_skips_placeholder(self, topics):
        article = build_template_article(topics, now=NOW)
        assert article.hero_image == "https://cdn.example.com/2.png"

    def test_only_real_images_become_blocks(self, topics):
        article = build_template_article(topics, now=NOW)
        images = [block for block in article.blocks if isinstance(block, ImageBlock)]
        assert len(images) == 1
        assert images[0].url == "https://cdn.example.com/2.png"
        assert images[0].alt == "谷歌开源推理框架"
        assert images[0].caption == IMAGE_CAPTION

    def test_at_least_one_block(self, topics):
        for subset in ([], topics[:1], topics):
            assert len(build_template_article(subset, now=NOW).blocks) >= 1


class TestTopicBlocks:
    """Tests for build_topic_blocks."""

    def test_single_topic_empty_summary(self):
        """Test the fallback paragraph for a topic without summary."""
        article = build_template_article([Topic(id=1, title="X", summary="")], now=NOW)
        assert [block.type for block in article.blocks] == [
            "paragraph",
            "paragraph",
            "heading",
            "paragraph",
            "paragraph",
        ]
        assert article.blocks[2].content == "1. X"
        assert article.blocks[3].content == FALLBACK_PARAGRAPH
        assert article.blocks[4].content == CLOSE_LEAD
        assert article.hero_image is None

    def test_one_paragraph_per_sentence(self, topics):
        blocks = build_topic_blocks(topics[0], 0)
        assert [block.type for block in blocks] == ["heading", "paragraph", "paragraph", "paragraph"]
        assert [block.content for block in blocks[1:]] == ["新模型更快。", "价格更低！", "开发者可以立即试用。"]

    def test_index_is_one_based(self, topics):
        assert build_topic_blocks(topics[2], 4)[0].content == "5. 芯片出口新规"


class TestPickHeroImage:
    """Tests for pick_hero_image."""

    def test_none_when_all_placeholder(self):
        topics = [Topic(id=1, title="a", image="https://placehold.co/1"), Topic(id=2, title="b")]
        assert pick_hero_image(topics) is None

    def test_first_real_image_wins(self):
        topics = [
            Topic(id=1, title="a", image="https://img/1.png"),
            Topic(id=2, title="b", image="https://img/2.png"),
        ]
        assert pick_hero_image(topics) == "https://img/1.png"
