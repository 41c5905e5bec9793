"""Tests for the AI Daily package."""


def test_imports():
    """Test that all modules can be imported."""
    from ai_daily import (
        CLOSE_LEAD,
        INTRO_LEAD,
        GeneratedArticle,
        Topic,
        article_to_markdown,
        build_template_article,
        extract_article_from_markdown,
        generate_article,
        split_into_sentences,
    )
    assert True


def test_shared_leads():
    """Test that the intro and closing sentences are non-empty and distinct."""
    from ai_daily import CLOSE_LEAD, INTRO_LEAD

    assert INTRO_LEAD and CLOSE_LEAD
    assert INTRO_LEAD != CLOSE_LEAD


def test_topic_model_aliases():
    """Test that Topic accepts camelCase and snake_case fields."""
    from ai_daily import Topic

    camel = Topic(id=1, title="T", sourceUrl="https://s", publishedAt="2024-03-15")
    snake = Topic(id=1, title="T", source_url="https://s", published_at="2024-03-15")
    assert camel == snake
    assert camel.summary == ""
    assert camel.image == ""


def test_article_blocks_discriminated():
    """Test that blocks are parsed from dicts by their type field."""
    from ai_daily import GeneratedArticle, HeadingBlock, LinkBlock, ListBlock, QuoteBlock

    article = GeneratedArticle.model_validate(
        {
            "title": "T",
            "excerpt": "E",
            "publishedAt": "D",
            "blocks": [
                {"type": "heading", "level": 3, "content": "H"},
                {"type": "quote", "content": "Q", "attribution": "A"},
                {"type": "list", "items": ["x"]},
                {"type": "link", "label": "L", "url": "https://l"},
            ],
        }
    )
    assert isinstance(article.blocks[0], HeadingBlock)
    assert article.blocks[0].level == 3
    assert isinstance(article.blocks[1], QuoteBlock)
    assert isinstance(article.blocks[2], ListBlock)
    assert article.blocks[2].style == "unordered"
    assert isinstance(article.blocks[3], LinkBlock)
    assert article.sources == []
    assert article.model_dump(by_alias=True)["publishedAt"] == "D"
