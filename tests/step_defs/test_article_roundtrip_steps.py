"""Step definitions for article round trip BDD tests."""

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from ai_daily.builder import build_template_article
from ai_daily.config import CLOSE_LEAD
from ai_daily.markdown import article_to_markdown, extract_article_from_markdown
from ai_daily.models import HeadingBlock, ImageBlock, ListBlock, ParagraphBlock, Topic

scenarios("../features/article_roundtrip.feature")


def block_signature(block):
    if isinstance(block, ListBlock):
        return (block.type, block.style, tuple(block.items))
    if isinstance(block, ImageBlock):
        return (block.type, block.url)
    return (block.type, block.content)


@pytest.fixture
def context():
    """Shared test context."""
    return {}


# Given steps
@given(parsers.parse("{count:d} curated topics with distinct titles"))
def curated_topics(context, count):
    """Create curated topics."""
    context["topics"] = [
        Topic(
            id=i,
            title=f"话题 {i}",
            summary=f"话题 {i} 的第一句。第二句！",
            url=f"https://example.com/{i}",
            image=f"https://cdn.example.com/{i}.png" if i % 2 else "https://placehold.co/600x400",
        )
        for i in range(1, count + 1)
    ]


@given(parsers.parse('the LLM markdown "{markdown}"'))
def llm_markdown(context, markdown):
    """Store raw markdown, unescaping line breaks from the feature file."""
    context["markdown"] = markdown.replace("\\n", "\n")


# When steps
@when("I build the template article")
def build_article(context):
    context["article"] = build_template_article(context["topics"])


@when("I encode it to markdown and decode it again")
def round_trip(context):
    context["decoded"] = extract_article_from_markdown(article_to_markdown(context["article"]))


@when("I decode the markdown")
def decode_markdown(context):
    context["decoded"] = extract_article_from_markdown(context["markdown"])


# Then steps
@then("the decoded blocks match the original blocks")
def blocks_match(context):
    original = [block_signature(block) for block in context["article"].blocks]
    decoded = [block_signature(block) for block in context["decoded"].blocks]
    assert decoded == original


@then("the headings appear in topic order")
def headings_in_order(context):
    headings = [block.content for block in context["decoded"].blocks if isinstance(block, HeadingBlock)]
    assert headings == [f"{i}. {topic.title}" for i, topic in enumerate(context["topics"], 1)]


@then(parsers.parse('the article title is "{title}"'))
def check_title(context, title):
    assert context["decoded"].title == title


@then(parsers.parse("the article has {count:d} blocks"))
def check_block_count(context, count):
    assert len(context["decoded"].blocks) == count


@then("the last block is the closing sentence")
def check_closing(context):
    assert context["decoded"].blocks[-1] == ParagraphBlock(content=CLOSE_LEAD)


@then(parsers.parse('the first list is {style} with items "{items}"'))
def check_first_list(context, style, items):
    lists = [block for block in context["decoded"].blocks if isinstance(block, ListBlock)]
    assert lists[0] == ListBlock(style=style, items=items.split(","))


@then(parsers.parse('the second list is {style} with items "{items}"'))
def check_second_list(context, style, items):
    lists = [block for block in context["decoded"].blocks if isinstance(block, ListBlock)]
    assert lists[1] == ListBlock(style=style, items=items.split(","))
