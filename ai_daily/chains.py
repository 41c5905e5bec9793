"""LangChain chains for rewriting curated topics into a polished daily report.

The LLM path sends the topics to an OpenRouter-hosted model, asks for a
continuation when the draft stops before the closing sentence, and decodes
the Markdown it gets back. ``generate_article`` wraps it so that any failure
falls back to the template article.
"""

import logging
import os
from typing import Any, List, Optional, Sequence

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from .builder import build_template_article
from .config import (
    CLOSE_LEAD,
    INTRO_LEAD,
    LLM_CONTINUATION_MAX_TOKENS,
    LLM_MAX_TOKENS,
    LLM_MODEL_NAME,
    LLM_TEMPERATURE,
    OPENROUTER_APP_TITLE,
    OPENROUTER_BASE_URL,
    OPENROUTER_SITE_URL,
)
from .markdown import article_to_markdown, extract_article_from_markdown
from .metrics import record_article_generated, record_llm_request, traced, track_markdown_decode
from .models import GeneratedArticle, Topic
from .utils import is_placeholder_image

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "\n".join(
    [
        "你是一位资深的中文科技媒体主笔，擅长用微信公众号文章风格写 AI 日报。",
        "请根据我提供的素材产出一篇完整的微信风格稿件，包含标题、导语、分段小标题、结尾金句。",
        "开篇第一句必须写“{intro_lead}”，全文保持真诚、客观、理性的表达，专注于事件本身的价值、风险与影响，句子宜短、贴近日常口语。",
        "每个句子单独成段，用空行分隔，确保阅读节奏干净。",
        "严禁在文章中保留原文链接或引用原始 URL。",
        "全文需要以“{close_lead}”结尾。",
        "请确保文章结构清晰，逻辑顺畅，以数据、事实和思考支撑观点，避免夸张语气与营销化措辞。",
        "输出必须是 Markdown，第一行是标题（# 开头），第二行可选写一句副标题。",
    ]
)

CONTINUATION_PROMPT = "请延续上文，补完尚未完成的部分，直到以“{close_lead}”收束。只输出续写内容，不要重复已写段落。"


class ArticleGenerationError(ValueError):
    """Raised when the LLM path cannot produce an article."""


class GenerationResult(BaseModel):
    """Outcome of a generation request.

    Attributes:
        article: The article to show; the template article when the LLM failed.
        markdown: Markdown rendering of ``article``.
        llm_used: Whether ``article`` came from the LLM.
        error: User-facing error message when the LLM path failed.
    """

    article: GeneratedArticle
    markdown: str
    llm_used: bool = False
    error: Optional[str] = None


def is_llm_enabled() -> bool:
    """Return True when an OpenRouter API key is configured."""
    return bool(os.environ.get("OPENROUTER_API_KEY"))


def get_llm(max_tokens: int = LLM_MAX_TOKENS, temperature: float = LLM_TEMPERATURE) -> ChatOpenAI:
    """Get a ChatOpenAI instance pointed at OpenRouter.

    Args:
        max_tokens: Completion token budget.
        temperature: The temperature setting for the LLM.

    Returns:
        Configured ChatOpenAI instance.

    Note:
        The model can be configured via the OPENROUTER_MODEL environment
        variable and the endpoint via OPENROUTER_BASE_URL.
    """
    return ChatOpenAI(
        model=LLM_MODEL_NAME,
        temperature=temperature,
        max_tokens=max_tokens,
        api_key=os.environ.get("OPENROUTER_API_KEY"),
        base_url=OPENROUTER_BASE_URL,
        default_headers={
            "HTTP-Referer": OPENROUTER_SITE_URL,
            "X-Title": OPENROUTER_APP_TITLE,
        },
    )


def sanitize_topics(topics: Sequence[Topic]) -> List[Topic]:
    """Strip what the model must not see: videos, placeholder images, padded URLs."""
    return [
        topic.model_copy(
            update={
                "url": topic.url.strip(),
                "image": "" if is_placeholder_image(topic.image) else topic.image,
                "video": None,
            }
        )
        for topic in topics
    ]


def build_llm_prompt(topics: Sequence[Topic]) -> str:
    """Build the user prompt describing the curated material and writing rules.

    Args:
        topics: Curated topics in reading order.

    Returns:
        The prompt text.
    """
    sections = []
    for index, topic in enumerate(sanitize_topics(topics), 1):
        segments = [
            f"### 选题 {index}：{topic.title}",
            f"发布时间：{topic.published_at}" if topic.published_at else "",
            f"配图地址：{topic.image}" if topic.image else "",
            f"素材摘要：\n{topic.summary}" if topic.summary else "",
        ]
        sections.append("\n".join(segment for segment in segments if segment))

    return "\n\n".join(
        [
            "以下是我筛选后的资讯素材，请据此创作一篇完整的 AI 日报文章：",
            "\n\n".join(sections),
            "写作要求：",
            "- 文章必须是原创，不能照搬素材原文段落或列出外部链接。",
            f"- 开篇第一句必须写“{INTRO_LEAD}”，整体保持真诚、客观、理性的科技评论语气。",
            "- 先写一段导语，总结当天 AI 领域的核心议题与对行业的实际价值或影响。",
            "- 按素材顺序撰写正文，每个主题以“## 小标题”开头，后接 2-3 段叙述，强调事实、价值判断、潜在风险或机会，可穿插简洁要点列表。",
            "- 正文句子宜短且直接，贴近日常表达，每个句子独立成段，并用空行分隔。",
            "- 若素材提供“配图地址”，请在对应段落中插入 Markdown 图片（示例：`![说明](URL)`），说明可结合主题亮点。",
            f"- 结尾需包含一句“{CLOSE_LEAD}”，并回顾当天的核心收获或需要跟进的要点。",
            "- 用词保持克制，禁止夸张、营销或 emoji 表述。",
            "- 严禁输出任何 URL、二维码提示或引导读者点击链接。",
            "- 输出为 Markdown 格式。",
        ]
    )


def _message_text(message: Any) -> str:
    """Extract plain text from a chat model response."""
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict):
                parts.append(part.get("text") or "")
        content = "".join(parts)
    return (content or "").strip()


def _invoke(chain: Any, variables: dict, kind: str) -> str:
    try:
        response = chain.invoke(variables)
    except Exception as e:
        record_llm_request(kind, "error")
        logger.error(f"LLM {kind} request failed: {e}")
        raise ArticleGenerationError(f"LLM request failed: {e}") from e

    text = _message_text(response)
    if not text:
        record_llm_request(kind, "empty")
        logger.error(f"LLM {kind} request returned empty content")
        raise ArticleGenerationError("LLM returned empty content")

    record_llm_request(kind, "success")
    return text


@traced("article.rewrite")
def rewrite_article(
    topics: Sequence[Topic],
    llm: Optional[Any] = None,
    continuation_llm: Optional[Any] = None,
) -> GeneratedArticle:
    """Rewrite curated topics into a daily report with the LLM.

    If the first draft does not end with the closing sentence, a
    continuation is requested and appended after a blank line before the
    combined text is decoded.

    Args:
        topics: Curated topics in reading order.
        llm: Chat model for the first draft (default: get_llm()).
        continuation_llm: Chat model for the continuation (default: a
            get_llm() with a smaller token budget).

    Returns:
        The decoded GeneratedArticle.

    Raises:
        ArticleGenerationError: If the LLM is not configured, fails, returns
            nothing, or its output cannot be parsed.
    """
    if llm is None:
        if not is_llm_enabled():
            raise ArticleGenerationError("OPENROUTER_API_KEY is not configured")
        llm = get_llm()
        if continuation_llm is None:
            continuation_llm = get_llm(max_tokens=LLM_CONTINUATION_MAX_TOKENS)
    if continuation_llm is None:
        continuation_llm = llm

    variables = {
        "intro_lead": INTRO_LEAD,
        "close_lead": CLOSE_LEAD,
        "material": build_llm_prompt(topics),
    }

    prompt = ChatPromptTemplate.from_messages([("system", SYSTEM_PROMPT), ("human", "{material}")])
    combined = _invoke(prompt | llm, variables, "initial")

    if CLOSE_LEAD not in combined:
        logger.info("Draft stops before the closing sentence, requesting a continuation")
        continuation_prompt = ChatPromptTemplate.from_messages(
            [
                ("system", SYSTEM_PROMPT),
                ("human", "{material}"),
                ("ai", "{draft}"),
                ("human", CONTINUATION_PROMPT),
            ]
        )
        continuation = _invoke(continuation_prompt | continuation_llm, {**variables, "draft": combined}, "continuation")
        combined = f"{combined}\n\n{continuation}"

    try:
        with track_markdown_decode():
            return extract_article_from_markdown(combined.strip())
    except Exception as e:
        logger.exception("Failed to extract article from markdown")
        raise ArticleGenerationError("Failed to parse the generated markdown") from e


def generate_article(
    topics: Sequence[Topic],
    use_llm: bool = False,
    llm: Optional[Any] = None,
    continuation_llm: Optional[Any] = None,
) -> GenerationResult:
    """Generate a daily report, falling back to the template on any LLM failure.

    Args:
        topics: Curated topics in reading order.
        use_llm: Whether to try the LLM rewrite first.
        llm: Optional chat model override for the first draft.
        continuation_llm: Optional chat model override for continuations.

    Returns:
        GenerationResult whose article is never empty.
    """
    base_article = build_template_article(topics)

    if not use_llm:
        record_article_generated("template")
        return GenerationResult(article=base_article, markdown=article_to_markdown(base_article))

    try:
        article = rewrite_article(topics, llm=llm, continuation_llm=continuation_llm)
    except ArticleGenerationError as e:
        logger.warning(f"LLM rewrite failed, returning template article: {e}")
        record_article_generated("fallback")
        return GenerationResult(
            article=base_article,
            markdown=article_to_markdown(base_article),
            llm_used=False,
            error=str(e),
        )

    record_article_generated("llm")
    return GenerationResult(article=article, markdown=article_to_markdown(article), llm_used=True)
