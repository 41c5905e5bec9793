"""Frontend API endpoints for AI Daily.

This module provides RESTful API endpoints for the browser client to:
- Check whether LLM rewriting is available
- Generate a daily report from curated topics (template or LLM)
- Parse LLM or hand-edited Markdown back into the article model
- Prometheus metrics endpoint (/metrics)

Usage:
    from ai_daily.frontend_api import create_app, router

    # Use the router in an existing FastAPI app
    app = FastAPI()
    app.include_router(router, prefix="/api")

    # Or create a standalone app
    app = create_app()
"""

import logging
import time
from typing import Any, List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field

from .chains import generate_article, is_llm_enabled
from .config import LLM_MODEL_NAME
from .markdown import article_to_markdown, extract_article_from_markdown
from .metrics import set_system_info, track_api_request, track_markdown_decode
from .models import GeneratedArticle, Topic

logger = logging.getLogger(__name__)

# Chat model overrides (can be set with configure_services, e.g. in tests)
_llm: Optional[Any] = None
_continuation_llm: Optional[Any] = None

NO_TOPICS_MESSAGE = "请至少选择一条资讯再生成日报。"
LLM_DISABLED_MESSAGE = "未配置 OPENROUTER_API_KEY，无法调用 LLM。"
LLM_FAILED_MESSAGE = "调用 LLM 生成文章失败，已返回模板稿。"
UNEXPECTED_ERROR_MESSAGE = "生成日报时出现问题，请稍后再试。"


# ============================================================================
# Request/Response Models for the API
# ============================================================================


class GenerateArticleRequest(BaseModel):
    """Request body for generating a daily report.

    Attributes:
        topics: Curated topics in reading order.
        use_llm: Whether to rewrite the report with the LLM.
    """

    model_config = ConfigDict(populate_by_name=True)

    topics: List[Topic] = Field(default_factory=list)
    use_llm: bool = Field(default=False, alias="useLLM")


class GenerateArticleResponse(BaseModel):
    """Response for the generate endpoint.

    Attributes:
        article: The generated article (template article on LLM failure).
        markdown: Markdown rendering of the article.
        llm_used: Whether the article came from the LLM.
        error: User-facing error message, if any.
    """

    model_config = ConfigDict(populate_by_name=True)

    article: Optional[GeneratedArticle] = None
    markdown: Optional[str] = None
    llm_used: bool = Field(default=False, alias="llmUsed")
    error: Optional[str] = None


class LLMStatusResponse(BaseModel):
    """Whether the LLM path is configured, and with which model."""

    model_config = ConfigDict(populate_by_name=True)

    open_router_enabled: bool = Field(alias="openRouterEnabled")
    model: str


class ParseMarkdownRequest(BaseModel):
    """Request body for parsing Markdown into an article."""

    markdown: str


class ParseMarkdownResponse(BaseModel):
    """The decoded article and its canonical Markdown."""

    article: GeneratedArticle
    markdown: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    llm_enabled: bool


# ============================================================================
# Dependency Configuration
# ============================================================================


def configure_services(llm: Optional[Any] = None, continuation_llm: Optional[Any] = None) -> None:
    """Override the chat models used by the generate endpoint.

    Args:
        llm: Chat model for first drafts.
        continuation_llm: Chat model for continuations.
    """
    global _llm, _continuation_llm
    if llm is not None:
        _llm = llm
    if continuation_llm is not None:
        _continuation_llm = continuation_llm


def reset_services() -> None:
    """Reset chat model overrides. Useful for testing."""
    global _llm, _continuation_llm
    _llm = None
    _continuation_llm = None


def _json(payload: BaseModel, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


# ============================================================================
# API Router
# ============================================================================

router = APIRouter(tags=["Frontend API"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check the health of the API."""
    return HealthResponse(status="healthy", llm_enabled=is_llm_enabled())


@router.get("/generate-article", response_model=LLMStatusResponse)
async def llm_status() -> LLMStatusResponse:
    """Report whether LLM rewriting is configured."""
    return LLMStatusResponse(open_router_enabled=is_llm_enabled(), model=LLM_MODEL_NAME)


@router.post("/generate-article")
def generate(request: GenerateArticleRequest) -> JSONResponse:
    """Generate a daily report from curated topics.

    Returns:
        200 with the article; 400 when no topics were sent or the LLM is
        requested but not configured; 502 when the LLM failed and the
        template article is returned instead; 500 on unexpected errors.
    """
    if not request.topics:
        return _json(GenerateArticleResponse(error=NO_TOPICS_MESSAGE), status_code=400)

    logger.info(f"Generating article: topics={len(request.topics)}, use_llm={request.use_llm}")

    try:
        if request.use_llm and _llm is None and not is_llm_enabled():
            result = generate_article(request.topics, use_llm=False)
            response = GenerateArticleResponse(
                article=result.article,
                markdown=result.markdown,
                llm_used=False,
                error=LLM_DISABLED_MESSAGE,
            )
            return _json(response, status_code=400)

        result = generate_article(
            request.topics,
            use_llm=request.use_llm,
            llm=_llm,
            continuation_llm=_continuation_llm,
        )
    except Exception:
        logger.exception("Generate article error")
        return _json(GenerateArticleResponse(error=UNEXPECTED_ERROR_MESSAGE), status_code=500)

    response = GenerateArticleResponse(
        article=result.article,
        markdown=result.markdown,
        llm_used=result.llm_used,
        error=(result.error or LLM_FAILED_MESSAGE) if result.error is not None else None,
    )
    return _json(response, status_code=502 if result.error is not None else 200)


@router.post("/parse-markdown")
def parse_markdown(request: ParseMarkdownRequest) -> JSONResponse:
    """Decode Markdown into an article and return its canonical rendering."""
    with track_markdown_decode():
        article = extract_article_from_markdown(request.markdown)
    return _json(ParseMarkdownResponse(article=article, markdown=article_to_markdown(article)))


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    title: str = "AI Daily API",
    description: str = "Turn curated AI news topics into a shareable daily report",
    version: str = "0.1.0",
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """Create a FastAPI application with the frontend API router.

    Args:
        title: API title.
        description: API description.
        version: API version.
        cors_origins: List of allowed CORS origins. Defaults to ["*"] for
            development convenience.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    set_system_info(version=version, model=LLM_MODEL_NAME)

    if cors_origins is None:
        cors_origins = ["*"]
        logger.warning("CORS configured with wildcard origin '*'. " "For production, specify explicit cors_origins.")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Middleware to track API request metrics."""
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        if not request.url.path.startswith("/metrics"):
            track_api_request(
                method=request.method,
                endpoint=request.url.path,
                status_code=response.status_code,
                duration=duration,
            )

        return response

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Expose Prometheus metrics."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    app.include_router(router, prefix="/api")

    return app
