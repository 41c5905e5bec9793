"""Prometheus metrics and OpenTelemetry tracing for AI Daily.

This module provides observability instrumentation for report generation:
- Prometheus metrics for generation paths, LLM calls and API requests
- OpenTelemetry tracing for request correlation and debugging

Usage:
    from ai_daily.metrics import record_article_generated, traced

    # Access metrics endpoint at /metrics on the API server
"""

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Optional

from opentelemetry import trace
from prometheus_client import Counter, Histogram, Info

logger = logging.getLogger(__name__)

# ============================================================================
# Prometheus Metrics Definitions
# ============================================================================

# --- Generation Metrics ---
articles_generated_total = Counter(
    "ai_daily_articles_generated_total",
    "Total number of generated articles",
    ["path"],  # template, llm, fallback
)

llm_requests_total = Counter(
    "ai_daily_llm_requests_total",
    "Total number of LLM requests",
    ["kind", "outcome"],  # kind: initial, continuation
)

markdown_decode_seconds = Histogram(
    "ai_daily_markdown_decode_seconds",
    "Markdown decode duration in seconds",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

# --- API Metrics ---
api_requests_total = Counter(
    "ai_daily_api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
)

api_request_duration_seconds = Histogram(
    "ai_daily_api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# --- System Info ---
system_info = Info(
    "ai_daily_system",
    "AI Daily system information",
)


# ============================================================================
# OpenTelemetry Tracing
# ============================================================================

_tracer: Optional[Any] = None


def get_tracer(name: str = "ai_daily") -> Any:
    """Get or create an OpenTelemetry tracer.

    Without a configured SDK the API hands back a no-op tracer.

    Args:
        name: The name of the tracer (typically the module name).

    Returns:
        An OpenTelemetry tracer.
    """
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(name)
    return _tracer


# ============================================================================
# Instrumentation Helpers
# ============================================================================


@contextmanager
def track_markdown_decode() -> Generator[None, None, None]:
    """Context manager timing a Markdown decode inside a span.

    Example:
        with track_markdown_decode():
            article = extract_article_from_markdown(text)
    """
    tracer = get_tracer()
    start_time = time.time()
    with tracer.start_as_current_span("markdown.decode"):
        yield
        markdown_decode_seconds.observe(time.time() - start_time)


def record_article_generated(path: str) -> None:
    """Record which path produced an article.

    Args:
        path: One of template, llm, fallback.
    """
    articles_generated_total.labels(path=path).inc()


def record_llm_request(kind: str, outcome: str) -> None:
    """Record an LLM request.

    Args:
        kind: initial or continuation.
        outcome: success, empty or error.
    """
    llm_requests_total.labels(kind=kind, outcome=outcome).inc()


def track_api_request(method: str, endpoint: str, status_code: int, duration: float) -> None:
    """Record API request metrics.

    Args:
        method: HTTP method.
        endpoint: Request endpoint.
        status_code: Response status code.
        duration: Request duration in seconds.
    """
    api_requests_total.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    api_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def set_system_info(version: str = "0.1.0", **kwargs: Any) -> None:
    """Set system information.

    Args:
        version: The application version.
        **kwargs: Additional info to include.
    """
    info = {"version": version}
    info.update(kwargs)
    system_info.info(info)


def traced(
    name: Optional[str] = None,
    attributes: Optional[dict] = None,
) -> Callable:
    """Decorator to add tracing to a function.

    Args:
        name: Span name (defaults to function name).
        attributes: Additional span attributes.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        span_name = name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer()
            with tracer.start_as_current_span(span_name, attributes=attributes or {}):
                return func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "articles_generated_total",
    "llm_requests_total",
    "markdown_decode_seconds",
    "api_requests_total",
    "api_request_duration_seconds",
    "system_info",
    "get_tracer",
    "track_markdown_decode",
    "record_article_generated",
    "record_llm_request",
    "track_api_request",
    "set_system_info",
    "traced",
]
