"""Tests for the Prometheus metrics and OpenTelemetry tracing module."""

from prometheus_client import REGISTRY

from ai_daily.metrics import (
    get_tracer,
    record_article_generated,
    record_llm_request,
    set_system_info,
    traced,
    track_api_request,
    track_markdown_decode,
)


def sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestPrometheusMetrics:
    """Tests for Prometheus metrics instrumentation."""

    def test_record_article_generated(self):
        before = sample("ai_daily_articles_generated_total", {"path": "template"})
        record_article_generated("template")
        assert sample("ai_daily_articles_generated_total", {"path": "template"}) == before + 1

    def test_record_llm_request(self):
        labels = {"kind": "continuation", "outcome": "empty"}
        before = sample("ai_daily_llm_requests_total", labels)
        record_llm_request("continuation", "empty")
        assert sample("ai_daily_llm_requests_total", labels) == before + 1

    def test_track_markdown_decode(self):
        before = sample("ai_daily_markdown_decode_seconds_count")
        with track_markdown_decode():
            pass
        assert sample("ai_daily_markdown_decode_seconds_count") == before + 1

    def test_track_api_request(self):
        # Should not raise
        track_api_request("GET", "/api/health", 200, 0.05)
        track_api_request("POST", "/api/generate-article", 502, 1.2)

    def test_set_system_info(self):
        # Should not raise
        set_system_info(version="1.0.0", model="test-model")


class TestTracing:
    """Tests for OpenTelemetry tracing helpers."""

    def test_get_tracer(self):
        tracer = get_tracer()
        assert tracer is get_tracer()

    def test_traced_decorator(self):
        @traced("test.operation", {"test.attr": "value"})
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"
