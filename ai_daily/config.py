"""Configuration settings for the AI Daily report generator."""

import os
import re
from typing import Pattern

# Opening and closing sentences every generated article must carry.
# The template builder, the rewrite prompt and the markdown decoder all
# read these, so they must stay byte-identical.
INTRO_LEAD: str = "大家好，我是孟健。"
CLOSE_LEAD: str = "今天关注的大事件就到这里，我们继续跟进它们对行业的实际影响。"

# Titles and fixed copy
DEFAULT_TITLE: str = "今日 AI 观察"
TITLE_PREFIX: str = "今日 AI 观察｜"
DEFAULT_SUBTITLE: str = "每日科技提醒"
EMPTY_SUBTITLE: str = "等待你精选的资讯"
EMPTY_EXPLANATION: str = "我会根据你勾选的内容整理一份聚焦价值与洞见的日报。"
FALLBACK_PARAGRAPH: str = "原文主要聚焦该事件的最新动态，建议通过原链接获取更详尽的技术细节。"
TOPIC_COUNT_TEMPLATE: str = "我整理了过去 24 小时里 {count} 条值得关注的 AI 动态，重点说清它们的实际价值与风险。"

# Markdown labels
IMAGE_CAPTION: str = "原文配图"
HERO_IMAGE_ALT: str = "头图"
DEFAULT_IMAGE_LABEL: str = "配图"
PUBLISHED_AT_LABEL: str = "发布于："
QUOTE_ATTRIBUTION_PREFIX: str = "—— "
SOURCES_HEADING: str = "参考来源"

# Scraped topics use placehold.co images when no real image exists
PLACEHOLDER_IMAGE_PATTERN: Pattern[str] = re.compile(r"placehold\.co", re.IGNORECASE)

# LLM settings (can be overridden via environment variables)
OPENROUTER_BASE_URL: str = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
LLM_MODEL_NAME: str = os.environ.get("OPENROUTER_MODEL", "anthropic/claude-sonnet-4.5")
OPENROUTER_SITE_URL: str = os.environ.get("OPENROUTER_SITE_URL", "http://localhost:3000")
OPENROUTER_APP_TITLE: str = os.environ.get("OPENROUTER_APP_TITLE", "AI Daily Generator")

LLM_TEMPERATURE: float = 0.3
LLM_MAX_TOKENS: int = 4000
LLM_CONTINUATION_MAX_TOKENS: int = 1200

# Output directory for rendered reports
DEFAULT_OUTPUT_DIR: str = "./reports"

# API server (used by ai-daily-server)
SERVER_HOST: str = os.environ.get("AI_DAILY_HOST", "127.0.0.1")
SERVER_PORT: int = int(os.environ.get("AI_DAILY_PORT", "8000"))
