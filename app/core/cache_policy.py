"""Proxy caching policy.

One cache per Intelligence payload kind, each with its own TTL. Upstream
analytics are near-real-time but expensive to recompute, so TTLs stay short.
"""
from datetime import timedelta
from enum import Enum

from app.config import Settings

# =============================================================================
# PAYLOAD KINDS
# =============================================================================


class PayloadKind(str, Enum):
    DASHBOARD = "dashboard"
    SIGNALS = "signals"
    ARTICLE_FULL = "article_full"
    ARTICLES = "articles"


CACHE_POLICY = {
    PayloadKind.DASHBOARD: {
        "upstream": "POST /api/dashboard",
        "keyed_by": "portfolio weights",
        "mock_fallback": True,
        "cache_disabled_mock": True,
    },
    PayloadKind.SIGNALS: {
        "upstream": "POST /api/signals/aggregate",
        "keyed_by": "portfolio weights + days",
        "mock_fallback": True,
        "cache_disabled_mock": True,
    },
    PayloadKind.ARTICLES: {
        "upstream": "GET /api/articles",
        "keyed_by": "ticker + limit + offset",
        "mock_fallback": True,  # empty list
        "cache_disabled_mock": False,  # don't pin empty results
    },
    PayloadKind.ARTICLE_FULL: {
        "upstream": "GET /api/articles/{id}/full",
        "keyed_by": "article id + X-Portfolio header",
        "mock_fallback": False,
        "cache_disabled_mock": False,
    },
}

# =============================================================================
# IMPLEMENTATION
# =============================================================================


def get_ttl(kind: PayloadKind, settings: Settings) -> timedelta:
    """Get cache TTL for a payload kind."""
    seconds = {
        PayloadKind.DASHBOARD: settings.cache_ttl_dashboard,
        PayloadKind.SIGNALS: settings.cache_ttl_signals,
        PayloadKind.ARTICLES: settings.cache_ttl_articles,
        PayloadKind.ARTICLE_FULL: settings.cache_ttl_article_full,
    }[PayloadKind(kind)]
    return timedelta(seconds=seconds)


def caches_disabled_mock(kind: PayloadKind) -> bool:
    """Whether mock data served while the integration is disabled is cached."""
    return CACHE_POLICY[PayloadKind(kind)]["cache_disabled_mock"]
