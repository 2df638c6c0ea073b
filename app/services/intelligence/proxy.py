"""Intelligence Data Proxy.

Owns one TTL cache store per payload kind and routes each endpoint through
the fallback orchestrator with its own key, TTL, live fetch and mock policy.
Built once per application and handed to request handlers.
"""
import time
from typing import Callable

from app.config import Settings, get_settings
from app.core.cache_policy import PayloadKind, caches_disabled_mock, get_ttl
from app.integrations.intelligence import IntelligenceClient, get_intelligence_client
from app.services.intelligence.cache_keys import derive_key
from app.services.intelligence.fallback import FallbackOrchestrator, FetchOutcome
from app.services.intelligence.mock_fallback import (
    get_empty_articles,
    get_mock_dashboard,
    get_mock_signals,
)
from app.services.intelligence.ttl_cache import TTLCacheStore
from app.services.intelligence.weights import (
    WeightedHolding,
    build_portfolio_header,
    canonical_weights_text,
)

DEFAULT_ARTICLE_LIMIT = 20


class IntelligenceProxy:
    """Cached, fallback-protected access to the Intelligence API."""

    def __init__(
        self,
        client: IntelligenceClient,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.settings = settings
        self.enabled = settings.intelligence_enabled
        self.orchestrator = FallbackOrchestrator(enabled=self.enabled)
        self.stores: dict[PayloadKind, TTLCacheStore] = {
            kind: TTLCacheStore(
                name=kind.value,
                maxsize=settings.intelligence_cache_maxsize,
                clock=clock,
            )
            for kind in PayloadKind
        }

    async def _resolve(self, kind: PayloadKind, key: str, fetch_live, synthesize_mock) -> FetchOutcome:
        return await self.orchestrator.resolve(
            self.stores[kind],
            key,
            get_ttl(kind, self.settings),
            fetch_live,
            synthesize_mock,
            cache_disabled_mock=caches_disabled_mock(kind),
        )

    async def dashboard(self, weights: list[WeightedHolding]) -> FetchOutcome:
        key = derive_key(PayloadKind.DASHBOARD, canonical_weights_text(weights))
        return await self._resolve(
            PayloadKind.DASHBOARD,
            key,
            lambda: self.client.fetch_dashboard(weights),
            get_mock_dashboard,
        )

    async def signals(self, weights: list[WeightedHolding], days: int = 7) -> FetchOutcome:
        key = derive_key(
            PayloadKind.SIGNALS, canonical_weights_text(weights), {"days": days},
        )
        return await self._resolve(
            PayloadKind.SIGNALS,
            key,
            lambda: self.client.fetch_signal_aggregation(weights, days),
            get_mock_signals,
        )

    async def articles(
        self,
        ticker: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> FetchOutcome:
        key = derive_key(
            PayloadKind.ARTICLES,
            "",
            {
                "ticker": ticker or "all",
                "limit": limit or DEFAULT_ARTICLE_LIMIT,
                "offset": offset or 0,
            },
        )
        return await self._resolve(
            PayloadKind.ARTICLES,
            key,
            lambda: self.client.fetch_articles(ticker=ticker, limit=limit, offset=offset),
            get_empty_articles,
        )

    async def article_full(
        self,
        article_id: int,
        weights: list[WeightedHolding] | None = None,
    ) -> FetchOutcome:
        """Article detail; no mock exists, so exhausted tiers give UNAVAILABLE."""
        portfolio_header = build_portfolio_header(weights or [])
        key = derive_key(
            PayloadKind.ARTICLE_FULL, portfolio_header, {"article_id": article_id},
        )
        return await self._resolve(
            PayloadKind.ARTICLE_FULL,
            key,
            lambda: self.client.fetch_article_full(article_id, portfolio_header),
            None,
        )

    async def health(self) -> dict:
        """Upstream status plus cache sizes per payload kind."""
        if not self.enabled:
            status = "disabled"
        else:
            status = "ok" if await self.client.check_health() else "unavailable"
        return {
            "status": status,
            "cache": {kind.value: len(store) for kind, store in self.stores.items()},
        }

    def clear_cache(self) -> None:
        for store in self.stores.values():
            store.clear()


def build_intelligence_proxy(settings: Settings | None = None) -> IntelligenceProxy:
    """Build the proxy from settings; the integration flag is read here, once."""
    return IntelligenceProxy(
        client=get_intelligence_client(),
        settings=settings or get_settings(),
    )
