"""Fallback orchestration for Intelligence API reads.

Tiers, in order:
    1. fresh cache entry          -> FRESH   (no upstream call)
    2. integration disabled       -> MOCK    (cached per endpoint policy)
    3. live upstream call         -> LIVE    (written back to the cache)
    4. upstream failed, stale hit -> STALE   (freshness not refreshed)
    5. nothing left               -> MOCK, or UNAVAILABLE without a synthesizer

Upstream failures are absorbed here and surface only as an outcome; the
orchestrator knows nothing about HTTP or payload shapes.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from app.services.intelligence.ttl_cache import TTLCacheStore

logger = logging.getLogger(__name__)


class Provenance(str, Enum):
    FRESH = "fresh"
    LIVE = "live"
    STALE = "stale"
    MOCK = "mock"
    UNAVAILABLE = "unavailable"


class FallbackReason(str, Enum):
    DISABLED = "disabled"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class FetchOutcome:
    """Value served for a request and where it came from."""
    provenance: Provenance
    value: Any = None
    reason: Optional[FallbackReason] = None

    @property
    def is_fallback(self) -> bool:
        """Served from stale cache or mock because the upstream failed."""
        return self.reason == FallbackReason.UPSTREAM_ERROR


class FallbackOrchestrator:
    """Resolve a cache key through the fallback tiers."""

    def __init__(self, enabled: bool):
        # Read once; the integration flag is static for the process lifetime
        self.enabled = enabled

    async def resolve(
        self,
        store: TTLCacheStore,
        key: str,
        ttl: timedelta,
        fetch_live: Callable[[], Awaitable[Any]],
        synthesize_mock: Optional[Callable[[], Any]] = None,
        cache_disabled_mock: bool = True,
    ) -> FetchOutcome:
        cached = store.get(key)
        if cached is not None:
            return FetchOutcome(Provenance.FRESH, cached)

        if not self.enabled:
            return self._disabled(store, key, ttl, synthesize_mock, cache_disabled_mock)

        try:
            value = await fetch_live()
        except Exception as e:
            logger.warning(
                f"Intelligence API call failed for {store.name}: {e}",
                extra={"cache_key": key, "upstream_status": getattr(e, "status", None)},
            )
            return self._after_failure(store, key, synthesize_mock)

        store.set(key, value, ttl)
        return FetchOutcome(Provenance.LIVE, value)

    def _disabled(
        self,
        store: TTLCacheStore,
        key: str,
        ttl: timedelta,
        synthesize_mock: Optional[Callable[[], Any]],
        cache_mock: bool,
    ) -> FetchOutcome:
        if synthesize_mock is None:
            return FetchOutcome(Provenance.UNAVAILABLE, reason=FallbackReason.DISABLED)
        value = synthesize_mock()
        if cache_mock:
            store.set(key, value, ttl)
        return FetchOutcome(Provenance.MOCK, value, FallbackReason.DISABLED)

    def _after_failure(
        self,
        store: TTLCacheStore,
        key: str,
        synthesize_mock: Optional[Callable[[], Any]],
    ) -> FetchOutcome:
        stale = store.get_stale(key)
        if stale is not None:
            logger.info(
                "Serving stale cache entry",
                extra={"cache_key": key, "provenance": Provenance.STALE.value},
            )
            return FetchOutcome(Provenance.STALE, stale, FallbackReason.UPSTREAM_ERROR)

        if synthesize_mock is None:
            return FetchOutcome(Provenance.UNAVAILABLE, reason=FallbackReason.UPSTREAM_ERROR)

        # Not cached: the next request retries the upstream
        logger.info(
            "Serving mock fallback",
            extra={"cache_key": key, "provenance": Provenance.MOCK.value},
        )
        return FetchOutcome(Provenance.MOCK, synthesize_mock(), FallbackReason.UPSTREAM_ERROR)
