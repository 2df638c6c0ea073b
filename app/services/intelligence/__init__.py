"""Intelligence proxy core: weights, cache keys, TTL cache, fallback."""
from app.services.intelligence.cache_keys import derive_key
from app.services.intelligence.fallback import (
    FallbackOrchestrator,
    FallbackReason,
    FetchOutcome,
    Provenance,
)
from app.services.intelligence.ttl_cache import CacheEntry, TTLCacheStore
from app.services.intelligence.weights import WeightedHolding, compute_portfolio_weights

__all__ = [
    "derive_key",
    "FallbackOrchestrator", "FallbackReason", "FetchOutcome", "Provenance",
    "CacheEntry", "TTLCacheStore",
    "WeightedHolding", "compute_portfolio_weights",
]
