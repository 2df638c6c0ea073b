"""Intelligence API client.

Endpoints:
- POST /api/dashboard            batch dashboard for a weight vector
- POST /api/signals/aggregate    signal aggregation over a lookback window
- GET  /api/articles             article list (universal, no portfolio)
- GET  /api/articles/{id}/full   article detail, scored against X-Portfolio
- GET  /api/health

Every failure (non-2xx, timeout, connection) is raised as
IntelligenceClientError; the proxy decides what to serve instead.
"""
import logging
from typing import Any

import httpx

from app.config import get_settings
from app.core.errors import IntelligenceClientError
from app.services.intelligence.weights import WeightedHolding

logger = logging.getLogger(__name__)

DEFAULT_DASHBOARD_SECTIONS = ["digest", "exposure", "alerts", "narratives", "alert_history"]


class IntelligenceClient:
    """Client for the Intelligence API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        """Make a request, mapping every failure to IntelligenceClientError."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    params=params,
                    json=json,
                    headers=self._headers(headers),
                )
        except httpx.TimeoutException:
            raise IntelligenceClientError("Intelligence API request timed out", 408)
        except httpx.RequestError as e:
            raise IntelligenceClientError(f"Intelligence API unreachable: {e}", 503)

        if response.is_error:
            raise self._status_error(response)

        try:
            return response.json()
        except ValueError:
            raise IntelligenceClientError(
                "Intelligence API returned invalid JSON", response.status_code,
            )

    @staticmethod
    def _status_error(response: httpx.Response) -> IntelligenceClientError:
        """Build an error from a non-2xx response, using the API's error body when present."""
        message = f"Intelligence API returned {response.status_code}"
        code = None
        try:
            error = response.json().get("error") or {}
            message = error.get("message") or message
            code = error.get("code")
        except (ValueError, AttributeError):
            pass
        return IntelligenceClientError(message, response.status_code, code)

    @staticmethod
    def _holdings_payload(holdings: list[WeightedHolding]) -> list[dict]:
        return [h.model_dump() for h in holdings]

    # ==================== PORTFOLIO-SCOPED ====================

    async def fetch_dashboard(
        self,
        holdings: list[WeightedHolding],
        include: list[str] | None = None,
    ) -> dict:
        """Get the batch dashboard (digest, exposure, alerts, narratives, alert history)."""
        return await self._request(
            "POST",
            "/api/dashboard",
            json={
                "holdings": self._holdings_payload(holdings),
                "include": include or DEFAULT_DASHBOARD_SECTIONS,
            },
        )

    async def fetch_signal_aggregation(
        self,
        holdings: list[WeightedHolding],
        days: int = 7,
    ) -> dict:
        """Get signals aggregated by type and by holding over the last `days`."""
        return await self._request(
            "POST",
            "/api/signals/aggregate",
            json={"holdings": self._holdings_payload(holdings), "days": days},
        )

    async def fetch_article_full(self, article_id: int, portfolio_header: str) -> dict:
        """Get article detail with per-holding relevance and summaries."""
        headers = {"X-Portfolio": portfolio_header} if portfolio_header else None
        return await self._request(
            "GET", f"/api/articles/{article_id}/full", headers=headers,
        )

    # ==================== UNIVERSAL ====================

    async def fetch_articles(
        self,
        ticker: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict:
        """Get the article list, optionally filtered by ticker."""
        params = {}
        if ticker:
            params["ticker"] = ticker
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        return await self._request("GET", "/api/articles", params=params or None)

    async def check_health(self) -> bool:
        """Return True when the Intelligence API answers its health check."""
        try:
            await self._request("GET", "/api/health")
            return True
        except IntelligenceClientError as e:
            logger.warning(f"Intelligence API health check failed: {e.message}")
            return False


# Singleton instance
_client: IntelligenceClient | None = None


def get_intelligence_client() -> IntelligenceClient:
    """Get or create the Intelligence API client."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = IntelligenceClient(
            base_url=settings.intelligence_api_url,
            api_key=settings.intelligence_api_key,
            timeout=settings.intelligence_timeout_seconds,
        )
    return _client
