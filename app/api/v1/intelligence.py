"""Intelligence API proxy endpoints.

Each endpoint resolves through the IntelligenceProxy and annotates the
response with where the data came from:

- X-Data-Source: fresh | live | stale | mock
- X-Data-Stale: true            served from an expired cache entry
- X-Data-Fallback: mock|empty   synthetic data because the upstream failed
"""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.auth import get_current_user
from app.core.errors import ArticleUnavailableError, IntelligenceDisabledError
from app.database import get_db
from app.models.user import User
from app.services.intelligence.fallback import FetchOutcome, Provenance
from app.services.intelligence.proxy import IntelligenceProxy, build_intelligence_proxy
from app.services.intelligence.weights import WeightedHolding, compute_portfolio_weights
from app.services.portfolios import (
    get_holdings_by_portfolio_id,
    get_portfolios_by_user_id,
    select_portfolio,
)

router = APIRouter(prefix="/intelligence", tags=["intelligence"])

NO_PORTFOLIO = {"data": None, "meta": {"no_portfolio": True}}


def get_intelligence_proxy(request: Request) -> IntelligenceProxy:
    """The application's proxy, built on first use when lifespan didn't run."""
    proxy = getattr(request.app.state, "intelligence", None)
    if proxy is None:
        proxy = build_intelligence_proxy()
        request.app.state.intelligence = proxy
    return proxy


def provenance_headers(outcome: FetchOutcome, fallback_label: str = "mock") -> dict:
    headers = {"X-Data-Source": outcome.provenance.value}
    if outcome.provenance == Provenance.STALE:
        headers["X-Data-Stale"] = "true"
    elif outcome.provenance == Provenance.MOCK and outcome.is_fallback:
        headers["X-Data-Fallback"] = fallback_label
    return headers


async def load_portfolio_weights(
    db: AsyncSession,
    user: User,
    portfolio_id: str | None,
) -> list[WeightedHolding] | None:
    """Weight vector of the selected portfolio, or None when there is none."""
    portfolios = await get_portfolios_by_user_id(db, user.id)
    portfolio = select_portfolio(portfolios, portfolio_id)
    if portfolio is None:
        return None
    holdings = await get_holdings_by_portfolio_id(db, portfolio.id)
    return compute_portfolio_weights(holdings)


@router.get("/dashboard")
async def get_dashboard(
    portfolio_id: str | None = Query(None, alias="portfolioId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    proxy: IntelligenceProxy = Depends(get_intelligence_proxy),
):
    """Batch dashboard for the selected portfolio."""
    weights = await load_portfolio_weights(db, current_user, portfolio_id)
    if weights is None:
        return NO_PORTFOLIO

    outcome = await proxy.dashboard(weights)
    return JSONResponse(outcome.value, headers=provenance_headers(outcome))


@router.get("/signals/aggregate")
async def get_signal_aggregation(
    portfolio_id: str | None = Query(None, alias="portfolioId"),
    days: int = Query(7, ge=1, le=90, description="Lookback window in days"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    proxy: IntelligenceProxy = Depends(get_intelligence_proxy),
):
    """Signals aggregated by type and by holding for the selected portfolio."""
    weights = await load_portfolio_weights(db, current_user, portfolio_id)
    if weights is None:
        return NO_PORTFOLIO

    outcome = await proxy.signals(weights, days)
    return JSONResponse(outcome.value, headers=provenance_headers(outcome))


@router.get("/articles")
async def list_articles(
    ticker: str | None = None,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int | None = Query(None, ge=0),
    current_user: User = Depends(get_current_user),
    proxy: IntelligenceProxy = Depends(get_intelligence_proxy),
):
    """Article list. Universal: no portfolio context."""
    outcome = await proxy.articles(ticker=ticker, limit=limit, offset=offset)
    return JSONResponse(
        outcome.value, headers=provenance_headers(outcome, fallback_label="empty"),
    )


@router.get("/articles/{article_id}/full")
async def get_article_full(
    article_id: int,
    portfolio_id: str | None = Query(None, alias="portfolioId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    proxy: IntelligenceProxy = Depends(get_intelligence_proxy),
):
    """Article detail scored against the user's portfolio."""
    if not proxy.enabled:
        raise IntelligenceDisabledError()

    weights = await load_portfolio_weights(db, current_user, portfolio_id)
    outcome = await proxy.article_full(article_id, weights)

    if outcome.provenance == Provenance.UNAVAILABLE:
        raise ArticleUnavailableError(article_id)
    return JSONResponse(outcome.value, headers=provenance_headers(outcome))


@router.get("/health")
async def intelligence_health(
    proxy: IntelligenceProxy = Depends(get_intelligence_proxy),
):
    """Intelligence API status: disabled, ok or unavailable."""
    result = await proxy.health()
    if result["status"] == "disabled":
        result["message"] = "Intelligence API integration is not enabled"
    return result
