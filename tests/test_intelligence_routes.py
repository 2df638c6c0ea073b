"""Tests for the Intelligence proxy endpoints."""
from jose import jwt

from app.api.v1.intelligence import get_intelligence_proxy
from app.config import get_settings
from app.core.errors import IntelligenceClientError
from app.main import app

BASE = "/api/v1/intelligence"
DASHBOARD = {"data": {"digest": {"digest_id": "dg-1"}}, "meta": {"holdings_count": 2}}
ARTICLES = {"data": [{"id": 1}], "meta": {"count": 1, "total": 1}}
ARTICLE = {"data": {"id": 42, "title": "Chip demand"}}


async def test_requires_bearer_token(client):
    response = await client.get(f"{BASE}/dashboard")
    assert response.status_code == 401


async def test_rejects_invalid_token(client):
    response = await client.get(
        f"{BASE}/dashboard", headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


async def test_unknown_user_is_404(client):
    settings = get_settings()
    token = jwt.encode({"sub": "ghost"}, settings.secret_key, algorithm=settings.algorithm)

    response = await client.get(
        f"{BASE}/dashboard", headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 404


async def test_dashboard_without_portfolio_short_circuits(client, user, auth_headers, fake_client):
    response = await client.get(f"{BASE}/dashboard", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"data": None, "meta": {"no_portfolio": True}}
    assert "X-Data-Source" not in response.headers
    assert fake_client.calls == []


async def test_signals_with_unknown_portfolio_id_short_circuits(client, portfolio, auth_headers):
    response = await client.get(
        f"{BASE}/signals/aggregate",
        params={"portfolioId": "not-mine"},
        headers=auth_headers,
    )
    assert response.json()["meta"] == {"no_portfolio": True}


async def test_dashboard_live_then_fresh(client, portfolio, auth_headers, fake_client):
    fake_client.responses["fetch_dashboard"] = DASHBOARD

    first = await client.get(f"{BASE}/dashboard", headers=auth_headers)
    second = await client.get(f"{BASE}/dashboard", headers=auth_headers)

    assert first.status_code == 200
    assert first.json() == DASHBOARD
    assert first.headers["X-Data-Source"] == "live"
    assert second.headers["X-Data-Source"] == "fresh"
    assert fake_client.count("fetch_dashboard") == 1

    # Weights computed from holdings: MSFT 5 @ 300, AAPL 10 @ avg 150
    _, (holdings,) = fake_client.calls[0]
    assert [(h.ticker, h.weight_pct) for h in holdings] == [("AAPL", 50.0), ("MSFT", 50.0)]


async def test_dashboard_stale_headers(client, portfolio, auth_headers, fake_client, clock):
    fake_client.responses["fetch_dashboard"] = DASHBOARD
    await client.get(f"{BASE}/dashboard", headers=auth_headers)
    clock.advance(get_settings().cache_ttl_dashboard + 1)
    fake_client.responses["fetch_dashboard"] = IntelligenceClientError("boom", 500)

    response = await client.get(f"{BASE}/dashboard", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == DASHBOARD
    assert response.headers["X-Data-Source"] == "stale"
    assert response.headers["X-Data-Stale"] == "true"


async def test_dashboard_mock_fallback_headers(client, portfolio, auth_headers):
    response = await client.get(f"{BASE}/dashboard", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["X-Data-Source"] == "mock"
    assert response.headers["X-Data-Fallback"] == "mock"
    assert response.json()["meta"]["portfolio_hash"] == "mock-hash"


async def test_disabled_dashboard_mock_has_no_fallback_header(
    client, portfolio, auth_headers, make_proxy,
):
    app.dependency_overrides[get_intelligence_proxy] = lambda: make_proxy(enabled=False)

    response = await client.get(f"{BASE}/dashboard", headers=auth_headers)

    assert response.headers["X-Data-Source"] == "mock"
    assert "X-Data-Fallback" not in response.headers


async def test_signals_days_validation(client, portfolio, auth_headers):
    too_many = await client.get(
        f"{BASE}/signals/aggregate", params={"days": 91}, headers=auth_headers,
    )
    assert too_many.status_code == 400
    assert too_many.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_signals_passes_days(client, portfolio, auth_headers, fake_client):
    fake_client.responses["fetch_signal_aggregation"] = {"data": {}, "meta": {"days_analyzed": 30}}

    response = await client.get(
        f"{BASE}/signals/aggregate", params={"days": 30}, headers=auth_headers,
    )

    assert response.headers["X-Data-Source"] == "live"
    _, (_, days) = fake_client.calls[0]
    assert days == 30


async def test_articles_do_not_need_a_portfolio(client, user, auth_headers, fake_client):
    fake_client.responses["fetch_articles"] = ARTICLES

    response = await client.get(
        f"{BASE}/articles", params={"ticker": "AAPL", "limit": 5}, headers=auth_headers,
    )

    assert response.json() == ARTICLES
    assert fake_client.calls == [("fetch_articles", ("AAPL", 5, None))]


async def test_articles_failure_returns_empty_list(client, user, auth_headers):
    response = await client.get(f"{BASE}/articles", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"data": [], "meta": {"count": 0, "total": 0}}
    assert response.headers["X-Data-Fallback"] == "empty"


async def test_article_full_live(client, portfolio, auth_headers, fake_client):
    fake_client.responses["fetch_article_full"] = ARTICLE

    response = await client.get(f"{BASE}/articles/42/full", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == ARTICLE
    assert fake_client.calls == [("fetch_article_full", (42, "AAPL:50.0,MSFT:50.0"))]


async def test_article_full_unavailable_is_502(client, user, auth_headers):
    response = await client.get(f"{BASE}/articles/42/full", headers=auth_headers)

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "ARTICLE_UNAVAILABLE"


async def test_article_full_disabled_is_503(client, user, auth_headers, make_proxy):
    app.dependency_overrides[get_intelligence_proxy] = lambda: make_proxy(enabled=False)

    response = await client.get(f"{BASE}/articles/42/full", headers=auth_headers)

    assert response.status_code == 503
    assert response.json() == {
        "error": {"code": "INTELLIGENCE_DISABLED", "message": "Intelligence API not enabled"},
    }


async def test_article_full_non_integer_id_is_400(client, user, auth_headers):
    response = await client.get(f"{BASE}/articles/abc/full", headers=auth_headers)
    assert response.status_code == 400


async def test_health_needs_no_auth(client):
    response = await client.get(f"{BASE}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert set(body["cache"]) == {"dashboard", "signals", "articles", "article_full"}


async def test_health_disabled_message(client, make_proxy):
    app.dependency_overrides[get_intelligence_proxy] = lambda: make_proxy(enabled=False)

    body = (await client.get(f"{BASE}/health")).json()

    assert body["status"] == "disabled"
    assert "not enabled" in body["message"]


async def test_service_health(client):
    response = await client.get("/api/v1/health")
    assert response.json() == {"status": "healthy", "service": "portfolio-intelligence-api"}
