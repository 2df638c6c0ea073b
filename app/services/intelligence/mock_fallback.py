"""Illustrative placeholder payloads shaped like Intelligence API responses.

Served when the integration is disabled or when the upstream is down and no
stale entry exists, so the dashboard renders the same structures either way.
Content is fixed; only timestamps move with the clock.
"""
from datetime import datetime, timedelta, timezone

SECTIONS = ["digest", "exposure", "alerts", "narratives", "alert_history"]

# (title, summary, source, minutes ago, impact, sentiment, tickers)
MOCK_NEWS = [
    ("Fed signals potential rate cuts in Q3", "Policy makers point to easing inflation.",
     "Reuters", 8, "high", "positive", ["SPY", "QQQ"]),
    ("Tech sector sees 4.2% rally on AI infrastructure spending",
     "Hyperscaler capex guidance lifts chip and cloud names.",
     "Bloomberg", 23, "medium", "positive", ["NVDA", "AMD", "MSFT"]),
    ("Energy prices surge 6% amid supply concerns", "Crude jumps on output cuts.",
     "CNBC", 60, "high", "negative", ["XOM", "CVX"]),
    ("Semiconductor supply chain faces new bottlenecks",
     "Advanced packaging capacity remains tight into next year.",
     "Nikkei Asia", 95, "medium", "negative", ["AAPL", "NVDA"]),
]

MOCK_SECTOR_NEWS = [
    ("Major cloud providers announce infrastructure expansion",
     "TechCrunch", 120, 85, "medium", "positive", ["AMZN", "MSFT", "GOOGL"]),
    ("Semiconductor equipment orders surge in December",
     "Semiconductor Industry Association", 180, 80, "medium", "positive", ["NVDA", "AMD", "INTC"]),
    ("Enterprise software spending growth decelerates",
     "Gartner", 240, 60, "low", "neutral", ["CRM", "NOW", "ORCL"]),
    ("EV market share reaches new milestone in Europe",
     "European Automobile Manufacturers Association", 300, 70, "medium", "positive", ["TSLA", "F"]),
    ("Battery raw material prices show volatility",
     "Mining Weekly", 360, 55, "low", "neutral", ["TSLA", "GM", "F"]),
    ("FDA approves breakthrough cancer treatment",
     "FDA News", 420, 65, "high", "positive", ["MRK", "BMY", "JNJ"]),
]

# (id, ticker, impact, headline, confidence)
MOCK_STORIES = [
    (1, "NVDA", "positive", "Breakthrough AI chip architecture revealed at tech conference", 94),
    (2, "AAPL", "neutral", "Supplier diversification in Asian markets progresses", 67),
    (3, "TSLA", "negative", "Q4 European deliveries miss estimates by 12%", 88),
    (4, "MSFT", "positive", "Azure revenue up 31% YoY; AI services adoption surges", 91),
    (5, "GOOGL", "positive", "Ad revenue beats estimates despite economic headwinds", 82),
]

SIGNAL_KEYWORDS = [
    (("ai", "chip", "gpu"), "AI_TECHNOLOGY"),
    (("supply", "chain"), "SUPPLY_DISRUPTION"),
    (("earn", "revenue", "growth"), "EARNINGS_REPORT"),
    (("regulat", "fda", "fed"), "REGULATORY"),
    (("partner", "deal"), "PARTNERSHIP"),
    (("acqui", "merger"), "M_AND_A"),
    (("launch", "product", "unveil"), "PRODUCT_LAUNCH"),
    (("leader", "ceo"), "LEADERSHIP_CHANGE"),
    (("market", "rally", "surge"), "MARKET_MOVEMENT"),
    (("geopolit", "export", "tariff"), "GEOPOLITICAL"),
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _minutes_ago(mins: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(minutes=mins)).isoformat()


def to_direction(sentiment: str) -> str:
    """Map lowercase sentiment to the API's signal direction."""
    return {"positive": "POSITIVE", "negative": "NEGATIVE"}.get(sentiment, "NEUTRAL")


def to_magnitude(impact: str) -> str:
    """Map UI impact (high/medium/low) to the API's magnitude."""
    return {"high": "major", "medium": "moderate"}.get(impact, "minor")


def to_trajectory(impact: str) -> str:
    return {"positive": "improving", "negative": "worsening"}.get(impact, "stable")


def infer_signal_type(title: str) -> str:
    """Guess a signal type from headline keywords."""
    lower = title.lower()
    for keywords, signal_type in SIGNAL_KEYWORDS:
        if any(k in lower for k in keywords):
            return signal_type
    return "GENERAL_NEWS"


def _digest_item(article_id, title, summary, source, minutes, relevance, impact, sentiment, tickers):
    return {
        "article_id": article_id,
        "headline": title,
        "relevance_score": relevance,
        "affected_holdings": tickers,
        "summary": summary,
        "source": source,
        "published_at": _minutes_ago(minutes),
        "signal_type": infer_signal_type(title),
        "sentiment": to_direction(sentiment),
        "magnitude": to_magnitude(impact),
    }


def get_mock_dashboard() -> dict:
    """Mock response for POST /api/dashboard."""
    direct_news = [
        _digest_item(1000 + i, title, summary, source, minutes, 0.9, impact, sentiment, tickers)
        for i, (title, summary, source, minutes, impact, sentiment, tickers) in enumerate(MOCK_NEWS)
    ]
    sector_context = [
        _digest_item(2000 + i, title, title, source, minutes, relevance / 100, impact, sentiment, tickers)
        for i, (title, source, minutes, relevance, impact, sentiment, tickers) in enumerate(MOCK_SECTOR_NEWS)
    ]
    developing_stories = [
        {
            "narrative_id": f"mock-narrative-{story_id}",
            "title": headline,
            "article_count": max(2, confidence // 10),
            "sentiment_trajectory": to_trajectory(impact),
            "affected_holdings": [ticker],
        }
        for story_id, ticker, impact, headline, confidence in MOCK_STORIES
    ]
    narratives = [
        {
            "narrative_id": f"mock-narrative-{story_id}",
            "title": headline,
            "primary_ticker": ticker,
            "signal_type": infer_signal_type(headline),
            "article_count": confidence // 10,
            "first_seen": _minutes_ago(240),
            "last_updated": _minutes_ago(10),
            "status": "developing",
            "sentiment_trajectory": to_trajectory(impact),
        }
        for story_id, ticker, impact, headline, confidence in MOCK_STORIES
    ]
    tech = ["AAPL", "MSFT", "GOOGL", "NVDA", "META"]

    return {
        "data": {
            "digest": {
                "digest_id": f"mock-dg-{datetime.now(timezone.utc).date().isoformat()}",
                "generated_at": _now_iso(),
                "sections": {
                    "direct_news": direct_news,
                    "related_news": sector_context[:3],
                    "risk_alerts": [n for n in direct_news if n["sentiment"] == "NEGATIVE"],
                    "developing_stories": developing_stories,
                    "discovery": sector_context[3:6],
                    "sector_context": sector_context,
                },
            },
            "exposure": {
                "computed_at": _now_iso(),
                "by_sector": {
                    "Technology": {"exposure_pct": 65, "holdings": tech, "trend": "improving"},
                    "Consumer Discretionary": {
                        "exposure_pct": 15, "holdings": ["AMZN", "TSLA"], "trend": "stable",
                    },
                    "Financials": {"exposure_pct": 10, "holdings": ["JPM", "V"], "trend": "stable"},
                    "Healthcare": {"exposure_pct": 5, "holdings": ["JNJ"], "trend": "stable"},
                },
                "by_geography": {
                    "United States": {"exposure_pct": 95},
                    "Global": {"exposure_pct": 5},
                },
                "concentration_risks": [
                    {
                        "risk_type": "sector",
                        "category": "Technology",
                        "exposure_pct": 65,
                        "dependent_holdings": tech,
                        "severity": "medium",
                        "description": (
                            "Technology sector represents 65% of portfolio, "
                            "consider diversification."
                        ),
                    },
                ],
            },
            "alerts": [
                {
                    "alert_id": "mock-alert-1",
                    "correlation_type": "sector_concentration",
                    "trigger_article_id": 1000,
                    "trigger_headline": MOCK_NEWS[0][0],
                    "affected_holdings": ["NVDA", "MSFT", "GOOGL"],
                    "combined_portfolio_exposure_pct": 45,
                    "severity_tier": "medium",
                    "cause_description": "High tech sector concentration",
                    "explanation": (
                        "Your portfolio has 45% exposure to the technology sector, "
                        "which may amplify volatility during sector-wide movements."
                    ),
                },
            ],
            "narratives": narratives,
            "alert_history": [
                {
                    "alert_id": "mock-alert-hist-1",
                    "rule_id": "sector_concentration",
                    "trigger_type": "threshold",
                    "triggered_at": _minutes_ago(120),
                    "article_id": 1000,
                    "headline": "Tech sector rally triggers concentration alert",
                    "matched_holdings": ["NVDA", "MSFT", "GOOGL"],
                    "severity": "medium",
                    "summary": "Technology sector concentration exceeded 40% threshold.",
                },
            ],
        },
        "meta": {
            "portfolio_hash": "mock-hash",
            "holdings_count": 10,
            "computed_at": _now_iso(),
            "sections_included": list(SECTIONS),
        },
    }


MOCK_SIGNAL_TYPES = {
    # type: (count, +, -, =, direction, magnitude, holdings, trend, latest headline)
    "AI_TECHNOLOGY": (12, 8, 2, 2, "POSITIVE", "major", ["NVDA", "MSFT", "GOOGL", "META"],
                      "improving", "NVIDIA unveils next-generation AI accelerator at tech summit"),
    "EARNINGS_REPORT": (8, 5, 2, 1, "POSITIVE", "moderate", ["MSFT", "GOOGL", "AAPL"],
                        "stable", "Azure revenue up 31% YoY; AI services adoption surges"),
    "SUPPLY_DISRUPTION": (5, 1, 3, 1, "NEGATIVE", "moderate", ["AAPL", "NVDA"],
                          "worsening", "Semiconductor supply chain faces new bottlenecks"),
    "PRODUCT_LAUNCH": (6, 5, 0, 1, "POSITIVE", "moderate", ["AAPL", "TSLA", "META"],
                       "improving", "Apple diversifies supply chain with new partnerships"),
    "REGULATORY": (4, 1, 2, 1, "NEGATIVE", "minor", ["GOOGL", "META", "NVDA"],
                   "stable", "Fed signals potential rate cuts in Q3"),
    "M_AND_A": (2, 2, 0, 0, "POSITIVE", "minor", ["MSFT"],
                "stable", "Major cloud providers announce infrastructure expansion"),
    "MARKET_MOVEMENT": (7, 4, 2, 1, "POSITIVE", "moderate",
                        ["NVDA", "AAPL", "MSFT", "GOOGL", "AMZN", "TSLA"],
                        "improving", "Tech sector sees 4.2% rally on AI infrastructure spending"),
}

MOCK_HOLDING_SIGNALS = {
    # ticker: (articles, net sentiment, dominant signal, risk, opportunity)
    "NVDA": (18, 0.72, "AI_TECHNOLOGY", 3, 12),
    "AAPL": (9, 0.35, "PRODUCT_LAUNCH", 2, 5),
    "MSFT": (11, 0.61, "EARNINGS_REPORT", 1, 8),
    "GOOGL": (8, 0.45, "AI_TECHNOLOGY", 2, 5),
    "TSLA": (6, -0.15, "MARKET_MOVEMENT", 3, 2),
    "META": (5, 0.4, "AI_TECHNOLOGY", 1, 3),
    "AMZN": (4, 0.5, "AI_TECHNOLOGY", 0, 3),
    "JPM": (3, 0.3, "EARNINGS_REPORT", 1, 2),
    "V": (2, 0.25, "MARKET_MOVEMENT", 0, 2),
    "JNJ": (2, 0.1, "REGULATORY", 1, 1),
}


def get_mock_signals() -> dict:
    """Mock response for POST /api/signals/aggregate."""
    by_signal_type = {
        signal_type: {
            "article_count": count,
            "positive": pos,
            "negative": neg,
            "neutral": neu,
            "dominant_direction": direction,
            "dominant_magnitude": magnitude,
            "affected_holdings": holdings,
            "trend": trend,
            "latest_headline": headline,
        }
        for signal_type, (count, pos, neg, neu, direction, magnitude, holdings, trend, headline)
        in MOCK_SIGNAL_TYPES.items()
    }
    by_holding = {
        ticker: {
            "total_articles": articles,
            "net_sentiment": sentiment,
            "dominant_signal": dominant,
            "risk_signals": risk,
            "opportunity_signals": opportunity,
        }
        for ticker, (articles, sentiment, dominant, risk, opportunity)
        in MOCK_HOLDING_SIGNALS.items()
    }
    return {
        "data": {
            "by_signal_type": by_signal_type,
            "by_holding": by_holding,
            "portfolio_summary": {
                "total_articles_analyzed": sum(t[0] for t in MOCK_SIGNAL_TYPES.values()),
                "net_sentiment": 0.54,
                "top_opportunity": "AI_TECHNOLOGY",
                "top_risk": "SUPPLY_DISRUPTION",
                "signal_diversity": len(MOCK_SIGNAL_TYPES),
            },
        },
        "meta": {
            "days_analyzed": 7,
            "holdings_count": len(MOCK_HOLDING_SIGNALS),
            "computed_at": _now_iso(),
        },
    }


def get_empty_articles() -> dict:
    """Empty article list; there is no synthetic article feed."""
    return {"data": [], "meta": {"count": 0, "total": 0}}
