"""Portfolio weight vectors.

A portfolio's weight vector is its identity for caching and the payload the
Intelligence API scores against. Weights are percentages rounded to
WEIGHT_PRECISION decimal places and always emitted in canonical order
(ticker ascending) so storage order never changes a cache key.
"""
from decimal import Decimal
from typing import Iterable, Protocol

from pydantic import BaseModel

WEIGHT_PRECISION = 2


class HoldingLike(Protocol):
    symbol: str
    quantity: Decimal
    average_price: Decimal
    current_price: Decimal | None


class WeightedHolding(BaseModel):
    """Ticker with its share of total portfolio value, in percent."""
    ticker: str
    weight_pct: float


def position_price(holding: HoldingLike) -> float:
    """Current price when known, otherwise average cost."""
    if holding.current_price is not None:
        return float(holding.current_price)
    return float(holding.average_price)


def compute_portfolio_weights(holdings: Iterable[HoldingLike]) -> list[WeightedHolding]:
    """Normalize holdings into a canonical weight vector.

    Returns an empty list for an empty portfolio or one with zero total value.
    """
    positions = [(h.symbol, float(h.quantity) * position_price(h)) for h in holdings]
    total = sum(value for _, value in positions)
    if not positions or total == 0:
        return []

    weights = [
        WeightedHolding(
            ticker=ticker,
            weight_pct=round(value / total * 100, WEIGHT_PRECISION),
        )
        for ticker, value in positions
    ]
    # Ties on ticker (same symbol on two exchanges) are broken by weight
    return sorted(weights, key=lambda w: (w.ticker, w.weight_pct))


def canonical_weights_text(weights: list[WeightedHolding]) -> str:
    """Serialize a weight vector for key derivation, e.g. "AAPL:50.00,MSFT:50.00"."""
    return ",".join(
        f"{w.ticker}:{w.weight_pct:.{WEIGHT_PRECISION}f}" for w in weights
    )


def build_portfolio_header(weights: list[WeightedHolding]) -> str:
    """Build the X-Portfolio header value sent with article detail requests."""
    return ",".join(f"{w.ticker}:{w.weight_pct:.1f}" for w in weights)
