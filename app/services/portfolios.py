"""Portfolio and holdings lookups used by the Intelligence endpoints."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.portfolio import Holding, Portfolio


async def get_portfolios_by_user_id(db: AsyncSession, user_id: str) -> list[Portfolio]:
    """All portfolios for a user, newest first."""
    result = await db.execute(
        select(Portfolio)
        .where(Portfolio.user_id == user_id)
        .order_by(Portfolio.created_at.desc())
    )
    return list(result.scalars().all())


async def get_holdings_by_portfolio_id(db: AsyncSession, portfolio_id: str) -> list[Holding]:
    result = await db.execute(select(Holding).where(Holding.portfolio_id == portfolio_id))
    return list(result.scalars().all())


def select_portfolio(
    portfolios: list[Portfolio],
    portfolio_id: str | None = None,
) -> Portfolio | None:
    """Pick the requested portfolio, else the first active one, else the first.

    An explicit id that doesn't belong to the user selects nothing.
    """
    if portfolio_id:
        return next((p for p in portfolios if p.id == portfolio_id), None)
    active = next((p for p in portfolios if p.is_active), None)
    if active is not None:
        return active
    return portfolios[0] if portfolios else None
