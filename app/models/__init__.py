"""Database models."""
from app.models.user import User, UserTier
from app.models.portfolio import Portfolio, Holding

__all__ = [
    "User",
    "UserTier",
    "Portfolio",
    "Holding",
]
