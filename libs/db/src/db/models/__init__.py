"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the finance domain models used by ``finance_tracker``.
"""

from .finance import Base, Category, Transaction, User

__all__ = [
    "Base",
    "Category",
    "Transaction",
    "User",
]
