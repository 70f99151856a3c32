"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.ledger_cell import LedgerCell

__all__ = [
    "LedgerCell",
]
