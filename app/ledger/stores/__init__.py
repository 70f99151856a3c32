"""
app/ledger/stores package marker.
"""

from app.ledger.stores.base import LedgerStore, LedgerStoreError
from app.ledger.stores.memory import InMemoryLedgerStore
from app.ledger.stores.sheets import SheetsLedgerStore
from app.ledger.stores.sql import SqlLedgerStore

__all__ = [
    "InMemoryLedgerStore",
    "LedgerStore",
    "LedgerStoreError",
    "SheetsLedgerStore",
    "SqlLedgerStore",
]
