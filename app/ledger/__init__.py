"""
app/ledger package marker.
"""

from app.ledger.colors import CellColor, color_for
from app.ledger.grid import LedgerGrid
from app.ledger.identity import AssetIdentity, date_key, identity_of, parse_date_key
from app.ledger.index import LedgerIndex
from app.ledger.writer import LedgerWriter, WriteOutcome

__all__ = [
    "AssetIdentity",
    "CellColor",
    "LedgerGrid",
    "LedgerIndex",
    "LedgerWriter",
    "WriteOutcome",
    "color_for",
    "date_key",
    "identity_of",
    "parse_date_key",
]
