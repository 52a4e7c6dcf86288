"""Ledger module for user records and fiat balances."""

from movebridge.ledger.database import get_db, init_db
from movebridge.ledger.models import FIAT_BALANCE_COLUMNS, User
from movebridge.ledger.repository import LedgerRepository

__all__ = [
    # Models
    "User",
    "FIAT_BALANCE_COLUMNS",
    # Database
    "get_db",
    "init_db",
    "LedgerRepository",
]
