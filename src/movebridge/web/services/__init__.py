"""Web services for read-only balance lookups.

These services only query public chain state and the ledger. They never
write to the ledger and never touch keys.
"""

from movebridge.web.services.balance_reader import (
    BalanceReadResult,
    ChainUnreachableError,
    ContractBalanceReader,
)
from movebridge.web.services.balance_service import BalanceAggregator
from movebridge.web.services.fiat_ledger import FiatLedgerLookup, LedgerFiatLookup

__all__ = [
    "BalanceAggregator",
    "BalanceReadResult",
    "ChainUnreachableError",
    "ContractBalanceReader",
    "FiatLedgerLookup",
    "LedgerFiatLookup",
]
