"""Read-only fiat balance lookup against the ledger."""

from typing import Optional, Protocol

from movebridge.ledger.database import get_db
from movebridge.ledger.repository import LedgerRepository


class FiatLedgerLookup(Protocol):
    """Anything that can report stored fiat balances for an address."""

    async def get_fiat_balances(self, address: str) -> Optional[dict[str, int]]:
        """Return {currency: minor units}, or None when the address is unknown."""
        ...


class LedgerFiatLookup:
    """Fiat balances read from the user table.

    Opens a short-lived session per call and never writes. Timeouts and
    degradation are the caller's concern.
    """

    async def get_fiat_balances(self, address: str) -> Optional[dict[str, int]]:
        async with get_db() as session:
            repo = LedgerRepository(session)
            return await repo.get_fiat_balances(address)
