"""Balance API endpoint.

Merges ledger fiat balances with on-chain token balances for one address.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from movebridge.addresses import InvalidAddressError
from movebridge.config import get_settings
from movebridge.web.contracts.balances import BalanceSnapshot
from movebridge.web.services.balance_service import BalanceAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/balances", tags=["balances"])


@lru_cache
def get_balance_aggregator() -> BalanceAggregator:
    """Aggregator shared by every request (registries are immutable)."""
    return BalanceAggregator.from_settings(get_settings())


@router.get("", response_model=BalanceSnapshot)
async def get_balances(
    address: Optional[str] = Query(None, description="Wallet address (0x + 40 hex chars)"),
    chain_id: Optional[int] = Query(None, alias="chainId", description="Single chain to query"),
    aggregator: BalanceAggregator = Depends(get_balance_aggregator),
) -> BalanceSnapshot:
    """Get fiat and token balances for a wallet.

    Without ``chainId`` every supported chain is queried. Chains or tokens
    that cannot be read are reported as "0" rather than failing the request.

    Args:
        address: Wallet address
        chain_id: Optional chain to restrict the query to

    Returns:
        BalanceSnapshot
    """
    chain_ids = [chain_id] if chain_id is not None else []
    try:
        return await aggregator.get_balances(address, chain_ids)
    except InvalidAddressError:
        raise HTTPException(status_code=400, detail="Invalid or missing address")
