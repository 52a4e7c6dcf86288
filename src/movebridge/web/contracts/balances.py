"""Balance snapshot contracts.

A snapshot merges ledger-held fiat balances with on-chain token balances.
All amounts are minor-unit integers carried as strings so values above the
64-bit range survive JSON round-trips.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChainStatus(str, Enum):
    """How a queried chain contributed to a snapshot (not serialized)."""

    READ = "read"                    # every token read succeeded
    PARTIAL = "partial"              # some token reads failed, reported as "0"
    UNREACHABLE = "unreachable"      # RPC unreachable, every token reported as "0"
    NO_TOKENS = "no_tokens"          # nothing configured on this chain, no entries
    UNKNOWN_CHAIN = "unknown_chain"  # chain not in the catalog, no entries


class ChainBalance(BaseModel):
    """Balance of one token on one chain."""

    model_config = ConfigDict(populate_by_name=True)

    chain_id: int = Field(..., alias="chainId", description="EVM chain ID")
    balance: str = Field(..., description="Balance in base units (per token decimals)")


class BalanceSnapshot(BaseModel):
    """Point-in-time balances for one wallet address."""

    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(..., description="Normalized (lowercase) wallet address")
    queried_chains: list[int] = Field(
        default_factory=list, alias="queriedChains", description="Chains queried, in order"
    )
    fiat: dict[str, str] = Field(
        default_factory=dict, description="Fiat balances in minor units (kobo, cents)"
    )
    crypto: dict[str, list[ChainBalance]] = Field(
        default_factory=dict, description="Per-token list of per-chain balances"
    )
    token_decimals: dict[str, int] = Field(
        default_factory=dict, alias="tokenDecimals", description="Display decimals per token"
    )
    updated_at: str = Field(..., alias="updatedAt", description="Generation timestamp (ISO 8601)")

    # Diagnostics kept out of the wire format
    chain_status: dict[int, ChainStatus] = Field(default_factory=dict, exclude=True)
    failed_reads: list[str] = Field(default_factory=list, exclude=True)
    fiat_degraded: bool = Field(default=False, exclude=True)
