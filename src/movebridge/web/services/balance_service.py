"""Balance aggregation across the ledger and on-chain token contracts.

One call produces one snapshot: fiat balances come from the ledger, token
balances from a ``balanceOf`` read per configured token on every target chain.
The ledger read and every chain read run concurrently and are joined before
the snapshot is built.

Failures below the aggregator never fail the request. An unreachable chain or
a failed token read is reported as "0"; a slow or broken ledger reports "0"
for every currency. The cause stays visible in the logs and in the snapshot's
non-serialized diagnostics.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence

from movebridge.addresses import normalize_address
from movebridge.chains import CHAIN_CATALOG, ChainRegistry
from movebridge.config import Settings
from movebridge.tokens import TOKEN_REGISTRY, CryptoToken, TokenRegistry
from movebridge.web.contracts.balances import BalanceSnapshot, ChainBalance, ChainStatus
from movebridge.web.services.balance_reader import ChainUnreachableError, ContractBalanceReader
from movebridge.web.services.fiat_ledger import FiatLedgerLookup, LedgerFiatLookup

logger = logging.getLogger(__name__)


def resolve_contract_address(override: Optional[str], default: Optional[str]) -> Optional[str]:
    """Pick a token contract: a non-empty override first, then the registry address."""
    for candidate in (override, default):
        if candidate and candidate.strip():
            return candidate.strip().lower()
    return None


@dataclass
class ChainReadOutcome:
    """What one chain contributed to a snapshot."""

    chain_id: int
    status: ChainStatus
    entries: list[tuple[str, str]] = field(default_factory=list)  # (symbol, balance)
    failures: list[str] = field(default_factory=list)


class BalanceAggregator:
    """Builds balance snapshots from the registries, an RPC reader and the ledger."""

    def __init__(
        self,
        token_registry: TokenRegistry,
        chain_registry: ChainRegistry,
        reader: ContractBalanceReader,
        fiat_ledger: FiatLedgerLookup,
        address_overrides: Optional[Mapping[str, str]] = None,
        ledger_timeout: float = 0.8,
    ):
        self.token_registry = token_registry
        self.chain_registry = chain_registry
        self.reader = reader
        self.fiat_ledger = fiat_ledger
        self.address_overrides = dict(address_overrides or {})
        self.ledger_timeout = ledger_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "BalanceAggregator":
        """Wire the default catalogs and collaborators from settings."""
        chain_registry = ChainRegistry(CHAIN_CATALOG, settings.chain_ids)
        reader = ContractBalanceReader(
            chain_registry,
            rpc_override=settings.rpc_url,
            timeout=settings.rpc_timeout_seconds,
        )
        return cls(
            token_registry=TOKEN_REGISTRY,
            chain_registry=chain_registry,
            reader=reader,
            fiat_ledger=LedgerFiatLookup(),
            address_overrides=settings.token_address_overrides,
            ledger_timeout=settings.ledger_timeout_seconds,
        )

    def resolve_chain_tokens(self, chain_id: int) -> list[tuple[str, str]]:
        """(symbol, contract address) pairs to query on a chain, in registry order.

        Tokens with neither an override nor a registry address are left out.
        """
        tokens = []
        for symbol in self.token_registry.crypto_symbols():
            token = self.token_registry.lookup_by_symbol(symbol, chain_id)
            default = token.contract_address if isinstance(token, CryptoToken) else None
            address = resolve_contract_address(self.address_overrides.get(symbol), default)
            if address:
                tokens.append((symbol, address))
        return tokens

    async def get_balances(
        self,
        address: str,
        chain_ids: Sequence[int] = (),
    ) -> BalanceSnapshot:
        """Build a snapshot for an address.

        Args:
            address: 0x-prefixed 20-byte hex address, any case
            chain_ids: Chains to query; empty means every supported chain

        Raises:
            InvalidAddressError: if the address is malformed (before any I/O)
        """
        owner = normalize_address(address)
        targets = list(chain_ids) if chain_ids else list(self.chain_registry.list_supported_chain_ids())

        logger.info("Aggregating balances for %s on chains %s", owner, targets)

        fiat_result, *chain_outcomes = await asyncio.gather(
            self._read_fiat(owner),
            *(self._read_chain(chain_id, owner) for chain_id in targets),
        )
        fiat, fiat_degraded = fiat_result

        crypto_symbols = self.token_registry.crypto_symbols()
        crypto: dict[str, list[ChainBalance]] = {symbol: [] for symbol in crypto_symbols}
        chain_status: dict[int, ChainStatus] = {}
        failed_reads: list[str] = []

        for outcome in chain_outcomes:
            chain_status[outcome.chain_id] = outcome.status
            failed_reads.extend(outcome.failures)
            for symbol, balance in outcome.entries:
                crypto.setdefault(symbol, []).append(
                    ChainBalance(chain_id=outcome.chain_id, balance=balance)
                )

        token_decimals = {}
        for symbol in crypto_symbols:
            decimals = self.token_registry.decimals_for(symbol)
            if decimals is not None:
                token_decimals[symbol] = decimals

        if failed_reads or fiat_degraded:
            logger.warning(
                "Degraded snapshot for %s: chain status %s, fiat degraded=%s",
                owner,
                {cid: status.value for cid, status in chain_status.items()},
                fiat_degraded,
            )

        return BalanceSnapshot(
            address=owner,
            queried_chains=targets,
            fiat=fiat,
            crypto=crypto,
            token_decimals=token_decimals,
            updated_at=datetime.now(timezone.utc).isoformat(),
            chain_status=chain_status,
            failed_reads=failed_reads,
            fiat_degraded=fiat_degraded,
        )

    async def _read_fiat(self, owner: str) -> tuple[dict[str, str], bool]:
        """Fiat balances as minor-unit strings, plus whether the read degraded."""
        balances = {currency: "0" for currency in self.token_registry.fiat_symbols()}

        try:
            stored = await asyncio.wait_for(
                self.fiat_ledger.get_fiat_balances(owner), timeout=self.ledger_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Ledger read for %s timed out after %.2fs", owner, self.ledger_timeout)
            return balances, True
        except Exception as e:
            logger.warning(f"Ledger read for {owner} failed: {e}")
            return balances, True

        if stored:
            for currency in balances:
                if currency in stored:
                    balances[currency] = str(stored[currency])
        return balances, False

    async def _read_chain(self, chain_id: int, owner: str) -> ChainReadOutcome:
        """Read every configured token on one chain."""
        if self.chain_registry.resolve(chain_id) is None:
            logger.info("Chain %s is not in the catalog, skipping", chain_id)
            return ChainReadOutcome(chain_id, ChainStatus.UNKNOWN_CHAIN)

        tokens = self.resolve_chain_tokens(chain_id)
        if not tokens:
            logger.debug("No token contracts configured on chain %s", chain_id)
            return ChainReadOutcome(chain_id, ChainStatus.NO_TOKENS)

        try:
            results = await self.reader.read_balances(chain_id, owner, tokens)
        except ChainUnreachableError as e:
            logger.warning("Chain %s unreachable, reporting zero balances: %s", chain_id, e.reason)
            return self._zeroed(chain_id, tokens, e.reason)
        except Exception as e:
            logger.exception(f"Unexpected error reading chain {chain_id}")
            return self._zeroed(chain_id, tokens, repr(e))

        outcome = ChainReadOutcome(chain_id, ChainStatus.READ)
        for result in results:
            if result.ok:
                outcome.entries.append((result.symbol, result.balance))
            else:
                logger.warning(
                    "balanceOf failed for %s on chain %s (%s): %s",
                    result.symbol,
                    chain_id,
                    result.contract_address,
                    result.error,
                )
                outcome.entries.append((result.symbol, "0"))
                outcome.failures.append(f"{result.symbol}@{chain_id}: {result.error}")

        if outcome.failures:
            outcome.status = ChainStatus.PARTIAL
        return outcome

    @staticmethod
    def _zeroed(chain_id: int, tokens: Sequence[tuple[str, str]], reason: str) -> ChainReadOutcome:
        return ChainReadOutcome(
            chain_id,
            ChainStatus.UNREACHABLE,
            entries=[(symbol, "0") for symbol, _ in tokens],
            failures=[f"{symbol}@{chain_id}: {reason}" for symbol, _ in tokens],
        )
