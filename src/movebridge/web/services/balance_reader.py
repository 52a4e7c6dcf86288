"""ERC-20 balance reads over JSON-RPC.

Each token balance is an ``eth_call`` of ``balanceOf(owner)``. When the chain's
RPC accepts JSON-RPC batch arrays, every call for a chain goes out in a single
POST. Otherwise, or when the batch request itself fails, the calls are sent
one by one (concurrently) so a bad token never takes its siblings down.

Balances are carried as decimal strings of the raw uint256 value.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from movebridge.chains import ChainRegistry, RpcEndpointNotConfiguredError

logger = logging.getLogger(__name__)

# ERC-20 balanceOf(address) function selector
BALANCE_OF_SELECTOR = "0x70a08231"


class ChainUnreachableError(Exception):
    """Raised when a chain's RPC endpoint cannot be used at all."""

    def __init__(self, chain_id: int, reason: str):
        self.chain_id = chain_id
        self.reason = reason
        super().__init__(f"Chain {chain_id} unreachable: {reason}")


class BatchUnavailableError(Exception):
    """Raised when an RPC endpoint rejects or mangles a batch request."""


@dataclass(frozen=True)
class BalanceReadResult:
    """Outcome of one balanceOf call. Exactly one of balance/error is set."""

    symbol: str
    contract_address: str
    balance: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def encode_balance_of(owner_address: str) -> str:
    """Build calldata for balanceOf(owner)."""
    return f"{BALANCE_OF_SELECTOR}{owner_address.lower().replace('0x', '').zfill(64)}"


def decode_uint256(result: object) -> str:
    """Decode a hex eth_call result into a decimal string.

    Raises:
        ValueError: on empty return data or anything that is not hex
    """
    if not isinstance(result, str) or not result.startswith("0x"):
        raise ValueError(f"Unexpected eth_call result: {result!r}")
    if result == "0x":
        raise ValueError("Empty return data (no contract at address?)")
    return str(int(result, 16))


class ContractBalanceReader:
    """Reads token balances for one owner on one chain per call."""

    def __init__(
        self,
        chain_registry: ChainRegistry,
        rpc_override: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the reader.

        Args:
            chain_registry: Catalog used to resolve RPC endpoints
            rpc_override: Endpoint used for every chain when non-empty
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.chain_registry = chain_registry
        self.rpc_override = rpc_override
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def read_balances(
        self,
        chain_id: int,
        owner_address: str,
        tokens: Sequence[tuple[str, str]],
    ) -> list[BalanceReadResult]:
        """Read balanceOf(owner) for each (symbol, contract_address) pair.

        Results come back in input order. Individual failures are reported
        per token and never raised.

        Raises:
            ChainUnreachableError: if the RPC endpoint cannot be used at all
        """
        if not tokens:
            return []

        try:
            rpc_url = self.chain_registry.rpc_endpoint_for(chain_id, self.rpc_override)
        except RpcEndpointNotConfiguredError as e:
            raise ChainUnreachableError(chain_id, str(e)) from e

        chain = self.chain_registry.resolve(chain_id)
        use_batch = chain.supports_batching if chain else True
        calldata = encode_balance_of(owner_address)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            if use_batch and len(tokens) > 1:
                try:
                    return await self._read_batched(client, rpc_url, calldata, tokens)
                except httpx.ConnectError as e:
                    raise ChainUnreachableError(chain_id, f"connect failed: {e}") from e
                except httpx.TimeoutException as e:
                    raise ChainUnreachableError(chain_id, f"timed out: {e!r}") from e
                except (BatchUnavailableError, httpx.HTTPError, ValueError) as e:
                    logger.debug(
                        "Batch read failed on chain %s, falling back to single calls: %s",
                        chain_id,
                        e,
                    )

            return await self._read_individually(client, rpc_url, chain_id, calldata, tokens)

    async def _read_batched(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        calldata: str,
        tokens: Sequence[tuple[str, str]],
    ) -> list[BalanceReadResult]:
        """Send every call in one JSON-RPC batch and match replies by id."""
        ids = [next(self._ids) for _ in tokens]
        payload = [
            self._eth_call_payload(request_id, contract, calldata)
            for request_id, (_, contract) in zip(ids, tokens)
        ]

        response = await client.post(rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, list):
            raise BatchUnavailableError(f"Non-list batch response: {str(data)[:200]}")

        replies = {item.get("id"): item for item in data if isinstance(item, dict)}
        if not any(request_id in replies for request_id in ids):
            raise BatchUnavailableError("Batch response matched none of the request ids")

        return [
            self._result_from_reply(symbol, contract, replies.get(request_id))
            for request_id, (symbol, contract) in zip(ids, tokens)
        ]

    async def _read_individually(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        chain_id: int,
        calldata: str,
        tokens: Sequence[tuple[str, str]],
    ) -> list[BalanceReadResult]:
        """Send one eth_call per token concurrently."""
        outcomes = await asyncio.gather(
            *(self._read_one(client, rpc_url, calldata, symbol, contract) for symbol, contract in tokens)
        )

        results = [result for result, _ in outcomes]
        if all(transport_failed for _, transport_failed in outcomes):
            reasons = "; ".join(r.error or "" for r in results)
            raise ChainUnreachableError(chain_id, reasons)
        return results

    async def _read_one(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        calldata: str,
        symbol: str,
        contract: str,
    ) -> tuple[BalanceReadResult, bool]:
        """Run a single eth_call. Returns the result and whether transport failed."""
        payload = self._eth_call_payload(next(self._ids), contract, calldata)
        try:
            response = await client.post(rpc_url, json=payload)
            response.raise_for_status()
            reply = response.json()
        except httpx.TransportError as e:
            return BalanceReadResult(symbol, contract, error=f"transport error: {e!r}"), True
        except (httpx.HTTPStatusError, ValueError) as e:
            return BalanceReadResult(symbol, contract, error=f"bad response: {e}"), False

        return self._result_from_reply(symbol, contract, reply), False

    @staticmethod
    def _eth_call_payload(request_id: int, contract: str, calldata: str) -> dict:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "eth_call",
            "params": [{"to": contract, "data": calldata}, "latest"],
        }

    @staticmethod
    def _result_from_reply(symbol: str, contract: str, reply: object) -> BalanceReadResult:
        """Turn one JSON-RPC reply object into a read result."""
        if not isinstance(reply, dict):
            return BalanceReadResult(symbol, contract, error="missing reply")
        if reply.get("error") is not None:
            error = reply["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            return BalanceReadResult(symbol, contract, error=f"rpc error: {message}")
        try:
            return BalanceReadResult(symbol, contract, balance=decode_uint256(reply.get("result")))
        except ValueError as e:
            return BalanceReadResult(symbol, contract, error=str(e))
