"""Chain catalog and RPC endpoint resolution.

The catalog lists every chain the service knows how to talk to. A deployment
picks a subset of it (``SUPPORTED_CHAIN_IDS``) that is queried when a caller
does not ask for a specific chain.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Optional


class RpcEndpointNotConfiguredError(LookupError):
    """Raised when neither an override nor a registry default RPC endpoint exists."""

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"No RPC endpoint configured for chain {chain_id}")


@dataclass(frozen=True)
class ChainDescriptor:
    """Static connection metadata for an EVM chain."""

    chain_id: int
    name: str
    default_rpc_endpoint: str
    native_currency_symbol: str
    block_explorer_url: str
    supports_batching: bool = True  # public RPC accepts JSON-RPC batch arrays


# ======================
# Chain Catalog
# ======================

BASE = ChainDescriptor(
    chain_id=8453,
    name="Base",
    default_rpc_endpoint="https://mainnet.base.org",
    native_currency_symbol="ETH",
    block_explorer_url="https://basescan.org",
)

BASE_SEPOLIA = ChainDescriptor(
    chain_id=84532,
    name="Base Sepolia",
    default_rpc_endpoint="https://sepolia.base.org",
    native_currency_symbol="ETH",
    block_explorer_url="https://sepolia.basescan.org",
)

CHAIN_CATALOG: tuple[ChainDescriptor, ...] = (BASE, BASE_SEPOLIA)


def resolve_rpc_endpoint(override: Optional[str], default: Optional[str]) -> Optional[str]:
    """Pick the RPC endpoint to use: a non-empty override first, then the default.

    Returns None when neither source provides an endpoint.
    """
    for candidate in (override, default):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


class ChainRegistry:
    """Read-only view over a chain catalog and the supported chain set."""

    def __init__(self, chains: Iterable[ChainDescriptor], supported_chain_ids: Iterable[int]):
        by_id: dict[int, ChainDescriptor] = {}
        for chain in chains:
            if chain.chain_id in by_id:
                raise ValueError(f"Duplicate chain id in catalog: {chain.chain_id}")
            by_id[chain.chain_id] = chain

        supported = tuple(dict.fromkeys(supported_chain_ids))
        unknown = [cid for cid in supported if cid not in by_id]
        if unknown:
            raise ValueError(f"Supported chains missing from catalog: {unknown}")

        self._chains = MappingProxyType(by_id)
        self._supported = supported

    def list_supported_chain_ids(self) -> tuple[int, ...]:
        """Chain IDs queried when the caller does not name one."""
        return self._supported

    def resolve(self, chain_id: int) -> Optional[ChainDescriptor]:
        return self._chains.get(chain_id)

    def rpc_endpoint_for(self, chain_id: int, override: Optional[str] = None) -> str:
        """Resolve the RPC URL for a chain.

        Args:
            chain_id: EVM chain ID
            override: Deployment-supplied endpoint, wins when non-empty

        Raises:
            RpcEndpointNotConfiguredError: if no endpoint is available
        """
        chain = self.resolve(chain_id)
        default = chain.default_rpc_endpoint if chain else None
        endpoint = resolve_rpc_endpoint(override, default)
        if endpoint is None:
            raise RpcEndpointNotConfiguredError(chain_id)
        return endpoint
