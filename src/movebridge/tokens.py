"""Token registry for fiat currencies and on-chain stablecoins.

Two kinds of token live in the registry:

- ``CryptoToken``: an ERC-20 contract on a specific chain. The contract
  address may be ``None`` when the token is catalogued for a chain but no
  deployment is configured there yet.
- ``FiatToken``: a currency held in the internal ledger. Its chain
  association is nominal; ``contract_address`` and ``decimals`` carry the
  ``"fiat"`` sentinel.

Registration order is the order of ``TOKEN_CATALOG``: crypto tokens first
(USDC then USDT, per chain), then fiat tokens (NGN, KES). Lookups that omit a
chain ID return the first match in that order.
"""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, Literal, Optional, Union

from movebridge.chains import BASE, BASE_SEPOLIA

FIAT_SENTINEL = "fiat"


@dataclass(frozen=True)
class CryptoToken:
    """ERC-20 token deployed on a chain."""

    symbol: str
    display_name: str
    logo_ref: str
    chain_id: int
    decimals: int
    contract_address: Optional[str] = None
    external_price_id: Optional[str] = None  # CoinGecko id
    kind: Literal["crypto"] = "crypto"

    @property
    def id(self) -> str:
        return f"{self.symbol}:{self.chain_id}"


@dataclass(frozen=True)
class FiatToken:
    """Fiat currency tracked in the ledger."""

    symbol: str
    display_name: str
    logo_ref: str
    chain_id: int
    country_code: str
    static_exchange_rate: Optional[str] = None
    kind: Literal["fiat"] = "fiat"

    @property
    def id(self) -> str:
        return f"{self.symbol}:{FIAT_SENTINEL}"

    @property
    def contract_address(self) -> str:
        return FIAT_SENTINEL

    @property
    def decimals(self) -> str:
        return FIAT_SENTINEL


Token = Union[CryptoToken, FiatToken]


class TokenRegistry:
    """Immutable catalog of tokens with lookup helpers.

    Built once from a static catalog. Contract addresses are normalized to
    lowercase on the way in so lookups compare case-insensitively.
    """

    def __init__(self, tokens: Iterable[Token]):
        ordered: list[Token] = []
        by_id: dict[str, Token] = {}
        crypto_keys: set[tuple[str, int]] = set()

        for token in tokens:
            if isinstance(token, CryptoToken):
                key = (token.symbol, token.chain_id)
                if key in crypto_keys:
                    raise ValueError(f"Duplicate crypto token {token.symbol} on chain {token.chain_id}")
                crypto_keys.add(key)
                if token.decimals < 0:
                    raise ValueError(f"Negative decimals for {token.id}")
                if token.contract_address:
                    token = replace(token, contract_address=token.contract_address.lower())
            elif not isinstance(token, FiatToken):
                raise TypeError(f"Unsupported token type: {type(token).__name__}")

            if token.id in by_id:
                raise ValueError(f"Duplicate token id: {token.id}")
            by_id[token.id] = token
            ordered.append(token)

        self._tokens = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    def __iter__(self):
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def lookup_by_id(self, token_id: str) -> Optional[Token]:
        return self._by_id.get(token_id)

    def lookup_by_symbol(self, symbol: str, chain_id: Optional[int] = None) -> Optional[Token]:
        """Find a token by symbol, optionally pinned to a chain.

        Without a chain ID the first match in registration order wins.
        """
        for token in self._tokens:
            if token.symbol != symbol:
                continue
            if chain_id is None or token.chain_id == chain_id:
                return token
        return None

    def lookup_by_contract_address(self, address: str, chain_id: int) -> Optional[CryptoToken]:
        """Find a crypto token by contract address on a chain (case-insensitive)."""
        normalized = address.lower()
        for token in self._tokens:
            if (
                isinstance(token, CryptoToken)
                and token.contract_address is not None
                and token.contract_address == normalized
                and token.chain_id == chain_id
            ):
                return token
        return None

    def list_by_type(self, kind: str) -> tuple[Token, ...]:
        """List tokens of one kind ("crypto" or "fiat") in registration order."""
        if kind == "crypto":
            return tuple(t for t in self._tokens if isinstance(t, CryptoToken))
        if kind == "fiat":
            return tuple(t for t in self._tokens if isinstance(t, FiatToken))
        raise ValueError(f"Unknown token type: {kind}")

    def crypto_symbols(self) -> tuple[str, ...]:
        """Unique crypto symbols in registration order."""
        return tuple(dict.fromkeys(t.symbol for t in self.list_by_type("crypto")))

    def fiat_symbols(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(t.symbol for t in self.list_by_type("fiat")))

    def decimals_for(self, symbol: str) -> Optional[int]:
        """Display decimals of a crypto symbol (first registered deployment)."""
        token = self.lookup_by_symbol(symbol)
        if isinstance(token, CryptoToken):
            return token.decimals
        return None


# ======================
# Token Catalog
# ======================

TOKEN_CATALOG: tuple[Token, ...] = (
    CryptoToken(
        symbol="USDC",
        display_name="USD Coin",
        logo_ref="/tokens/usdc.png",
        chain_id=BASE.chain_id,
        decimals=6,
        contract_address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        external_price_id="usd-coin",
    ),
    CryptoToken(
        symbol="USDT",
        display_name="Tether USD",
        logo_ref="/tokens/usdt.png",
        chain_id=BASE.chain_id,
        decimals=6,
        contract_address=None,  # not deployed for this service yet
        external_price_id="tether",
    ),
    CryptoToken(
        symbol="USDC",
        display_name="USD Coin",
        logo_ref="/tokens/usdc.png",
        chain_id=BASE_SEPOLIA.chain_id,
        decimals=6,
        contract_address="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        external_price_id="usd-coin",
    ),
    CryptoToken(
        symbol="USDT",
        display_name="Tether USD",
        logo_ref="/tokens/usdt.png",
        chain_id=BASE_SEPOLIA.chain_id,
        decimals=6,
        contract_address=None,
        external_price_id="tether",
    ),
    FiatToken(
        symbol="NGN",
        display_name="Nigerian Naira",
        logo_ref="/tokens/nigerian.svg",
        chain_id=BASE.chain_id,
        country_code="NG",
    ),
    FiatToken(
        symbol="KES",
        display_name="Kenyan Shilling",
        logo_ref="/tokens/kenya.svg",
        chain_id=BASE.chain_id,
        country_code="KE",
    ),
)

TOKEN_REGISTRY = TokenRegistry(TOKEN_CATALOG)
