"""Tests for the token and chain registries."""

import pytest

from movebridge.chains import (
    BASE,
    BASE_SEPOLIA,
    CHAIN_CATALOG,
    ChainDescriptor,
    ChainRegistry,
    RpcEndpointNotConfiguredError,
    resolve_rpc_endpoint,
)
from movebridge.tokens import (
    TOKEN_REGISTRY,
    CryptoToken,
    FiatToken,
    TokenRegistry,
)


class TestTokenRegistry:
    """Tests for token lookups."""

    def test_ids_follow_symbol_and_chain(self):
        """Crypto ids carry the chain, fiat ids the fiat sentinel."""
        assert TOKEN_REGISTRY.lookup_by_id("USDC:8453").symbol == "USDC"
        ngn = TOKEN_REGISTRY.lookup_by_id("NGN:fiat")
        assert isinstance(ngn, FiatToken)
        assert ngn.contract_address == "fiat"
        assert ngn.decimals == "fiat"
        assert ngn.country_code == "NG"

    def test_lookup_by_symbol_without_chain_returns_first_registered(self):
        """Omitting the chain picks the first token in registration order."""
        token = TOKEN_REGISTRY.lookup_by_symbol("USDC")
        assert token.chain_id == BASE.chain_id

    def test_lookup_by_symbol_with_chain(self):
        """A chain ID pins the lookup."""
        token = TOKEN_REGISTRY.lookup_by_symbol("USDC", BASE_SEPOLIA.chain_id)
        assert token.id == "USDC:84532"
        assert TOKEN_REGISTRY.lookup_by_symbol("USDC", 1) is None

    def test_lookup_by_contract_address_is_case_insensitive(self):
        """Mixed-case addresses match the normalized registry entry."""
        token = TOKEN_REGISTRY.lookup_by_contract_address(
            "0x833589FCD6EDB6E08F4C7C32D4F71B54BDA02913", BASE.chain_id
        )
        assert isinstance(token, CryptoToken)
        assert token.symbol == "USDC"
        assert token.contract_address == "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"

    def test_lookup_by_contract_address_wrong_chain(self):
        """The same address on another chain does not match."""
        assert TOKEN_REGISTRY.lookup_by_contract_address(
            "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", BASE_SEPOLIA.chain_id
        ) is None

    def test_lookup_by_contract_address_never_matches_fiat(self):
        """The fiat sentinel is not an address."""
        assert TOKEN_REGISTRY.lookup_by_contract_address("fiat", BASE.chain_id) is None

    def test_list_by_type_keeps_registration_order(self):
        """Tokens come back grouped by kind in registration order."""
        crypto = TOKEN_REGISTRY.list_by_type("crypto")
        fiat = TOKEN_REGISTRY.list_by_type("fiat")

        assert [t.id for t in crypto] == ["USDC:8453", "USDT:8453", "USDC:84532", "USDT:84532"]
        assert [t.symbol for t in fiat] == ["NGN", "KES"]
        assert TOKEN_REGISTRY.crypto_symbols() == ("USDC", "USDT")
        assert TOKEN_REGISTRY.fiat_symbols() == ("NGN", "KES")

    def test_list_by_type_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            TOKEN_REGISTRY.list_by_type("nft")

    def test_decimals_for(self):
        assert TOKEN_REGISTRY.decimals_for("USDC") == 6
        assert TOKEN_REGISTRY.decimals_for("NGN") is None

    def test_duplicate_crypto_symbol_on_chain_rejected(self):
        """(symbol, chain) must be unique among crypto tokens."""
        token = CryptoToken(symbol="USDC", display_name="USD Coin", logo_ref="", chain_id=1, decimals=6)
        with pytest.raises(ValueError):
            TokenRegistry([token, token])

    def test_duplicate_fiat_id_rejected(self):
        ngn = FiatToken(symbol="NGN", display_name="Naira", logo_ref="", chain_id=1, country_code="NG")
        with pytest.raises(ValueError):
            TokenRegistry([ngn, ngn])


class TestChainRegistry:
    """Tests for chain lookups and RPC resolution."""

    def test_supported_chain_ids_in_order(self):
        registry = ChainRegistry(CHAIN_CATALOG, [84532, 8453])
        assert registry.list_supported_chain_ids() == (84532, 8453)

    def test_supported_chain_must_be_catalogued(self):
        with pytest.raises(ValueError):
            ChainRegistry(CHAIN_CATALOG, [1])

    def test_resolve(self):
        registry = ChainRegistry(CHAIN_CATALOG, [8453])
        assert registry.resolve(8453) is BASE
        assert registry.resolve(1) is None

    def test_override_takes_precedence(self):
        registry = ChainRegistry(CHAIN_CATALOG, [8453])
        assert registry.rpc_endpoint_for(8453, "https://rpc.example") == "https://rpc.example"

    def test_blank_override_falls_back_to_default(self):
        registry = ChainRegistry(CHAIN_CATALOG, [8453])
        assert registry.rpc_endpoint_for(8453, "   ") == BASE.default_rpc_endpoint
        assert registry.rpc_endpoint_for(8453) == BASE.default_rpc_endpoint

    def test_unknown_chain_without_override_fails(self):
        registry = ChainRegistry(CHAIN_CATALOG, [8453])
        with pytest.raises(RpcEndpointNotConfiguredError):
            registry.rpc_endpoint_for(1)

    def test_chain_without_default_endpoint_fails(self):
        bare = ChainDescriptor(
            chain_id=999,
            name="Bare",
            default_rpc_endpoint="",
            native_currency_symbol="ETH",
            block_explorer_url="",
        )
        registry = ChainRegistry([bare], [999])
        with pytest.raises(RpcEndpointNotConfiguredError):
            registry.rpc_endpoint_for(999)
        assert registry.rpc_endpoint_for(999, "https://rpc.example") == "https://rpc.example"

    def test_resolve_rpc_endpoint_is_pure(self):
        assert resolve_rpc_endpoint(" https://a ", "https://b") == "https://a"
        assert resolve_rpc_endpoint("", "https://b") == "https://b"
        assert resolve_rpc_endpoint(None, None) is None
