"""Pytest configuration and fixtures."""

import json
import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ["SUPPORTED_CHAIN_IDS"] = "8453"
os.environ["RPC_URL"] = ""
os.environ["USDC_ADDRESS"] = ""
os.environ["USDT_ADDRESS"] = ""

from movebridge.ledger.models import Base
from movebridge.ledger.repository import LedgerRepository

BASE_USDC = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
SEPOLIA_USDC = "0x036cbd53842c5426634e7929541ec2318f3dcf7e"
OWNER = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"


class FakeRpc:
    """In-process JSON-RPC endpoint answering eth_call balanceOf requests.

    ``balances`` maps a lowercase contract address to an int balance, or to a
    string which is returned as a JSON-RPC error message. Unknown contracts
    return empty data ("0x"). Hosts in ``unreachable`` refuse connections.
    """

    def __init__(self, balances=None, batch=True, unreachable=()):
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.batch = batch
        self.unreachable = set(unreachable)
        self.requests: list[tuple[str, object]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append((request.url.host, payload))

        if request.url.host in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        if isinstance(payload, list):
            if not self.batch:
                return httpx.Response(
                    200,
                    json={"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "batch not supported"}},
                )
            return httpx.Response(200, json=[self._reply(item) for item in payload])
        return httpx.Response(200, json=self._reply(payload))

    def _reply(self, item: dict) -> dict:
        contract = item["params"][0]["to"].lower()
        value = self.balances.get(contract)
        reply = {"jsonrpc": "2.0", "id": item["id"]}
        if value is None:
            reply["result"] = "0x"
        elif isinstance(value, str):
            reply["error"] = {"code": 3, "message": value}
        else:
            reply["result"] = "0x" + format(value, "064x")
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_rpc():
    """Factory for FakeRpc endpoints."""
    return FakeRpc


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def ledger_repo(db_session: AsyncSession) -> LedgerRepository:
    """Create ledger repository for testing."""
    return LedgerRepository(db_session)
