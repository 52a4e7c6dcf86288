"""Repository for ledger operations."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from movebridge.ledger.models import FIAT_BALANCE_COLUMNS, User

USER_ID_PREFIX = "0xMove_"


class LedgerRepository:
    """Repository for user records and their fiat balances.

    Addresses are expected to be normalized (lowercase) by the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # User operations
    async def create_user(self, address: str, email: str, username: str) -> User:
        """Insert a new user with zero balances.

        Raises sqlalchemy.exc.IntegrityError on a uniqueness conflict.
        """
        user = User(
            id=f"{USER_ID_PREFIX}{uuid.uuid4().hex}",
            address=address,
            email=email,
            username=username,
            kyc=True,
            ngn_balance=0,
            kes_balance=0,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_user_by_address(self, address: str) -> Optional[User]:
        """Get user by wallet address."""
        stmt = select(User).where(User.address == address).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        stmt = select(User).where(User.email == email).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # Balance operations
    async def get_fiat_balances(self, address: str) -> Optional[dict[str, int]]:
        """Get fiat balances (minor units) for a user, or None if unknown."""
        user = await self.get_user_by_address(address)
        if user is None:
            return None
        return {
            currency: int(getattr(user, column))
            for currency, column in FIAT_BALANCE_COLUMNS.items()
        }

    async def credit_fiat_balance(self, user: User, currency: str, amount: int) -> int:
        """Add minor units to a user's fiat balance. Returns the new balance."""
        column = FIAT_BALANCE_COLUMNS.get(currency.upper())
        if column is None:
            raise ValueError(f"Unsupported fiat currency: {currency}")
        if amount <= 0:
            raise ValueError("Amount must be positive")

        new_balance = getattr(user, column) + amount
        setattr(user, column, new_balance)
        await self.session.flush()
        return new_balance
