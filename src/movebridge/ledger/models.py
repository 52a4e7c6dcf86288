"""SQLAlchemy models for the ledger."""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """User account keyed by wallet address.

    Fiat balances are stored in minor units (kobo, cents) as 64-bit integers.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    address: Mapped[str] = mapped_column(String(42), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    kyc: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    ngn_balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    kes_balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


# Ledger column holding each fiat currency
FIAT_BALANCE_COLUMNS = {
    "NGN": "ngn_balance",
    "KES": "kes_balance",
}
