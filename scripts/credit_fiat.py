#!/usr/bin/env python3
"""Credit a fiat balance to a user directly in the database.

Amounts are minor units (kobo for NGN, cents for KES).

Usage:
    python scripts/credit_fiat.py 0xAbC...123 NGN 500000
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from movebridge.addresses import InvalidAddressError, normalize_address
from movebridge.ledger.database import close_db, get_db, init_db
from movebridge.ledger.repository import LedgerRepository

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def credit_fiat(address: str, currency: str, amount: int) -> int:
    """Credit minor units to the user owning an address. Returns exit code."""
    await init_db()
    try:
        async with get_db() as session:
            repo = LedgerRepository(session)
            user = await repo.get_user_by_address(address)

            if not user:
                logger.error(f"User with address {address} not found")
                return 1

            new_balance = await repo.credit_fiat_balance(user, currency, amount)

        logger.info(f"Credited {amount} {currency.upper()} (minor units) to {address}")
        logger.info(f"New balance: {new_balance} {currency.upper()}")
        return 0
    finally:
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="Credit a fiat balance in minor units")
    parser.add_argument("address", help="User wallet address")
    parser.add_argument("currency", choices=["NGN", "KES"], type=str.upper, help="Fiat currency")
    parser.add_argument("amount", type=int, help="Amount in minor units (kobo/cents)")
    args = parser.parse_args()

    try:
        address = normalize_address(args.address)
    except InvalidAddressError as e:
        parser.error(str(e))

    if args.amount <= 0:
        parser.error("amount must be positive")

    sys.exit(asyncio.run(credit_fiat(address, args.currency, args.amount)))


if __name__ == "__main__":
    main()
