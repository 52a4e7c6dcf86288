"""EVM address validation and normalization."""

import re

EVM_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")


class InvalidAddressError(ValueError):
    """Raised when a value is not a 20-byte 0x-prefixed hex address."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid EVM address: {value!r}")


def is_evm_address(value: object) -> bool:
    """Check whether a value is a well-formed EVM address (any hex case)."""
    return isinstance(value, str) and EVM_ADDRESS_RE.fullmatch(value) is not None


def normalize_address(value: object) -> str:
    """Validate an EVM address and return it lowercased.

    Raises:
        InvalidAddressError: if the value is missing or malformed
    """
    if not is_evm_address(value):
        raise InvalidAddressError(value)
    return value.lower()
