"""Web boundary layer: read-only balance contracts, services and controllers."""

__all__ = [
    "contracts",
    "services",
    "controllers",
]
