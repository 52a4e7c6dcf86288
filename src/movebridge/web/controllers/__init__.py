"""HTTP controllers for web API endpoints."""

from movebridge.web.controllers.balances import router as balances_router

__all__ = [
    "balances_router",
]
