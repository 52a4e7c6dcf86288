"""Request and response contracts for the web layer."""

from movebridge.web.contracts.balances import BalanceSnapshot, ChainBalance, ChainStatus
from movebridge.web.contracts.onboarding import OnboardingRequest, OnboardingResponse, UserInfo

__all__ = [
    # Balance contracts
    "BalanceSnapshot",
    "ChainBalance",
    "ChainStatus",
    # Onboarding contracts
    "OnboardingRequest",
    "OnboardingResponse",
    "UserInfo",
]
