"""Onboarding request and response contracts."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from movebridge.addresses import normalize_address


class OnboardingRequest(BaseModel):
    """Register a wallet address with contact details."""

    # Any: malformed values are reported by validation_error()
    address: Any = Field(None, description="EVM wallet address")
    email: Any = Field(None, description="Contact email")
    username: Any = Field(None, description="Display name")

    @classmethod
    def from_body(cls, body: Any) -> "OnboardingRequest":
        """Build a request from a decoded JSON body; non-objects count as empty."""
        if not isinstance(body, dict):
            return cls()
        return cls(
            address=body.get("address"),
            email=body.get("email"),
            username=body.get("username"),
        )

    def validation_error(self) -> Optional[str]:
        """Return a client-facing message for the first invalid field, if any."""
        try:
            normalize_address(self.address)
        except ValueError:
            return "Invalid EVM address"
        if not isinstance(self.email, str) or "@" not in self.email:
            return "Invalid email"
        if not isinstance(self.username, str) or len(self.username.strip()) < 2:
            return "Invalid username"
        return None


class UserInfo(BaseModel):
    """Public view of a user record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    address: str
    email: str
    username: str
    kyc: bool
    ngn_balance: str = Field(..., alias="ngnBalance")
    kes_balance: str = Field(..., alias="kesBalance")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @field_validator("ngn_balance", "kes_balance", mode="before")
    @classmethod
    def stringify_minor_units(cls, v) -> str:
        """Minor-unit integers are exposed as strings."""
        return str(v)

    @classmethod
    def from_user(cls, user) -> "UserInfo":
        return cls(
            id=user.id,
            address=user.address,
            email=user.email,
            username=user.username,
            kyc=user.kyc,
            ngn_balance=user.ngn_balance,
            kes_balance=user.kes_balance,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class OnboardingResponse(BaseModel):
    """Created or pre-existing user."""

    user: UserInfo
    existed: bool = False
