"""Onboarding endpoint: register a wallet address with contact details."""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from movebridge.ledger.database import get_db
from movebridge.ledger.repository import LedgerRepository
from movebridge.web.contracts.onboarding import OnboardingRequest, OnboardingResponse, UserInfo

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/onboarding", response_model=OnboardingResponse, status_code=201)
async def onboard(http_request: Request):
    """Create a user for an address, or return the existing one.

    Returns 201 for a new user and 200 with ``existed: true`` when the
    address (or email) is already registered.
    """
    try:
        body = await http_request.json()
    except ValueError:
        body = None
    request = OnboardingRequest.from_body(body)

    error = request.validation_error()
    if error:
        raise HTTPException(status_code=400, detail=error)

    address = request.address.lower()
    email = request.email.strip()
    username = request.username.strip()

    try:
        async with get_db() as session:
            repo = LedgerRepository(session)
            user = await repo.create_user(address=address, email=email, username=username)
            created = UserInfo.from_user(user)
        logger.info("Onboarded %s", address)
        return OnboardingResponse(user=created, existed=False)
    except IntegrityError:
        logger.info("Onboarding conflict for %s, looking up existing user", address)

    async with get_db() as session:
        repo = LedgerRepository(session)
        existing = await repo.get_user_by_address(address)
        if existing is None:
            existing = await repo.get_user_by_email(email)
        if existing is None:
            raise HTTPException(status_code=500, detail="Could not create user")
        found = UserInfo.from_user(existing)

    response = OnboardingResponse(user=found, existed=True)
    return JSONResponse(response.model_dump(mode="json", by_alias=True), status_code=200)
