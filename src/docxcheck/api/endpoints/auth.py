# src/docxcheck/api/endpoints/auth.py
"""Phone OTP authentication endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from docxcheck.api.dependencies import OtpAuthenticatorDep
from docxcheck.schemas.auth import (
    MessageResponse,
    SendOtpRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from docxcheck.services.errors import MissingInputError
from docxcheck.services.notifier import NotifierError
from docxcheck.services.otp import (
    ChallengeExpiredError,
    IdentityNotFoundError,
    InvalidChallengeError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/send-otp",
    summary="Send a one-time password by SMS",
    response_model=MessageResponse,
)
async def send_otp(
    payload: SendOtpRequest,
    authenticator: OtpAuthenticatorDep,
) -> MessageResponse:
    """Issue a fresh OTP for the phone number, replacing any earlier one."""
    try:
        issued = await authenticator.request_challenge(payload.phone)
    except MissingInputError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except (NotifierError, SQLAlchemyError) as err:
        logger.exception("OTP issuance failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate OTP.",
        ) from err

    return MessageResponse(message=issued.message)


@router.post(
    "/verify-otp",
    summary="Exchange a one-time password for a session token",
    response_model=VerifyOtpResponse,
)
async def verify_otp(
    payload: VerifyOtpRequest,
    authenticator: OtpAuthenticatorDep,
) -> VerifyOtpResponse:
    """Consume the active OTP and return a 7-day bearer token."""
    try:
        token = authenticator.verify_challenge(payload.phone, payload.otp)
    except IdentityNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(err),
        ) from err
    except (MissingInputError, InvalidChallengeError, ChallengeExpiredError) as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except SQLAlchemyError as err:
        logger.exception("OTP verification failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Verification failed",
        ) from err

    return VerifyOtpResponse(message="Login successful", token=token)
