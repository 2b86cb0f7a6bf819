"""OTP authentication request and response schemas."""

from pydantic import BaseModel, Field


class SendOtpRequest(BaseModel):
    """Request a one-time password for a phone number."""

    # Optional so a missing phone yields the documented 400, not a 422.
    phone: str | None = Field(None, description="Phone number to send the code to")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class VerifyOtpRequest(BaseModel):
    """Submit the code received by SMS."""

    phone: str | None = Field(None, description="Phone number the code was sent to")
    otp: str | None = Field(None, description="Numeric one-time password")


class VerifyOtpResponse(BaseModel):
    """Successful login carrying the session token."""

    message: str = Field(..., description="Human-readable confirmation")
    token: str = Field(..., description="Bearer token valid for 7 days")
