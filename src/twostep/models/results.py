"""
Operation Results

Every service operation returns either a success model or a Failure.
Expected failures are never raised.
"""

from typing import Literal, Union

from pydantic import BaseModel

from ..errors import ErrorCode
from .user import UserView

GENERIC_TOKEN_MESSAGE = "Token is invalid or user doesn't exist"
USER_MISSING_MESSAGE = "User does not exist"


class Failure(BaseModel):
    """Typed failure outcome."""
    status: Literal["fail", "error"] = "fail"
    error: ErrorCode
    message: str
    retryable: bool = False

    @classmethod
    def user_not_found(cls, message: str = USER_MISSING_MESSAGE) -> "Failure":
        return cls(error=ErrorCode.USER_NOT_FOUND, message=message)

    @classmethod
    def invalid_code(cls) -> "Failure":
        return cls(error=ErrorCode.INVALID_CODE, message=GENERIC_TOKEN_MESSAGE)

    @classmethod
    def already_enabled(cls) -> "Failure":
        return cls(
            error=ErrorCode.ALREADY_ENABLED,
            message="Two-factor authentication is already enabled",
        )

    @classmethod
    def directory_unavailable(cls) -> "Failure":
        return cls(
            status="error",
            error=ErrorCode.DIRECTORY_UNAVAILABLE,
            message="User directory is unavailable, try again later",
            retryable=True,
        )


class EnrollmentStarted(BaseModel):
    """Secret and URI for a new enrollment. Shown to the user once."""
    status: Literal["success"] = "success"
    base32: str
    otpauth_url: str


class EnrollmentConfirmed(BaseModel):
    otp_verified: bool = True
    user: UserView


class CodeChecked(BaseModel):
    otp_valid: bool


class TwoFactorDisabled(BaseModel):
    otp_disabled: bool = True
    user: UserView


EnrollmentOutcome = Union[EnrollmentStarted, Failure]
ConfirmationOutcome = Union[EnrollmentConfirmed, Failure]
CheckOutcome = Union[CodeChecked, Failure]
DisableOutcome = Union[TwoFactorDisabled, Failure]
