"""Models package."""

from .user import UserRecord, UserView
from .results import (
    GENERIC_TOKEN_MESSAGE,
    CheckOutcome,
    CodeChecked,
    ConfirmationOutcome,
    DisableOutcome,
    EnrollmentConfirmed,
    EnrollmentOutcome,
    EnrollmentStarted,
    Failure,
    TwoFactorDisabled,
)

__all__ = [
    "UserRecord",
    "UserView",
    "GENERIC_TOKEN_MESSAGE",
    "CheckOutcome",
    "CodeChecked",
    "ConfirmationOutcome",
    "DisableOutcome",
    "EnrollmentConfirmed",
    "EnrollmentOutcome",
    "EnrollmentStarted",
    "Failure",
    "TwoFactorDisabled",
]
