"""
TwoStep Errors
"""

from enum import Enum


class TwoStepError(Exception):
    """Base class for TwoStep errors."""


class InvalidParameters(TwoStepError, ValueError):
    """Malformed OTP configuration or secret."""


class DirectoryUnavailable(TwoStepError):
    """The user directory could not be reached."""


class ErrorCode(str, Enum):
    """Expected failure outcomes returned to callers."""
    USER_NOT_FOUND = "user_not_found"
    INVALID_CODE = "invalid_code"
    ALREADY_ENABLED = "already_enabled"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
