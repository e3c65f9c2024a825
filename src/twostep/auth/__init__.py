"""OTP primitives package."""

from .secret import generate_secret
from .totp import (
    OTPParameters,
    ValidationResult,
    build_enrollment_uri,
    compute_code,
    counter_at,
    validate,
)

__all__ = [
    "generate_secret",
    "OTPParameters",
    "ValidationResult",
    "build_enrollment_uri",
    "compute_code",
    "counter_at",
    "validate",
]
