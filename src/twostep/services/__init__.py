"""Two-factor services package."""

from .enrollment import EnrollmentService
from .verification import VerificationService

__all__ = ["EnrollmentService", "VerificationService"]
