"""
Two-Factor Enrollment

Issues a fresh secret and otpauth URI for a user and stores it as
pending. The secret only becomes active after confirmation.
"""

import logging
from typing import Callable, Optional

from ..auth.secret import generate_secret
from ..auth.totp import OTPParameters, build_enrollment_uri
from ..db.repository import UserDirectory
from ..errors import DirectoryUnavailable
from ..middleware.audit import AuditEventType, AuditLogger
from ..models.results import EnrollmentOutcome, EnrollmentStarted, Failure

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Starts TOTP enrollment for users in a directory."""

    def __init__(
        self,
        directory: UserDirectory,
        params: OTPParameters = OTPParameters(),
        audit: Optional[AuditLogger] = None,
        secret_factory: Callable[[], str] = generate_secret,
    ):
        self.directory = directory
        self.params = params
        self.audit = audit or AuditLogger()
        self.secret_factory = secret_factory

    async def begin_enrollment(self, user_id: str) -> EnrollmentOutcome:
        """
        Generate and store a pending secret for the user.

        Calling this again before confirmation replaces the pending secret.
        The returned secret is sensitive and should be discarded by the
        caller once displayed.
        """
        try:
            user = await self.directory.get(user_id)
            if user is None:
                logger.info("Enrollment requested for unknown user %s", user_id)
                return Failure.user_not_found()

            if user.otp_enabled:
                logger.info("Enrollment refused, 2FA already enabled for %s", user_id)
                self.audit.record(
                    AuditEventType.MFA_SETUP, user_id, success=False,
                    details={"reason": "already_enabled"},
                )
                return Failure.already_enabled()

            secret = self.secret_factory()
            otpauth_url = build_enrollment_uri(secret, self.params)

            stored = await self.directory.update(user_id, {
                "otp_secret": secret,
                "otp_auth_url": otpauth_url,
                "otp_verified": False,
            })
        except DirectoryUnavailable:
            logger.exception("Directory unavailable during enrollment for %s", user_id)
            return Failure.directory_unavailable()

        if not stored:
            logger.info("User %s vanished during enrollment", user_id)
            return Failure.user_not_found()

        self.audit.record(AuditEventType.MFA_SETUP, user_id, success=True)
        return EnrollmentStarted(base32=secret, otpauth_url=otpauth_url)
