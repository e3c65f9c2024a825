"""
Two-Factor Verification

Confirms pending enrollments, checks codes for enrolled users and turns
two-factor authentication off. Unknown users and wrong codes share one
message on the verification paths; the logs keep them apart.
"""

import logging
import time
from typing import Callable, Optional

from ..auth.totp import OTPParameters, validate
from ..db.repository import UserDirectory
from ..errors import DirectoryUnavailable
from ..middleware.audit import AuditEventType, AuditLogger
from ..models.results import (
    GENERIC_TOKEN_MESSAGE,
    CheckOutcome,
    CodeChecked,
    ConfirmationOutcome,
    DisableOutcome,
    EnrollmentConfirmed,
    Failure,
    TwoFactorDisabled,
)
from ..models.user import UserRecord, UserView

logger = logging.getLogger(__name__)


class VerificationService:
    """Validates submitted codes against stored secrets."""

    def __init__(
        self,
        directory: UserDirectory,
        params: OTPParameters = OTPParameters(),
        confirm_window: int = 1,
        check_window: int = 1,
        require_code_to_disable: bool = True,
        audit: Optional[AuditLogger] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.directory = directory
        self.params = params
        self.confirm_window = confirm_window
        self.check_window = check_window
        self.require_code_to_disable = require_code_to_disable
        self.audit = audit or AuditLogger()
        self.clock = clock

    def _matches(self, user: UserRecord, code: str, window: int) -> bool:
        if not user.otp_secret:
            return False
        result = validate(user.otp_secret, code, self.clock(), window, self.params)
        if result.matched and result.offset:
            logger.debug("Code for %s matched at offset %d", user.id, result.offset)
        return result.matched

    async def confirm_enrollment(self, user_id: str, code: str) -> ConfirmationOutcome:
        """Confirm a pending secret and enable two-factor authentication."""
        try:
            user = await self.directory.get(user_id)
            if user is None:
                logger.info("Confirmation for unknown user %s", user_id)
                return Failure.user_not_found(GENERIC_TOKEN_MESSAGE)

            if not self._matches(user, code, self.confirm_window):
                logger.info("Confirmation code rejected for %s", user_id)
                self.audit.record(AuditEventType.MFA_VERIFY, user_id, success=False)
                return Failure.invalid_code()

            stored = await self.directory.update(user_id, {
                "otp_enabled": True,
                "otp_verified": True,
            })
        except DirectoryUnavailable:
            logger.exception("Directory unavailable during confirmation for %s", user_id)
            return Failure.directory_unavailable()

        if not stored:
            return Failure.user_not_found(GENERIC_TOKEN_MESSAGE)

        self.audit.record(AuditEventType.MFA_VERIFY, user_id, success=True)
        user = user.model_copy(update={"otp_enabled": True, "otp_verified": True})
        return EnrollmentConfirmed(user=UserView.from_record(user))

    async def check_code(self, user_id: str, code: str) -> CheckOutcome:
        """Check a code for an enrolled user. Never changes stored state."""
        try:
            user = await self.directory.get(user_id)
        except DirectoryUnavailable:
            logger.exception("Directory unavailable during code check for %s", user_id)
            return Failure.directory_unavailable()

        if user is None:
            logger.info("Code check for unknown user %s", user_id)
            return Failure.user_not_found(GENERIC_TOKEN_MESSAGE)

        valid = user.otp_enabled and self._matches(user, code, self.check_window)
        self.audit.record(AuditEventType.MFA_VALIDATE, user_id, success=valid)
        return CodeChecked(otp_valid=valid)

    async def disable(self, user_id: str, code: Optional[str] = None) -> DisableOutcome:
        """
        Turn off two-factor authentication and erase the stored secret.

        When require_code_to_disable is set, an enabled user must present
        a current code first. Re-enabling needs a full new enrollment.
        """
        try:
            user = await self.directory.get(user_id)
            if user is None:
                logger.info("Disable requested for unknown user %s", user_id)
                return Failure.user_not_found()

            if self.require_code_to_disable and user.otp_enabled:
                if code is None or not self._matches(user, code, self.check_window):
                    logger.info("Disable refused for %s, code missing or wrong", user_id)
                    self.audit.record(AuditEventType.MFA_DISABLE, user_id, success=False)
                    return Failure.invalid_code()

            cleared = {
                "otp_enabled": False,
                "otp_verified": False,
                "otp_secret": None,
                "otp_auth_url": None,
            }
            stored = await self.directory.update(user_id, cleared)
        except DirectoryUnavailable:
            logger.exception("Directory unavailable during disable for %s", user_id)
            return Failure.directory_unavailable()

        if not stored:
            return Failure.user_not_found()

        self.audit.record(AuditEventType.MFA_DISABLE, user_id, success=True)
        return TwoFactorDisabled(user=UserView.from_record(user.model_copy(update=cleared)))
