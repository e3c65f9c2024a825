"""
TwoStep - Main FastAPI Application
HTTP surface for TOTP enrollment and verification
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from pydantic import BaseModel

from .config import Settings, settings as default_settings
from .db.repository import InMemoryUserDirectory, UserDirectory
from .errors import ErrorCode
from .logging_config import setup_logging
from .middleware.audit import AuditLogger
from .middleware.rate_limit import RateLimiter, enforce_rate_limit
from .models.results import (
    CodeChecked,
    EnrollmentConfirmed,
    EnrollmentStarted,
    Failure,
    TwoFactorDisabled,
)
from .services import EnrollmentService, VerificationService

logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    user_id: str


class TokenRequest(BaseModel):
    user_id: str
    token: str


class DisableRequest(BaseModel):
    user_id: str
    token: Optional[str] = None


def _raise_failure(failure: Failure, not_found_status: int = status.HTTP_404_NOT_FOUND):
    """Translate a service Failure into an HTTP error."""
    status_codes = {
        ErrorCode.USER_NOT_FOUND: not_found_status,
        ErrorCode.INVALID_CODE: status.HTTP_401_UNAUTHORIZED,
        ErrorCode.ALREADY_ENABLED: status.HTTP_400_BAD_REQUEST,
        ErrorCode.DIRECTORY_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    }
    headers = {"Retry-After": "5"} if failure.retryable else None
    raise HTTPException(
        status_code=status_codes[failure.error],
        detail=failure.message,
        headers=headers,
    )


def get_enrollment(request: Request) -> EnrollmentService:
    return request.app.state.enrollment


def get_verification(request: Request) -> VerificationService:
    return request.app.state.verification


def create_app(
    directory: Optional[UserDirectory] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application around an explicit user directory."""
    settings = settings or default_settings
    directory = directory if directory is not None else InMemoryUserDirectory()
    params = settings.otp_parameters()
    audit = AuditLogger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle management."""
        setup_logging(settings.log_level)
        logger.info("TwoStep starting (issuer=%s)", params.issuer)
        yield
        logger.info("TwoStep shutting down")

    app = FastAPI(
        title="TwoStep",
        description="TOTP two-factor authentication service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.directory = directory
    app.state.audit = audit
    app.state.rate_limiter = RateLimiter(
        requests_per_minute=settings.rate_limit_per_minute,
        requests_per_hour=settings.rate_limit_per_hour,
        trusted_proxies=settings.trusted_proxies,
    )
    app.state.enrollment = EnrollmentService(directory, params, audit=audit)
    app.state.verification = VerificationService(
        directory,
        params,
        confirm_window=settings.confirm_window,
        check_window=settings.check_window,
        require_code_to_disable=settings.require_code_to_disable,
        audit=audit,
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "twostep"}

    @app.post("/auth/otp/generate", response_model=EnrollmentStarted)
    async def generate_otp(
        body: GenerateRequest,
        enrollment: EnrollmentService = Depends(get_enrollment),
    ):
        """Issue a new pending secret and otpauth URI."""
        result = await enrollment.begin_enrollment(body.user_id)
        if isinstance(result, Failure):
            _raise_failure(result)
        return result

    @app.post("/auth/otp/verify", response_model=EnrollmentConfirmed)
    async def verify_otp(
        request: Request,
        body: TokenRequest,
        verification: VerificationService = Depends(get_verification),
    ):
        """Confirm enrollment with a code and enable 2FA."""
        enforce_rate_limit(request, body.user_id)
        result = await verification.confirm_enrollment(body.user_id, body.token)
        if isinstance(result, Failure):
            _raise_failure(result, not_found_status=status.HTTP_401_UNAUTHORIZED)
        return result

    @app.post("/auth/otp/validate", response_model=CodeChecked)
    async def validate_otp(
        request: Request,
        body: TokenRequest,
        verification: VerificationService = Depends(get_verification),
    ):
        """Check a code for an enrolled user."""
        enforce_rate_limit(request, body.user_id)
        result = await verification.check_code(body.user_id, body.token)
        if isinstance(result, Failure):
            _raise_failure(result, not_found_status=status.HTTP_401_UNAUTHORIZED)
        if not result.otp_valid:
            _raise_failure(Failure.invalid_code())
        return result

    @app.post("/auth/otp/disable", response_model=TwoFactorDisabled)
    async def disable_otp(
        request: Request,
        body: DisableRequest,
        verification: VerificationService = Depends(get_verification),
    ):
        """Turn off 2FA for a user."""
        enforce_rate_limit(request, body.user_id)
        result = await verification.disable(body.user_id, body.token)
        if isinstance(result, Failure):
            _raise_failure(result)
        return result

    return app


def cli():
    """CLI entry point."""
    import uvicorn
    uvicorn.run(
        "twostep.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )


if __name__ == "__main__":
    cli()
