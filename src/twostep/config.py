"""
TwoStep Configuration
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from .auth.totp import OTPParameters


class Settings(BaseSettings):
    """Application settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # OTP
    otp_issuer: str = "TwoStep"
    otp_label: str = "TwoStep"
    otp_algorithm: str = "SHA1"
    otp_digits: int = 6
    otp_period: int = 30

    # Verification
    confirm_window: int = Field(default=1, ge=0)
    check_window: int = Field(default=1, ge=0)
    require_code_to_disable: bool = True

    # Rate limiting (verify/validate/disable)
    rate_limit_per_minute: int = 10
    rate_limit_per_hour: int = 100
    # Forwarding headers are only honored from these peers
    trusted_proxies: List[str] = []

    class Config:
        env_prefix = "TWOSTEP_"
        env_file = ".env"

    def otp_parameters(self) -> OTPParameters:
        return OTPParameters(
            algorithm=self.otp_algorithm,
            digits=self.otp_digits,
            period=self.otp_period,
            issuer=self.otp_issuer,
            label=self.otp_label,
        )


settings = Settings()
