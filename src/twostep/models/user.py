"""
User Models
"""

import base64
import binascii
import re
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator

BASE32_RE = re.compile(r"^[A-Z2-7]+$")


class UserRecord(BaseModel):
    """User fields relevant to two-factor authentication."""
    id: str
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    otp_secret: Optional[str] = None
    otp_auth_url: Optional[str] = None
    otp_enabled: bool = False
    otp_verified: bool = False

    @field_validator("otp_secret")
    @classmethod
    def secret_is_base32(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        if not BASE32_RE.match(value.upper()):
            raise ValueError("otp_secret must use the base32 alphabet A-Z2-7")
        try:
            base64.b32decode(value + "=" * (-len(value) % 8), casefold=True)
        except binascii.Error as e:
            raise ValueError(f"otp_secret is not decodable base32: {e}") from e
        return value

    @model_validator(mode="after")
    def enabled_requires_secret(self):
        if self.otp_enabled and not self.otp_secret:
            raise ValueError("otp_enabled requires a non-empty otp_secret")
        return self


class UserView(BaseModel):
    """User response (no secret)."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    otp_enabled: bool = False

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserView":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            otp_enabled=record.otp_enabled,
        )
