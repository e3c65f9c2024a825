"""
Shared Secret Generation
"""

import base64
import secrets

SECRET_BYTES = 15
SECRET_LENGTH = 24


def generate_secret() -> str:
    """Generate a new base32 TOTP secret (24 chars, no padding)."""
    raw = secrets.token_bytes(SECRET_BYTES)
    return base64.b32encode(raw).decode("ascii").rstrip("=")[:SECRET_LENGTH]
