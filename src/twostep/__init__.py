"""
TwoStep - TOTP Two-Factor Authentication

Features:
- Base32 shared secret generation
- RFC 6238 TOTP codes with windowed validation
- otpauth:// enrollment URIs for authenticator apps
- Enrollment, confirmation, code checks and disable flows
- Pluggable user directory
"""

__version__ = "0.1.0"
