"""
Time-based One-Time Passwords (RFC 6238)

Pure functions over a base32 secret and a point in time. Code generation
is delegated to pyotp's HOTP implementation; this module owns the time
step arithmetic, the validation window and the enrollment URI format.
"""

import binascii
import hashlib
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union
from urllib.parse import quote, urlencode

import pyotp
from pyotp.utils import strings_equal

from ..errors import InvalidParameters

Timestamp = Union[int, float, datetime]

DIGESTS = {
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}

MIN_DIGITS = 6
MAX_DIGITS = 8


def _check_digits(digits: int) -> None:
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidParameters(
            f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}"
        )


def _check_period(period: int) -> None:
    if period <= 0:
        raise InvalidParameters(f"period must be positive, got {period}")


def _digest(algorithm: str):
    try:
        return DIGESTS[algorithm.upper()]
    except KeyError:
        raise InvalidParameters(
            f"unsupported algorithm {algorithm!r}, use one of {sorted(DIGESTS)}"
        ) from None


@dataclass(frozen=True)
class OTPParameters:
    """TOTP configuration shared by enrollment and verification."""
    algorithm: str = "SHA1"
    digits: int = 6
    period: int = 30
    issuer: str = "TwoStep"
    label: str = "TwoStep"

    def __post_init__(self):
        _digest(self.algorithm)
        _check_digits(self.digits)
        _check_period(self.period)
        object.__setattr__(self, "algorithm", self.algorithm.upper())


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a windowed validation."""
    matched: bool
    offset: Optional[int] = None

    def __bool__(self) -> bool:
        return self.matched


def _unix_seconds(timestamp: Timestamp) -> float:
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp.timestamp()
    return float(timestamp)


def counter_at(timestamp: Timestamp, period: int = 30) -> int:
    """Time step counter for a Unix timestamp or datetime."""
    _check_period(period)
    return math.floor(_unix_seconds(timestamp) / period)


def compute_code(
    secret: str,
    counter: int,
    digits: int = 6,
    algorithm: str = "SHA1",
) -> str:
    """Compute the HOTP code for a counter, zero-padded to `digits`."""
    if not secret:
        raise InvalidParameters("secret must not be empty")
    _check_digits(digits)
    if counter < 0:
        raise InvalidParameters(f"counter must not be negative, got {counter}")

    hotp = pyotp.HOTP(secret, digits=digits, digest=_digest(algorithm))
    try:
        return hotp.at(counter)
    except binascii.Error as e:
        raise InvalidParameters(f"secret is not valid base32: {e}") from e


def validate(
    secret: str,
    candidate: str,
    now: Timestamp,
    window: int = 0,
    params: OTPParameters = OTPParameters(),
) -> ValidationResult:
    """
    Check a candidate code against the counters around `now`.

    Offsets are tried from -window to +window and the first match wins.
    Every comparison is constant time.
    """
    if window < 0:
        raise InvalidParameters(f"window must not be negative, got {window}")
    if not secret:
        raise InvalidParameters("secret must not be empty")

    current = counter_at(now, params.period)
    if not isinstance(candidate, str):
        return ValidationResult(matched=False)

    for offset in range(-window, window + 1):
        counter = current + offset
        if counter < 0:
            continue
        expected = compute_code(secret, counter, params.digits, params.algorithm)
        if strings_equal(expected, candidate):
            return ValidationResult(matched=True, offset=offset)

    return ValidationResult(matched=False)


def build_enrollment_uri(secret: str, params: OTPParameters = OTPParameters()) -> str:
    """
    Build the otpauth:// key URI read by authenticator apps.

    otpauth://totp/Issuer:label?secret=..&issuer=..&algorithm=SHA1&digits=6&period=30
    """
    if not secret:
        raise InvalidParameters("secret must not be empty")

    label = quote(params.issuer, safe="") + ":" + quote(params.label, safe="")
    query = urlencode({
        "secret": secret,
        "issuer": params.issuer,
        "algorithm": params.algorithm,
        "digits": params.digits,
        "period": params.period,
    }).replace("+", "%20")

    return f"otpauth://totp/{label}?{query}"
