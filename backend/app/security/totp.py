# backend/app/security/totp.py
"""
TOTP (Time-based One-Time Password) implementation
RFC 6238 compliant - Compatible with Google Authenticator, Authy, Aegis

Key points:
- 6-digit codes
- 30-second time step
- HMAC-SHA1 (standard)
- Base32 secret encoding

Everything here is a pure function of (secret, time).
"""
import binascii
import re
from datetime import datetime, timezone
from typing import NamedTuple, Union

import pyotp
from pyotp.utils import strings_equal

from backend.app.core.errors import InvalidSecretError

DIGITS = 6
STEP_SECONDS = 30

_BASE32_RE = re.compile(r"^[A-Z2-7]+=*$")

Instant = Union[datetime, int, float]


class OTPCode(NamedTuple):
    code: str
    remaining_seconds: int


def normalize_secret(secret: str) -> str:
    """
    Canonical form of a user-supplied base32 secret.

    Authenticator apps show secrets in lower case and in groups of four
    ("jbsw y3dp ehpk 3pxp"); both are accepted.

    Raises:
        InvalidSecretError: secret is empty or not decodable base32
    """
    if not isinstance(secret, str):
        raise InvalidSecretError()

    cleaned = "".join(secret.split()).upper()
    if not cleaned or not _BASE32_RE.match(cleaned):
        raise InvalidSecretError()

    try:
        pyotp.TOTP(cleaned).byte_secret()
    except (binascii.Error, ValueError) as exc:
        raise InvalidSecretError() from exc
    return cleaned


def to_unix_time(at: Instant) -> int:
    """Whole POSIX seconds for `at`; naive datetimes are treated as UTC."""
    if isinstance(at, datetime):
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        return int(at.timestamp())
    return int(at)


def remaining_seconds(at: Instant) -> int:
    """Seconds until the current step ends, in [1, STEP_SECONDS]."""
    return STEP_SECONDS - (to_unix_time(at) % STEP_SECONDS)


def _totp(secret: str) -> pyotp.TOTP:
    return pyotp.TOTP(normalize_secret(secret), digits=DIGITS, interval=STEP_SECONDS)


def generate(secret: str, at: Instant) -> OTPCode:
    """
    Derive the code valid at `at` and how long it stays valid.

    Two calls inside the same 30-second step return the same code.
    """
    totp = _totp(secret)
    unix_time = to_unix_time(at)
    counter = unix_time // STEP_SECONDS
    return OTPCode(
        code=totp.generate_otp(counter),
        remaining_seconds=STEP_SECONDS - (unix_time % STEP_SECONDS),
    )


def verify(secret: str, candidate: str, at: Instant, window: int = 1) -> bool:
    """
    Check a code against the current step and `window` steps on each side.

    The current step is tried first, then -1, +1, -2, +2 ... and the
    first match wins. Candidates that are not DIGITS digits are rejected
    before any HMAC is computed.
    """
    if not candidate:
        return False

    candidate = candidate.strip().replace(" ", "")
    if len(candidate) != DIGITS or not candidate.isdigit():
        return False

    totp = _totp(secret)
    counter = to_unix_time(at) // STEP_SECONDS

    offsets = [0]
    for distance in range(1, window + 1):
        offsets.extend((-distance, distance))

    for offset in offsets:
        if counter + offset < 0:
            continue
        if strings_equal(candidate, totp.generate_otp(counter + offset)):
            return True
    return False
