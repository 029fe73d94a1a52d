"""
One-time code issuer.

Codes are 6-digit strings bound to one identity and valid for 10 minutes.
Expiry is enforced when a code is checked; nothing deletes stale codes.
"""

import secrets
from datetime import datetime, timedelta

CODE_LENGTH = 6
CODE_TTL = timedelta(minutes=10)


def generate_code() -> str:
    """
    Generate a uniformly random 6-digit code.

    Uses secrets module for cryptographic randomness.
    Returns string to preserve leading zeros.
    """
    return "".join(secrets.choice("0123456789") for _ in range(CODE_LENGTH))


def expiry_from(now: datetime, ttl: timedelta = CODE_TTL) -> datetime:
    return now + ttl


def is_valid(
    stored_code: str | None,
    stored_expiry: datetime | None,
    candidate: str,
    now: datetime,
) -> bool:
    """
    Check a candidate code against the stored one.

    Exact string match (no whitespace normalization) compared in constant
    time, and strictly before expiry. Never raises: a missing code, a
    missing expiry, or a non-string candidate are all just False.
    """
    if stored_code is None or stored_expiry is None or not isinstance(candidate, str):
        return False
    matches = secrets.compare_digest(stored_code.encode(), candidate.encode())
    return matches and now < stored_expiry
