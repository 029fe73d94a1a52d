"""
Domain exceptions - Semantic error types for identity verification.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each one to a single HTTP status.
"""


class IdentityError(Exception):
    """Base class for identity domain errors."""

    pass


class ValidationError(IdentityError):
    """Required input missing or empty."""

    pass


class Conflict(IdentityError):
    """National id, email, or phone number already belongs to an identity."""

    pass


class NotFound(IdentityError):
    """No identity with the requested id."""

    pass


class Unauthorized(IdentityError):
    """Bad credentials, unverified identity, or invalid session token."""

    pass


class InvalidOrExpiredCode(IdentityError):
    """Unknown identity, wrong code, consumed code, or expired code."""

    pass


class TooManyRequests(IdentityError):
    """Rate guard refused the call."""

    pass


class SecretTooLong(ValidationError):
    """Secret exceeds bcrypt's 72-byte input limit."""

    pass
