"""
Verification domain service - identity verification state machine.

This module contains the core business logic for registering identities,
verifying them with one-time codes, and issuing session tokens.

Verification State Machine
==========================

States (derived from stored columns, see VerificationState):
- UNVERIFIED: Identity stored, no secret, no code
- PENDING_VERIFICATION: Code issued, secret not yet set
- VERIFIED: Secret set, no active code
- LOGIN_PENDING_VERIFICATION: Secret set, login code issued

Transitions:
    register              -> PENDING_VERIFICATION
    verify_registration   PENDING_VERIFICATION -> VERIFIED
    login                 VERIFIED -> LOGIN_PENDING_VERIFICATION
    verify_login          LOGIN_PENDING_VERIFICATION -> VERIFIED (+ session token)

Both verify steps use one combined predicate: "identity exists AND code
matches AND code not expired". A wrong id and a wrong or stale code are
indistinguishable to the caller. Codes are consumed with a compare-and-set
on the stored value, so of two concurrent verifications with the same code
exactly one succeeds.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt

from . import codes
from .exceptions import (
    Conflict,
    InvalidOrExpiredCode,
    SecretTooLong,
    Unauthorized,
    ValidationError,
)
from .ports import CodeSender, Identity, IdentityRepository, NewIdentity, Role, TokenIssuer

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of input
MAX_SECRET_BYTES = 72

# Same message for unknown, unverified and wrong-secret logins
INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache
def dummy_hash(cost: int) -> str:
    """
    Hash of a throwaway password at `cost`.

    Compared against when the identity is unknown, so login takes the same
    bcrypt time whether or not the id exists. Must match the cost used for
    real secrets.
    """
    return bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(cost)).decode()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass(frozen=True)
class RegistrationResult:
    identity_id: str
    code_delivered: bool


@dataclass(frozen=True)
class LoginChallenge:
    code_delivered: bool


@dataclass(frozen=True)
class Session:
    token: str
    user: dict[str, str]


@dataclass
class VerificationService:
    """
    Domain service for registration and login ceremonies.

    Orchestrates input checks, code generation and delivery, secret hashing,
    and session issuance. All state lives in the repository.
    """

    repository: IdentityRepository
    code_sender: CodeSender
    token_issuer: TokenIssuer
    bcrypt_cost: int = 10
    code_ttl: timedelta = codes.CODE_TTL
    clock: Callable[[], datetime] = field(default=_utcnow)

    def register(self, identity: NewIdentity) -> RegistrationResult:
        """
        Register a new identity and send its first verification code.

        Args:
            identity: Identity claim; every field is required

        Returns:
            RegistrationResult with the new id and whether delivery succeeded

        Raises:
            ValidationError: If any field is missing or blank
            Conflict: If national id, email or phone number is already registered
        """
        self._require(
            full_name=identity.full_name,
            aadhaar_number=identity.aadhaar_number,
            phone_number=identity.phone_number,
            email=identity.email,
            address=identity.address,
        )
        identity = replace(identity, email=normalize_email(identity.email))

        identity_id = str(uuid.uuid4())
        code = codes.generate_code()
        expires_at = codes.expiry_from(self.clock(), self.code_ttl)

        created = self.repository.create(identity_id, identity, code, expires_at)
        if not created:
            raise Conflict(identity_id)

        logger.info("Registered identity %s, verification pending", identity_id)
        delivered = self._dispatch(identity_id, identity.phone_number, code)
        return RegistrationResult(identity_id=identity_id, code_delivered=delivered)

    def verify_registration(self, identity_id: str, code: str, secret: str) -> None:
        """
        Check the registration code and set the identity's secret.

        No session token is issued here; login is a separate ceremony.

        Raises:
            ValidationError: If any argument is missing or blank
            InvalidOrExpiredCode: Unknown id, wrong code, expired or already used code
        """
        self._require(user_id=identity_id, otp=code, password=secret)
        if len(secret.encode()) > MAX_SECRET_BYTES:
            raise SecretTooLong("password")

        identity = self._find_with_valid_code(identity_id, code, verified=False)
        secret_hash = self._hash_secret(secret)

        # The code may have been consumed by a concurrent request while hashing
        if not self.repository.set_secret_and_verify(identity.id, code, secret_hash, self.clock()):
            logger.warning("Registration code for %s consumed concurrently", identity_id)
            raise InvalidOrExpiredCode(identity_id)

        logger.info("Identity %s verified", identity_id)

    def login(self, identity_id: str, secret: str) -> LoginChallenge:
        """
        First login phase: check the secret and send a login code.

        Raises:
            ValidationError: If any argument is missing or blank
            Unauthorized: Unknown, unverified, or wrong secret (same error for all)
        """
        self._require(user_id=identity_id, password=secret)

        identity = self._authenticate(identity_id, secret)

        code = codes.generate_code()
        expires_at = codes.expiry_from(self.clock(), self.code_ttl)
        if not self.repository.set_code(identity.id, code, expires_at):
            raise Unauthorized(INVALID_CREDENTIALS)

        delivered = self._dispatch(identity.id, identity.phone_number, code)
        return LoginChallenge(code_delivered=delivered)

    def verify_login(self, identity_id: str, code: str) -> Session:
        """
        Second login phase: consume the login code and issue a session token.

        Raises:
            ValidationError: If any argument is missing or blank
            InvalidOrExpiredCode: Unknown id, wrong code, expired or already used code
        """
        self._require(user_id=identity_id, otp=code)

        self._find_with_valid_code(identity_id, code, verified=True)

        identity = self.repository.clear_code(identity_id, code, self.clock())
        if identity is None:
            logger.warning("Login code for %s consumed concurrently", identity_id)
            raise InvalidOrExpiredCode(identity_id)

        token = self.token_issuer.issue(identity.id, identity.role)
        logger.info("Session issued for %s (%s)", identity.id, identity.role.value)
        return Session(token=token, user=identity.public_profile())

    def officer_login(self, identity_id: str, secret: str) -> Session:
        """
        Single-step officer login: secret check, then session token.

        Raises:
            ValidationError: If any argument is missing or blank
            Unauthorized: Not a verified officer, or wrong secret (same error for all)
        """
        self._require(user_id=identity_id, password=secret)

        identity = self._authenticate(identity_id, secret, role=Role.OFFICER)

        token = self.token_issuer.issue(identity.id, identity.role)
        logger.info("Officer session issued for %s", identity.id)
        return Session(token=token, user=identity.officer_profile())

    def _find_with_valid_code(self, identity_id: str, code: str, verified: bool) -> Identity:
        """
        Combined lookup: id exists, in the expected phase, and the code is valid.

        Registration codes only verify unverified identities and login codes
        only verified ones, so neither ceremony can stand in for the other.
        """
        identity = self.repository.find_by_id(identity_id)
        if (
            identity is None
            or identity.is_verified != verified
            or not codes.is_valid(identity.otp, identity.otp_expires_at, code, self.clock())
        ):
            logger.warning("Invalid or expired code presented for %s", identity_id)
            raise InvalidOrExpiredCode(identity_id)
        return identity

    def _authenticate(self, identity_id: str, secret: str, role: Role | None = None) -> Identity:
        """
        Look up a verified identity and check its secret.

        bcrypt always runs, against a dummy hash when the identity is
        unknown, so response time does not reveal whether the id exists.
        """
        identity = self.repository.find_verified_by_id(identity_id, role=role)
        stored_hash = identity.password_hash if identity is not None else None
        secret_valid = self._verify_secret(secret, stored_hash or dummy_hash(self.bcrypt_cost))

        if identity is None or stored_hash is None or not secret_valid:
            logger.warning("Failed login for %s", identity_id)
            raise Unauthorized(INVALID_CREDENTIALS)
        return identity

    def _dispatch(self, identity_id: str, destination: str, code: str) -> bool:
        """Best-effort delivery; a failure never undoes the stored code."""
        try:
            delivered = self.code_sender.send_code(destination, code)
        except Exception:
            logger.exception("Code delivery raised for %s", identity_id)
            return False
        if not delivered:
            logger.warning("Code delivery failed for %s", identity_id)
        return delivered

    def _hash_secret(self, secret: str) -> str:
        """Hash secret using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(secret.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()

    @staticmethod
    def _verify_secret(secret: str, secret_hash: str) -> bool:
        try:
            return bcrypt.checkpw(secret.encode(), secret_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False

    @staticmethod
    def _require(**fields: str | None) -> None:
        missing = [name for name, value in fields.items() if not value or not str(value).strip()]
        if missing:
            raise ValidationError(", ".join(missing))
