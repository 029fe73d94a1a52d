"""
JWT session token adapter - Implements TokenIssuer protocol.

Tokens are HS256-signed JWTs carrying the identity id (`sub`), its role,
and issued-at / expiry timestamps. Signature and expiry are checked by
python-jose on every verify.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from src.domain.exceptions import Unauthorized
from src.domain.ports import Role, TokenClaims

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via python-jose.

    The signing key is fixed for the lifetime of the instance, which the
    application creates once at startup.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("JWT signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, identity_id: str, role: Role) -> str:
        issued_at = self._clock()
        claims = {
            "sub": identity_id,
            "role": role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a session token.

        Raises:
            Unauthorized: Bad signature, expired, malformed, or missing claims
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return TokenClaims(
                subject=payload["sub"],
                role=Role(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (JWTError, KeyError, ValueError, TypeError) as e:
            logger.info("Rejected session token: %s", type(e).__name__)
            raise Unauthorized("invalid token") from None
