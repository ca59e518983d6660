"""Session token issuing and decoding.

Tokens are HS256 JWTs carrying the username, the password hash at login time,
and a per-login session id. They carry no expiry: a token lives exactly as
long as the matching entry in the player's session table.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

import jwt

from .errors import AuthError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"


def new_session_id() -> str:
    """Generate a random session identifier for one login."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SessionClaims:
    """Claims embedded in a session token."""

    username: str
    password_hash: str
    session_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "password": self.password_hash,
            "session_id": self.session_id,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'SessionClaims':
        """Build claims from a decoded token payload."""
        values = {}
        for attr, key in (("username", "username"),
                          ("password_hash", "password"),
                          ("session_id", "session_id")):
            value = payload.get(key)
            if not isinstance(value, str):
                raise AuthError(f"Token claim '{key}' missing or invalid")
            values[attr] = value
        return cls(**values)


@dataclass
class Session:
    """One live login of a player."""

    session_id: str
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class TokenSigner:
    """Signs and verifies session tokens with a shared secret."""

    def __init__(self, secret: str, algorithm: str = DEFAULT_ALGORITHM):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm

    def sign(self, claims: SessionClaims) -> str:
        """Mint a token for the given claims."""
        return jwt.encode(claims.to_payload(), self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> SessionClaims:
        """
        Verify a token's signature and return its claims.

        Raises:
            AuthError: token is not a string, is malformed, has a bad
                signature, or lacks required claims.
        """
        if not isinstance(token, str) or not token:
            raise AuthError("Token missing")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            logger.debug("Token decode failed: %s", type(e).__name__)
            raise AuthError("Token signature or format invalid") from e
        return SessionClaims.from_payload(payload)
