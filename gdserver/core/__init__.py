"""Player identity, session tokens and the token-gated object store."""

from .errors import SessionError, AuthError, OfflineError, DuplicateUsernameError
from .objects import GameObject
from .credentials import hash_password, verify_password
from .tokens import Session, SessionClaims, TokenSigner, new_session_id
from .player import Player

__all__ = [
    "SessionError",
    "AuthError",
    "OfflineError",
    "DuplicateUsernameError",
    "GameObject",
    "hash_password",
    "verify_password",
    "Session",
    "SessionClaims",
    "TokenSigner",
    "new_session_id",
    "Player",
]
