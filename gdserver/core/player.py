"""Player identity, sessions and token-gated object store."""

import logging
import threading
import uuid
from typing import Any, Dict, List, Optional

from .credentials import hash_password, verify_password
from .errors import AuthError, OfflineError
from .objects import GameObject
from .tokens import Session, SessionClaims, TokenSigner, new_session_id

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("username", "uuid", "password", "moderator")


class Player:
    """
    A player account and, while online, its scene objects.

    A player goes online on the first successful `login` and offline when the
    last session is logged out (or on `logout_force`). Object data only exists
    while online; going offline clears it.

    Every mutation of the object list requires a token issued by `login` that
    is still present in the session table. Reads require the player to be
    online and raise `OfflineError` otherwise.
    """

    def __init__(self, username: str, password: Optional[str], moderator: bool = False,
                 signer: Optional[TokenSigner] = None):
        self.username = username
        self.uuid = str(uuid.uuid1())
        self.moderator = moderator
        self.online = False
        self.objects: List[GameObject] = []
        # token -> Session
        self.sessions: Dict[str, Session] = {}
        if password is not None and not isinstance(password, str):
            raise TypeError(f"Password must be a string, got {type(password).__name__}")
        # None leaves the account without a usable password (records load it later)
        self._password_hash = hash_password(password) if password is not None else ""
        self._signer = signer
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (f"Player(username={self.username!r}, uuid={self.uuid!r}, "
                f"online={self.online}, sessions={len(self.sessions)})")

    @property
    def signer(self) -> TokenSigner:
        if self._signer is None:
            from gdserver.config_loader import config
            self._signer = config.token_signer()
        return self._signer

    # ------------------------------------------------------------------
    # Credentials and sessions
    # ------------------------------------------------------------------

    def verify_password(self, password: str) -> bool:
        """Check a plaintext password against the stored hash."""
        return verify_password(password, self._password_hash)

    def login(self, password: str) -> Optional[str]:
        """
        Open a new session.

        Returns:
            The session token, or None if the password is wrong. A failed
            login changes nothing.
        """
        with self._lock:
            if not self.verify_password(password):
                logger.warning("Authentication failed for %s", self.username)
                return None

            session_id = new_session_id()
            claims = SessionClaims(
                username=self.username,
                password_hash=self._password_hash,
                session_id=session_id,
            )
            token = self.signer.sign(claims)
            self.sessions[token] = Session(session_id=session_id)
            self.online = True
            logger.info("%s logged in (%d active sessions)", self.username, len(self.sessions))
            return token

    def verify_token(self, token: str) -> bool:
        """
        Check that a token was issued to this player and is still live.

        The token must be in the session table, carry a valid signature, and
        its claims must match the current username, current password hash and
        the session id recorded for it.
        """
        with self._lock:
            if not isinstance(token, str):
                return False
            session = self.sessions.get(token)
            if session is None:
                return False
            try:
                claims = self.signer.decode(token)
            except AuthError:
                return False
            expected = SessionClaims(
                username=self.username,
                password_hash=self._password_hash,
                session_id=session.session_id,
            )
            return claims == expected

    def logout(self, token: str) -> bool:
        """Close one session. The player goes offline when none remain."""
        with self._lock:
            if not self.verify_token(token):
                return False
            del self.sessions[token]
            self._prune_dead_sessions()
            if not self.sessions:
                self._go_offline()
            logger.info("%s logged out (%d active sessions)", self.username, len(self.sessions))
            return True

    def logout_force(self) -> bool:
        """Drop every session and go offline. Always succeeds."""
        with self._lock:
            self.sessions.clear()
            self._go_offline()
            logger.info("%s was forcibly logged out", self.username)
            return True

    def _prune_dead_sessions(self) -> None:
        # Entries left behind by a password change can never verify again
        for token in [t for t in self.sessions if not self.verify_token(t)]:
            del self.sessions[token]

    def _go_offline(self) -> None:
        self.online = False
        self.objects = []

    def modify_password(self, token: Optional[str] = None, old_password: Optional[str] = None,
                        new_password: Optional[str] = None) -> bool:
        """
        Change the password given either a valid token or the current password.

        Existing sessions are left in place; their tokens embed the old hash
        and stop verifying once the hash changes.
        """
        with self._lock:
            if not isinstance(new_password, str):
                return False
            if not (self.verify_token(token) or self.verify_password(old_password)):
                return False
            self._password_hash = hash_password(new_password)
            logger.info("%s changed password", self.username)
            return True

    def is_mod(self) -> bool:
        return self.moderator

    # ------------------------------------------------------------------
    # Object store
    # ------------------------------------------------------------------

    def _require_online(self) -> None:
        if not self.online:
            raise OfflineError(self.username)

    def get_object_by_name(self, name: str) -> Optional[GameObject]:
        """Get the first object with this name. Prefer get_object_by_uuid."""
        with self._lock:
            self._require_online()
            for obj in self.objects:
                if obj.name == name:
                    return obj
            return None

    def get_object_by_uuid(self, uuid: str) -> Optional[GameObject]:
        """Get an object by its uuid."""
        with self._lock:
            self._require_online()
            for obj in self.objects:
                if obj.uuid == uuid:
                    return obj
            return None

    def get_object_index(self, uuid: str) -> Optional[int]:
        """Get the position of an object in the object list by uuid."""
        with self._lock:
            self._require_online()
            for i, obj in enumerate(self.objects):
                if obj.uuid == uuid:
                    return i
            return None

    def add_object(self, token: str, obj: GameObject) -> bool:
        """Append an object. Uuid uniqueness is up to the caller."""
        with self._lock:
            if not self.verify_token(token):
                return False
            self._require_online()
            self.objects.append(obj)
            return True

    def remove_object(self, token: str, name: Optional[str] = None,
                      uuid: Optional[str] = None) -> bool:
        """
        Remove one object, by uuid if given, otherwise by name.

        Returns False when nothing matches or neither key is given.
        """
        with self._lock:
            if not self.verify_token(token):
                return False
            self._require_online()

            if uuid is None:
                if name is None:
                    return False
                obj = self.get_object_by_name(name)
                if obj is None:
                    return False
                uuid = obj.uuid

            index = self.get_object_index(uuid)
            if index is None:
                return False
            del self.objects[index]
            return True

    def update_objects(self, token: str, objects: List[GameObject]) -> bool:
        """Replace the whole object list with a new snapshot."""
        with self._lock:
            if not self.verify_token(token):
                return False
            self._require_online()
            self.objects = list(objects)
            return True

    def get_objects(self) -> List[GameObject]:
        """Return the live object list."""
        return self.objects

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @staticmethod
    def serialize(player: 'Player') -> Dict[str, Any]:
        """Durable player data. Sessions and objects are not persisted."""
        return {
            "username": player.username,
            "uuid": player.uuid,
            "password": player._password_hash,
            "moderator": player.moderator,
        }

    @staticmethod
    def load_data(player: 'Player', data: Dict[str, Any]) -> 'Player':
        """Load serialized data onto an existing player and return it."""
        missing = [key for key in RECORD_FIELDS if key not in data]
        if missing:
            raise ValueError(f"Player record missing fields: {', '.join(missing)}")
        with player._lock:
            player.username = data["username"]
            player.uuid = data["uuid"]
            player._password_hash = data["password"]
            player.moderator = bool(data["moderator"])
        return player

    @classmethod
    def from_record(cls, data: Dict[str, Any], signer: Optional[TokenSigner] = None) -> 'Player':
        """Create a fresh, offline player from a serialized record."""
        return cls.load_data(cls(data.get("username", ""), None, signer=signer), data)
