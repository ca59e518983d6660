"""Error types raised by the session core."""


class SessionError(Exception):
    """Base class for session and identity errors."""


class AuthError(SessionError):
    """Token missing, malformed, badly signed, or with mismatched claims."""


class OfflineError(SessionError):
    """Raised when object data of a non-online player is accessed."""

    def __init__(self, username: str = ""):
        self.username = username
        super().__init__(f"Trying to access data from a non-online player: {username!r}")


class DuplicateUsernameError(SessionError):
    """Raised when registering a username that already exists."""
