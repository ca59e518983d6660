"""Session and identity server for multiplayer GDevelop games."""

from .core import GameObject, Player, TokenSigner, AuthError, OfflineError

__version__ = "0.1.0"

__all__ = ["GameObject", "Player", "TokenSigner", "AuthError", "OfflineError"]
