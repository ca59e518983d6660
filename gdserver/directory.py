"""
Player directory for the session server.

Owns every Player known to the process:
- Registering new accounts
- Looking players up by username or uuid
- Authenticating credentials into session tokens
- Saving and loading durable player records as JSON
- Forcing everyone offline on shutdown
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .core.errors import DuplicateUsernameError
from .core.player import Player
from .core.tokens import TokenSigner

logger = logging.getLogger(__name__)


class PlayerDirectory:
    """In-memory registry of players, keyed by username."""

    def __init__(self, signer: Optional[TokenSigner] = None):
        self.signer = signer
        # Map username -> Player
        self._players: Dict[str, Player] = {}
        # Map player uuid -> username
        self._uuid_to_username: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, username: str) -> bool:
        return username in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def create_player(self, username: str, password: str, moderator: bool = False) -> Player:
        """Provision a new account."""
        player = Player(username, password, moderator=moderator, signer=self.signer)
        self.add(player)
        logger.info("Created player %s (moderator=%s)", username, moderator)
        return player

    def add(self, player: Player) -> None:
        """Register an existing player instance."""
        if player.username in self._players:
            raise DuplicateUsernameError(f"Username already taken: {player.username}")
        self._players[player.username] = player
        self._uuid_to_username[player.uuid] = player.username

    def get(self, username: str) -> Optional[Player]:
        return self._players.get(username)

    def get_by_uuid(self, uuid: str) -> Optional[Player]:
        username = self._uuid_to_username.get(uuid)
        if username is None:
            return None
        return self._players.get(username)

    def remove(self, username: str) -> bool:
        """Forget a player. Any open sessions are dropped first."""
        player = self._players.pop(username, None)
        if player is None:
            return False
        self._uuid_to_username.pop(player.uuid, None)
        player.logout_force()
        return True

    def online_players(self) -> List[Player]:
        return [p for p in self._players.values() if p.online]

    def authenticate(self, username: str, password: str) -> Optional[str]:
        """
        Log a player in by credentials.

        Returns:
            A session token, or None. An unknown username and a wrong
            password give the same result.
        """
        logger.info("%s is logging in...", username)
        player = self._players.get(username)
        if player is None:
            logger.warning("Authentication failed for %s", username)
            return None
        return player.login(password)

    def shutdown(self) -> int:
        """Force every online player offline. Returns how many were online."""
        online = self.online_players()
        for player in online:
            player.logout_force()
        logger.info("Shutdown: %d players logged out", len(online))
        return len(online)

    # Record store

    def save(self, path) -> None:
        """Write every player's durable record to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        records = [Player.serialize(p) for p in self._players.values()]
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        logger.info("Saved %d player records to %s", len(records), path)

    @classmethod
    def load(cls, path, signer: Optional[TokenSigner] = None) -> 'PlayerDirectory':
        """
        Build a directory from a JSON record file.

        Loaded players start offline with no sessions or objects. A missing
        file gives an empty directory.
        """
        directory = cls(signer=signer)
        path = Path(path)
        if not path.exists():
            logger.warning("Player store %s not found. Starting empty.", path)
            return directory

        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"Player store {path} must contain a JSON list")

        for record in records:
            if not isinstance(record, dict):
                raise ValueError(f"Player store {path} contains a non-object record")
            directory.add(Player.from_record(record, signer=signer))
        logger.info("Loaded %d player records from %s", len(directory), path)
        return directory
