"""Configuration loader for server settings."""
import json
import logging
import os
import secrets
from typing import Dict, Any, Optional

from .core.tokens import DEFAULT_ALGORITHM, TokenSigner

logger = logging.getLogger(__name__)

SECRET_ENV_VAR = "GDSERVER_SECRET"


class ConfigLoader:
    """Loads and provides access to server configuration."""

    _instance = None
    _config_dir = "config"

    def __new__(cls):
        """Singleton pattern to ensure only one config loader."""
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._load_all_configs()
        return cls._instance

    def _load_all_configs(self):
        """Load all configuration files."""
        self.server_settings = self._load_json("server_settings.json")
        self._signer: Optional[TokenSigner] = None

    def _load_json(self, filename: str) -> Dict[str, Any]:
        """Load a JSON configuration file."""
        filepath = os.path.join(self._config_dir, filename)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.warning("Config file %s not found. Using defaults.", filename)
            return {}
        except json.JSONDecodeError as e:
            logger.warning("Error parsing %s: %s. Using defaults.", filename, e)
            return {}

    def get(self, *keys, default=None):
        """Get a nested configuration value."""
        value = self.server_settings
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_secret(self) -> str:
        """Token signing secret from the environment or the settings file."""
        secret = os.environ.get(SECRET_ENV_VAR) or self.get("auth", "secret")
        if not secret:
            logger.warning("No token secret configured; generated a per-process secret. "
                           "Tokens will not verify after a restart.")
            secret = secrets.token_hex(32)
            self.server_settings.setdefault("auth", {})["secret"] = secret
        return secret

    def get_algorithm(self) -> str:
        return self.get("auth", "algorithm", default=DEFAULT_ALGORITHM)

    def get_players_file(self) -> str:
        """Path of the JSON player record store."""
        return self.get("storage", "players_file", default="data/players.json")

    def token_signer(self) -> TokenSigner:
        """Shared token signer built from the auth settings."""
        if self._signer is None:
            self._signer = TokenSigner(self.get_secret(), self.get_algorithm())
        return self._signer


# Global config instance
config = ConfigLoader()
