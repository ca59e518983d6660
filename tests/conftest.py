"""Shared test fixtures for session server tests."""
import pytest

from gdserver.config_loader import ConfigLoader
from gdserver.core import GameObject, Player, TokenSigner
from gdserver.directory import PlayerDirectory

TEST_SECRET = "test-secret-do-not-use-0123456789abcdef"


@pytest.fixture
def signer():
    """Token signer with a fixed secret."""
    return TokenSigner(TEST_SECRET)


@pytest.fixture
def alice(signer):
    """Offline player 'alice' with password 'hunter2'."""
    return Player("alice", "hunter2", signer=signer)


@pytest.fixture
def online_alice(alice):
    """Alice logged in once. Returns (player, token)."""
    token = alice.login("hunter2")
    assert token
    return alice, token


@pytest.fixture
def coin():
    return GameObject(name="coin", uuid="u1", x=0, y=0)


@pytest.fixture
def directory(signer):
    """Directory with alice (player) and bob (moderator)."""
    d = PlayerDirectory(signer=signer)
    d.create_player("alice", "hunter2")
    d.create_player("bob", "swordfish", moderator=True)
    return d


@pytest.fixture
def temp_config_dir(tmp_path, monkeypatch):
    """Point ConfigLoader at an empty temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    monkeypatch.delenv("GDSERVER_SECRET", raising=False)
    monkeypatch.setattr(ConfigLoader, "_config_dir", str(config_dir))
    monkeypatch.setattr(ConfigLoader, "_instance", None)

    return config_dir
