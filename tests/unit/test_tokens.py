"""Unit tests for gdserver/core/tokens.py - claims and TokenSigner."""
import jwt
import pytest

from gdserver.core import AuthError, SessionClaims, TokenSigner, new_session_id

OTHER_SECRET = "another-secret-for-forged-tokens-0123456789"


@pytest.fixture
def claims():
    return SessionClaims(username="alice", password_hash="abc123", session_id="s-1")


class TestSessionClaims:
    """Tests for SessionClaims payload conversion."""

    def test_payload_round_trip(self, claims):
        """Test claims survive to_payload/from_payload."""
        assert SessionClaims.from_payload(claims.to_payload()) == claims

    def test_missing_claim_raises(self):
        """Test a payload without session_id is rejected."""
        with pytest.raises(AuthError):
            SessionClaims.from_payload({"username": "alice", "password": "abc123"})

    def test_non_string_claim_raises(self):
        """Test claims must be strings."""
        with pytest.raises(AuthError):
            SessionClaims.from_payload({"username": "alice", "password": 5, "session_id": "s-1"})


class TestTokenSigner:
    """Tests for signing and decoding tokens."""

    def test_sign_then_decode(self, signer, claims):
        """Test a signed token decodes to the same claims."""
        token = signer.sign(claims)

        assert isinstance(token, str)
        assert signer.decode(token) == claims

    def test_wrong_secret_rejected(self, signer, claims):
        """Test a token signed with another secret fails."""
        token = TokenSigner(OTHER_SECRET).sign(claims)

        with pytest.raises(AuthError):
            signer.decode(token)

    def test_tampered_token_rejected(self, signer, claims):
        """Test editing the payload breaks the signature."""
        token = signer.sign(claims)
        header, payload, signature = token.split(".")
        forged = jwt.encode({"username": "mallory", "password": "abc123", "session_id": "s-1"},
                            OTHER_SECRET, algorithm="HS256")
        tampered = ".".join([header, forged.split(".")[1], signature])

        with pytest.raises(AuthError):
            signer.decode(tampered)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", None, 42])
    def test_malformed_tokens_rejected(self, signer, token):
        """Test junk input raises AuthError only."""
        with pytest.raises(AuthError):
            signer.decode(token)

    def test_empty_secret_not_allowed(self):
        """Test a signer needs a secret."""
        with pytest.raises(ValueError):
            TokenSigner("")

    def test_session_ids_are_unique(self):
        """Test each login gets a fresh session id."""
        ids = {new_session_id() for _ in range(100)}

        assert len(ids) == 100
