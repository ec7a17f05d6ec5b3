"""Tests for session tokens and the OAuth state store."""

import time
from datetime import timedelta

from jose import jwt

from src.auth.state import OAuthStateStore
from src.auth.tokens import create_access_token, decode_access_token
from src.config import get_settings
from src.models.user import User


def _user() -> User:
    return User(id=42, lark_id="ou_42", email="someone@example.com", name="Someone")


class TestAccessTokens:
    def test_claims(self):
        """Test token carries identity claims and a 7 day lifetime."""
        claims = decode_access_token(create_access_token(_user()))

        assert claims["sub"] == "42"
        assert claims["lark_id"] == "ou_42"
        assert claims["email"] == "someone@example.com"
        assert claims["name"] == "Someone"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    def test_expired_token_rejected(self):
        token = create_access_token(_user(), expires_delta=timedelta(seconds=-10))
        assert decode_access_token(token) is None

    def test_tampered_token_rejected(self):
        token = create_access_token(_user())
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{'A' * len(signature)}"
        assert decode_access_token(tampered) is None

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {"sub": "42", "type": "access"},
            "another-secret-that-is-also-long-enough-123",
            algorithm="HS256",
        )
        assert decode_access_token(token) is None

    def test_other_token_type_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "42", "type": "refresh"}, settings.jwt_secret, algorithm=settings.jwt_algorithm
        )
        assert decode_access_token(token) is None

    def test_missing_subject_rejected(self):
        settings = get_settings()
        token = jwt.encode({"type": "access"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        assert decode_access_token(token) is None

    def test_non_numeric_subject_rejected(self):
        settings = get_settings()
        for sub in ("abc", "4x2", "-1", 42):
            token = jwt.encode(
                {"sub": sub, "type": "access"},
                settings.jwt_secret,
                algorithm=settings.jwt_algorithm,
            )
            assert decode_access_token(token) is None, sub


class TestOAuthStateStore:
    def test_issue_and_consume(self):
        store = OAuthStateStore()
        state = store.issue()

        assert len(state) >= 32
        assert store.consume(state) is True
        # Single use
        assert store.consume(state) is False

    def test_unknown_or_missing_state(self):
        store = OAuthStateStore()
        assert store.consume("never-issued") is False
        assert store.consume(None) is False
        assert store.consume("") is False

    def test_expired_state_rejected_and_removed(self, monkeypatch):
        store = OAuthStateStore(ttl=600)
        state = store.issue()

        later = time.monotonic() + 601
        monkeypatch.setattr("src.auth.state.time.monotonic", lambda: later)
        assert store.consume(state) is False
        assert len(store) == 0

    def test_purge_expired(self, monkeypatch):
        store = OAuthStateStore(ttl=600)
        store.issue()
        store.issue()

        later = time.monotonic() + 601
        monkeypatch.setattr("src.auth.state.time.monotonic", lambda: later)
        fresh = store.issue()  # issue() purges first

        assert len(store) == 1
        assert store.purge_expired() == 0
        assert store.consume(fresh) is True
