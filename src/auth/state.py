"""Short-lived OAuth state values for CSRF protection of the login flow."""

import secrets
import threading
import time

from src.constants import OAUTH_STATE_TTL_SECONDS


class OAuthStateStore:
    """In-process store of issued state values with expiry.

    State is single use: `consume` removes the value whether or not it is
    still valid.
    """

    def __init__(self, ttl: float = OAUTH_STATE_TTL_SECONDS) -> None:
        self.ttl = ttl
        self._states: dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def issue(self) -> str:
        """Generate and remember a new state value."""
        self.purge_expired()
        state = secrets.token_urlsafe(32)
        with self._lock:
            self._states[state] = time.monotonic() + self.ttl
        return state

    def consume(self, state: str | None) -> bool:
        """Return True if the state was issued and has not expired."""
        if not state:
            return False
        with self._lock:
            expires_at = self._states.pop(state, None)
        return expires_at is not None and expires_at > time.monotonic()

    def purge_expired(self) -> int:
        """Drop expired states. Returns the number removed."""
        now = time.monotonic()
        with self._lock:
            expired = [s for s, expires_at in self._states.items() if expires_at <= now]
            for s in expired:
                del self._states[s]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._states.clear()


# Global state store
oauth_states = OAuthStateStore()
