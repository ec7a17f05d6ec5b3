"""Authentication module."""

from src.auth.dependencies import get_current_user, get_token_claims
from src.auth.state import oauth_states
from src.auth.tokens import create_access_token, decode_access_token

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_token_claims",
    "oauth_states",
]
