"""
Authentication Bounded Context

Credentials, sessions and web API tokens.
"""

from taan_player.domain.auth.entities import BearerToken, Credentials, Session
from taan_player.domain.auth.value_objects import AuthState, CredentialsKind

__all__ = [
    "AuthState",
    "BearerToken",
    "Credentials",
    "CredentialsKind",
    "Session",
]
