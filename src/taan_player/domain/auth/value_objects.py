"""Value objects for the authentication bounded context."""

from __future__ import annotations

from enum import Enum


class CredentialsKind(Enum):
    """How a set of credentials authenticates the streaming session."""

    STORED = "stored"  # reusable blob cached by a previous session
    ACCESS_TOKEN = "access_token"  # produced by the interactive OAuth flow


class AuthState(Enum):
    """UI-facing authentication state.

    State transitions:
    - LOADING -> LOGGED_IN (cached credentials worked)
    - LOADING -> LOGGED_OUT (no cache, or cache rejected)
    - LOGGED_OUT -> LOGGING_IN (interactive login started)
    - LOGGING_IN -> LOGGED_IN | LOGGED_OUT
    - LOGGED_IN -> LOGGED_OUT (logout)
    """

    LOADING = "loading"
    LOGGED_OUT = "logged_out"
    LOGGING_IN = "logging_in"
    LOGGED_IN = "logged_in"

    @property
    def is_logged_in(self) -> bool:
        return self == AuthState.LOGGED_IN

    @property
    def is_busy(self) -> bool:
        return self in {AuthState.LOADING, AuthState.LOGGING_IN}
