# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, types and messages
- auth/: Credentials, sessions and web API tokens
- playback/: Player events, playback state and its reducer
- library/: Users, playlists and tracks from the web API
"""

from taan_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
