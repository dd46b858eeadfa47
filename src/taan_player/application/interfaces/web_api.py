"""
Web API Client Interface

Port interface for the token-based metadata and playlist API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.auth.entities import BearerToken
    from ...domain.library.entities import (
        PlaylistItem,
        PrivateUser,
        SavedTrack,
        SimplifiedPlaylist,
    )
    from ...domain.playback.value_objects import SpotifyId


class WebApiClient(ABC):
    """Abstract interface for the stateful REST client.

    Every query raises ``HttpStatusError`` for non-success responses so that
    callers can classify 401 and 429 themselves.
    """

    @abstractmethod
    def set_token(self, token: BearerToken) -> None:
        """Install a new bearer token for subsequent requests."""
        ...

    @abstractmethod
    async def current_user(self) -> PrivateUser:
        ...

    @abstractmethod
    async def current_user_playlists(self, limit: int, offset: int = 0) -> list[SimplifiedPlaylist]:
        ...

    @abstractmethod
    async def playlist_items(
        self, playlist_id: SpotifyId, limit: int, offset: int = 0
    ) -> list[PlaylistItem]:
        ...

    @abstractmethod
    async def saved_tracks(self, limit: int, offset: int = 0) -> list[SavedTrack]:
        ...

    @abstractmethod
    async def aclose(self) -> None:
        ...
