"""
Library Bounded Context

Users, playlists and tracks as returned by the web API.
"""

from taan_player.domain.library.entities import (
    FullTrack,
    Image,
    PlaylistItem,
    PrivateUser,
    SavedTrack,
    SimplifiedPlaylist,
)

__all__ = [
    "FullTrack",
    "Image",
    "PlaylistItem",
    "PrivateUser",
    "SavedTrack",
    "SimplifiedPlaylist",
]
