"""
Playback Bounded Context

Player events, the playback state snapshot, and the reducer between them.
"""

from taan_player.domain.playback.entities import (
    ArtistWithRole,
    AudioItem,
    CoverArt,
    CoverImage,
    PlaybackState,
)
from taan_player.domain.playback.events import PlayerEvent, parse_player_event
from taan_player.domain.playback.services import PlayContext, PlaybackStateReducer, Transition
from taan_player.domain.playback.value_objects import (
    ArtistRole,
    AudioItemKind,
    PlaybackStatus,
    SpotifyId,
)

__all__ = [
    "ArtistRole",
    "ArtistWithRole",
    "AudioItem",
    "AudioItemKind",
    "CoverArt",
    "CoverImage",
    "PlaybackState",
    "PlayContext",
    "PlaybackStateReducer",
    "PlaybackStatus",
    "PlayerEvent",
    "SpotifyId",
    "Transition",
    "parse_player_event",
]
