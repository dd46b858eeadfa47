"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated
from urllib.parse import urlparse

from pydantic import PlainSerializer, PlainValidator

from taan_player.domain.shared.constants import SpotifyConstants
from taan_player.domain.shared.messages import ErrorMessages

_BASE62_ID = re.compile(rf"^[0-9A-Za-z]{{{SpotifyConstants.ID_LENGTH}}}$")

SUPPORTED_ITEM_TYPES = frozenset({"track", "episode", "playlist", "album", "artist", "show"})


@dataclass(frozen=True)
class SpotifyId:
    """A typed base62 identifier such as ``spotify:track:4fnskJdNDDh27vBhsvXChn``."""

    item_type: str
    id: str

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError(ErrorMessages.EMPTY_SPOTIFY_ID)
        if not _BASE62_ID.match(self.id):
            raise ValueError(ErrorMessages.INVALID_SPOTIFY_ID.format(value=self.id))
        if self.item_type not in SUPPORTED_ITEM_TYPES:
            raise ValueError(ErrorMessages.UNSUPPORTED_ITEM_TYPE.format(item_type=self.item_type))

    def __str__(self) -> str:
        return self.uri

    @property
    def uri(self) -> str:
        return f"{SpotifyConstants.URI_SCHEME}:{self.item_type}:{self.id}"

    @property
    def is_playable(self) -> bool:
        return self.item_type in {"track", "episode"}

    @classmethod
    def from_uri(cls, uri: str) -> SpotifyId:
        """Parse ``spotify:<type>:<id>``, including legacy ``spotify:user:<name>:playlist:<id>``."""
        parts = uri.strip().split(":")
        if len(parts) < 3 or parts[0] != SpotifyConstants.URI_SCHEME:
            raise ValueError(ErrorMessages.INVALID_SPOTIFY_URI.format(value=uri))
        return cls(item_type=parts[-2], id=parts[-1])

    @classmethod
    def from_url(cls, url: str) -> SpotifyId:
        """Parse an ``https://open.spotify.com/<type>/<id>`` share link."""
        parsed = urlparse(url.strip())
        if parsed.netloc != SpotifyConstants.OPEN_URL_HOST:
            raise ValueError(ErrorMessages.INVALID_SPOTIFY_URI.format(value=url))

        # Localised links carry an "intl-xx" segment before the type.
        segments = [s for s in parsed.path.split("/") if s and not s.startswith("intl-")]
        if len(segments) < 2:
            raise ValueError(ErrorMessages.INVALID_SPOTIFY_URI.format(value=url))
        return cls(item_type=segments[-2], id=segments[-1])

    @classmethod
    def parse(cls, value: str, default_type: str = "track") -> SpotifyId:
        """Accept a URI, a share URL, or a bare base62 id of ``default_type``."""
        value = value.strip()
        if value.startswith(f"{SpotifyConstants.URI_SCHEME}:"):
            return cls.from_uri(value)
        if value.startswith(("http://", "https://")):
            return cls.from_url(value)
        return cls(item_type=default_type, id=value)


def _coerce_spotify_id(value: object) -> SpotifyId:
    if isinstance(value, SpotifyId):
        return value
    if isinstance(value, str):
        return SpotifyId.parse(value)
    raise ValueError(ErrorMessages.INVALID_SPOTIFY_ID.format(value=value))


# Serializes as the URI string, stores as SpotifyId in the model.
SpotifyIdField = Annotated[
    SpotifyId,
    PlainValidator(_coerce_spotify_id),
    PlainSerializer(lambda v: v.uri, return_type=str),
]

OptionalSpotifyIdField = Annotated[
    SpotifyId | None,
    PlainValidator(lambda v: None if v is None else _coerce_spotify_id(v)),
    PlainSerializer(lambda v: v.uri if v is not None else None, return_type=str | None),
]


class PlaybackStatus(Enum):
    """Coarse player state derived from the engine's event stream.

    State transitions (any state may enter any other on the matching event):
    - Loading -> LOADING
    - Playing -> PLAYING
    - Paused -> PAUSED
    - EndOfTrack / Stopped -> IDLE
    """

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"

    @property
    def is_active(self) -> bool:
        return self in {PlaybackStatus.LOADING, PlaybackStatus.PLAYING, PlaybackStatus.PAUSED}


class ArtistRole(Enum):
    """Role an artist plays on a track, as reported by track metadata."""

    MAIN_ARTIST = "main_artist"
    FEATURED_ARTIST = "featured_artist"
    REMIXER = "remixer"
    ACTOR = "actor"
    COMPOSER = "composer"
    CONDUCTOR = "conductor"
    ORCHESTRA = "orchestra"
    UNKNOWN = "unknown"


class AudioItemKind(Enum):
    TRACK = "track"
    EPISODE = "episode"
