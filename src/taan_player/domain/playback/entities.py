"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from taan_player.domain.playback.value_objects import (
    ArtistRole,
    AudioItemKind,
    OptionalSpotifyIdField,
    PlaybackStatus,
    SpotifyIdField,
)
from taan_player.domain.shared.types import DurationMs, HttpUrlStr, NonNegativeInt, PositionMs


class CoverImage(BaseModel):
    """A cover image reference attached to an audio item."""

    model_config = ConfigDict(frozen=True)

    url: HttpUrlStr
    width: NonNegativeInt | None = None
    height: NonNegativeInt | None = None


class ArtistWithRole(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    role: ArtistRole = ArtistRole.MAIN_ARTIST


class AudioItem(BaseModel):
    """Metadata the engine delivers with a TrackChanged event."""

    model_config = ConfigDict(frozen=True)

    track_id: SpotifyIdField
    name: str
    duration_ms: DurationMs = 0
    kind: AudioItemKind = AudioItemKind.TRACK
    covers: tuple[CoverImage, ...] = ()
    artists: tuple[ArtistWithRole, ...] = ()
    album: str | None = None
    show_name: str | None = None
    is_explicit: bool = False

    @property
    def main_artist(self) -> str:
        """Main-role artists joined for display."""
        return ", ".join(a.name for a in self.artists if a.role == ArtistRole.MAIN_ARTIST)

    @property
    def composer(self) -> str:
        return ", ".join(a.name for a in self.artists if a.role == ArtistRole.COMPOSER)

    @property
    def album_name(self) -> str:
        # Episodes have no album; the show stands in for it.
        if self.kind == AudioItemKind.EPISODE:
            return self.show_name or ""
        return self.album or ""

    @property
    def cover_url(self) -> str | None:
        return self.covers[0].url if self.covers else None


class CoverArt(BaseModel):
    """Decoded cover image ready for display."""

    model_config = ConfigDict(frozen=True)

    url: str
    data: bytes = Field(repr=False)
    width: NonNegativeInt | None = None
    height: NonNegativeInt | None = None


class PlaybackState(BaseModel):
    """UI-facing snapshot of the player.

    position_ms only moves backwards on explicit seek or correction events
    and is always reset to 0 when a track ends.
    """

    model_config = ConfigDict(frozen=True)

    track_id: OptionalSpotifyIdField = None
    status: PlaybackStatus = PlaybackStatus.IDLE
    is_playing: bool = False
    position_ms: PositionMs = 0
    duration_ms: DurationMs = 0
    title: str = ""
    artist: str = ""
    album: str = ""
    composer: str = ""
    cover_art: CoverArt | None = None

    @property
    def position_seconds(self) -> int:
        return self.position_ms // 1000

    @property
    def duration_seconds(self) -> int:
        return self.duration_ms // 1000

    @property
    def position_formatted(self) -> str:
        """Format position as M:SS, the way the progress bar shows it."""
        minutes, seconds = divmod(self.position_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def has_track(self) -> bool:
        return self.track_id is not None
