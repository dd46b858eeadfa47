"""Library models parsed from web API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from taan_player.domain.shared.types import DurationMs, NonNegativeInt


class _ApiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Image(_ApiModel):
    url: str
    width: NonNegativeInt | None = None
    height: NonNegativeInt | None = None


class PrivateUser(_ApiModel):
    id: str
    display_name: str | None = None
    email: str | None = None
    country: str | None = None
    product: str | None = None
    images: tuple[Image, ...] = ()

    @property
    def name(self) -> str:
        return self.display_name or self.id


class PlaylistOwner(_ApiModel):
    id: str
    display_name: str | None = None


class PlaylistTracksRef(_ApiModel):
    href: str | None = None
    total: NonNegativeInt = 0


class SimplifiedPlaylist(_ApiModel):
    id: str
    name: str
    uri: str | None = None
    description: str | None = None
    owner: PlaylistOwner | None = None
    tracks: PlaylistTracksRef = Field(default_factory=PlaylistTracksRef)
    images: tuple[Image, ...] = ()
    public: bool | None = None
    collaborative: bool = False

    @property
    def track_count(self) -> int:
        return self.tracks.total


class SimplifiedArtist(_ApiModel):
    id: str | None = None
    name: str


class SimplifiedAlbum(_ApiModel):
    id: str | None = None
    name: str
    images: tuple[Image, ...] = ()


class FullTrack(_ApiModel):
    # Local files have no id.
    id: str | None = None
    name: str
    uri: str | None = None
    duration_ms: DurationMs = 0
    explicit: bool = False
    album: SimplifiedAlbum | None = None
    artists: tuple[SimplifiedArtist, ...] = ()
    is_local: bool = False

    @property
    def artist_names(self) -> str:
        return ", ".join(a.name for a in self.artists)

    @property
    def album_name(self) -> str:
        return self.album.name if self.album else ""

    @property
    def is_playable(self) -> bool:
        return self.id is not None and not self.is_local


class PlaylistItem(_ApiModel):
    added_at: str | None = None
    is_local: bool = False
    # Removed or unavailable entries come back with a null track.
    track: FullTrack | None = None


class SavedTrack(_ApiModel):
    added_at: str | None = None
    track: FullTrack
