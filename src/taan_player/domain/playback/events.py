"""Player events emitted by the playback engine, in arrival order."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from taan_player.domain.playback.entities import AudioItem
from taan_player.domain.playback.value_objects import SpotifyIdField
from taan_player.domain.shared.types import NonNegativeInt, PositionMs, VolumeLevel


class PlayerEvent(BaseModel):
    """Base class for all player events."""

    model_config = {"frozen": True}


class PlayRequestIdChanged(PlayerEvent):
    event_type: Literal["PlayRequestIdChanged"] = "PlayRequestIdChanged"
    play_request_id: NonNegativeInt


class TrackChanged(PlayerEvent):
    event_type: Literal["TrackChanged"] = "TrackChanged"
    audio_item: AudioItem


class Stopped(PlayerEvent):
    event_type: Literal["Stopped"] = "Stopped"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField


class Loading(PlayerEvent):
    event_type: Literal["Loading"] = "Loading"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs = 0


class Preloading(PlayerEvent):
    event_type: Literal["Preloading"] = "Preloading"
    track_id: SpotifyIdField


class Playing(PlayerEvent):
    event_type: Literal["Playing"] = "Playing"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs = 0


class Paused(PlayerEvent):
    event_type: Literal["Paused"] = "Paused"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs = 0


class TimeToPreloadNextTrack(PlayerEvent):
    event_type: Literal["TimeToPreloadNextTrack"] = "TimeToPreloadNextTrack"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField


class EndOfTrack(PlayerEvent):
    event_type: Literal["EndOfTrack"] = "EndOfTrack"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField


class Unavailable(PlayerEvent):
    event_type: Literal["Unavailable"] = "Unavailable"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField


class VolumeChanged(PlayerEvent):
    event_type: Literal["VolumeChanged"] = "VolumeChanged"
    volume: VolumeLevel


class PositionCorrection(PlayerEvent):
    event_type: Literal["PositionCorrection"] = "PositionCorrection"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs


class PositionChanged(PlayerEvent):
    event_type: Literal["PositionChanged"] = "PositionChanged"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs


class Seeked(PlayerEvent):
    event_type: Literal["Seeked"] = "Seeked"
    play_request_id: NonNegativeInt = 0
    track_id: SpotifyIdField
    position_ms: PositionMs


class SessionConnected(PlayerEvent):
    event_type: Literal["SessionConnected"] = "SessionConnected"
    connection_id: str
    user_name: str


class SessionDisconnected(PlayerEvent):
    event_type: Literal["SessionDisconnected"] = "SessionDisconnected"
    connection_id: str
    user_name: str


class SessionClientChanged(PlayerEvent):
    event_type: Literal["SessionClientChanged"] = "SessionClientChanged"
    client_id: str
    client_name: str = ""
    client_brand_name: str = ""
    client_model_name: str = ""


class ShuffleChanged(PlayerEvent):
    event_type: Literal["ShuffleChanged"] = "ShuffleChanged"
    shuffle: bool


class RepeatChanged(PlayerEvent):
    event_type: Literal["RepeatChanged"] = "RepeatChanged"
    context: bool = False
    track: bool = False


class AutoPlayChanged(PlayerEvent):
    event_type: Literal["AutoPlayChanged"] = "AutoPlayChanged"
    auto_play: bool


AnyPlayerEvent = Annotated[
    PlayRequestIdChanged
    | TrackChanged
    | Stopped
    | Loading
    | Preloading
    | Playing
    | Paused
    | TimeToPreloadNextTrack
    | EndOfTrack
    | Unavailable
    | VolumeChanged
    | PositionCorrection
    | PositionChanged
    | Seeked
    | SessionConnected
    | SessionDisconnected
    | SessionClientChanged
    | ShuffleChanged
    | RepeatChanged
    | AutoPlayChanged,
    Field(discriminator="event_type"),
]

_event_adapter: TypeAdapter[AnyPlayerEvent] = TypeAdapter(AnyPlayerEvent)


def parse_player_event(payload: dict[str, Any]) -> PlayerEvent:
    """Decode an engine event payload keyed by ``event_type``."""
    return _event_adapter.validate_python(payload)
