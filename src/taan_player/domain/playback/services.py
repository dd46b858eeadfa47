"""
Playback Domain Services

Pure state transitions for the player event stream. Side effects are
returned as values and carried out by the application layer.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from taan_player.domain.playback.entities import PlaybackState
from taan_player.domain.playback.events import (
    AutoPlayChanged,
    EndOfTrack,
    Loading,
    Paused,
    PlayerEvent,
    Playing,
    PlayRequestIdChanged,
    PositionChanged,
    PositionCorrection,
    Preloading,
    RepeatChanged,
    Seeked,
    SessionClientChanged,
    SessionConnected,
    SessionDisconnected,
    ShuffleChanged,
    Stopped,
    TimeToPreloadNextTrack,
    TrackChanged,
    Unavailable,
    VolumeChanged,
)
from taan_player.domain.playback.value_objects import PlaybackStatus, SpotifyId


@dataclass(frozen=True)
class FetchCoverArt:
    """Fetch the cover for ``track_id`` outside the event loop."""

    url: str
    track_id: SpotifyId


@dataclass(frozen=True)
class PreloadNext:
    """Ask the engine to preload whatever follows ``current``."""

    current: SpotifyId


@dataclass(frozen=True)
class PauseEngine:
    pass


SideEffect = FetchCoverArt | PreloadNext | PauseEngine


@dataclass(frozen=True)
class Transition:
    """Result of applying one event to a playback state."""

    state: PlaybackState
    effects: tuple[SideEffect, ...] = field(default_factory=tuple)
    handled: bool = True


class PlaybackStateReducer:
    """Table-driven dispatcher from player events to playback state transitions.

    Events without an entry in the table are reported as unhandled so the
    caller can log and skip them.
    """

    OBSERVATIONAL_EVENTS: tuple[type[PlayerEvent], ...] = (
        PlayRequestIdChanged,
        Preloading,
        VolumeChanged,
        SessionConnected,
        SessionDisconnected,
        SessionClientChanged,
        ShuffleChanged,
        RepeatChanged,
        AutoPlayChanged,
        Unavailable,
    )

    def __init__(
        self,
        *,
        pause_on_end_of_track: bool = True,
        preload_next_track: bool = True,
        fetch_cover_art: bool = True,
    ) -> None:
        self._pause_on_end = pause_on_end_of_track
        self._preload = preload_next_track
        self._fetch_cover = fetch_cover_art

        self._table: dict[type[PlayerEvent], Callable[[PlaybackState, Any], Transition]] = {
            TrackChanged: self._on_track_changed,
            Loading: self._on_loading,
            Playing: self._on_playing,
            Paused: self._on_paused,
            EndOfTrack: self._on_end_of_track,
            Stopped: self._on_stopped,
            PositionChanged: self._on_position,
            PositionCorrection: self._on_position,
            Seeked: self._on_position,
            TimeToPreloadNextTrack: self._on_time_to_preload,
        }
        for event_type in self.OBSERVATIONAL_EVENTS:
            self._table[event_type] = self._on_observational

    def handled_event_types(self) -> frozenset[type[PlayerEvent]]:
        return frozenset(self._table)

    def apply(self, state: PlaybackState, event: PlayerEvent) -> Transition:
        handler = self._table.get(type(event))
        if handler is None:
            return Transition(state=state, handled=False)
        return handler(state, event)

    # === Handlers ===

    def _on_track_changed(self, state: PlaybackState, event: TrackChanged) -> Transition:
        item = event.audio_item
        new_state = state.model_copy(
            update={
                "track_id": item.track_id,
                "title": item.name,
                "artist": item.main_artist,
                "album": item.album_name,
                "composer": item.composer,
                "duration_ms": item.duration_ms,
                "cover_art": None,
            }
        )
        effects: tuple[SideEffect, ...] = ()
        if self._fetch_cover and item.cover_url:
            effects = (FetchCoverArt(url=item.cover_url, track_id=item.track_id),)
        return Transition(state=new_state, effects=effects)

    def _on_loading(self, state: PlaybackState, event: Loading) -> Transition:
        return Transition(
            state=state.model_copy(
                update={
                    "track_id": event.track_id,
                    "status": PlaybackStatus.LOADING,
                    "position_ms": event.position_ms,
                }
            )
        )

    def _on_playing(self, state: PlaybackState, event: Playing) -> Transition:
        return Transition(
            state=state.model_copy(
                update={
                    "track_id": event.track_id,
                    "status": PlaybackStatus.PLAYING,
                    "is_playing": True,
                    "position_ms": event.position_ms,
                }
            )
        )

    def _on_paused(self, state: PlaybackState, event: Paused) -> Transition:
        return Transition(
            state=state.model_copy(
                update={
                    "track_id": event.track_id,
                    "status": PlaybackStatus.PAUSED,
                    "is_playing": False,
                    "position_ms": event.position_ms,
                }
            )
        )

    def _on_end_of_track(self, state: PlaybackState, event: EndOfTrack) -> Transition:
        effects: tuple[SideEffect, ...] = (PauseEngine(),) if self._pause_on_end else ()
        return Transition(state=self._to_idle(state), effects=effects)

    def _on_stopped(self, state: PlaybackState, event: Stopped) -> Transition:
        return Transition(state=self._to_idle(state))

    def _on_position(
        self, state: PlaybackState, event: PositionChanged | PositionCorrection | Seeked
    ) -> Transition:
        return Transition(state=state.model_copy(update={"position_ms": event.position_ms}))

    def _on_time_to_preload(
        self, state: PlaybackState, event: TimeToPreloadNextTrack
    ) -> Transition:
        if not self._preload:
            return Transition(state=state)
        return Transition(state=state, effects=(PreloadNext(current=event.track_id),))

    def _on_observational(self, state: PlaybackState, event: PlayerEvent) -> Transition:
        return Transition(state=state)

    @staticmethod
    def _to_idle(state: PlaybackState) -> PlaybackState:
        # Track metadata stays so the UI can keep showing the last track.
        return state.model_copy(
            update={
                "track_id": None,
                "status": PlaybackStatus.IDLE,
                "is_playing": False,
                "position_ms": 0,
            }
        )


class PlayContext:
    """Ordered list of tracks the current one was started from.

    Used to answer "what comes next" when the engine asks to preload.
    """

    def __init__(self, tracks: Sequence[SpotifyId] = ()) -> None:
        self._tracks: tuple[SpotifyId, ...] = tuple(t for t in tracks if t.is_playable)

    @property
    def tracks(self) -> tuple[SpotifyId, ...]:
        return self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    def next_after(self, current: SpotifyId) -> SpotifyId | None:
        """Return the track following ``current``, or None at the end or when unknown."""
        try:
            index = self._tracks.index(current)
        except ValueError:
            return None
        if index + 1 >= len(self._tracks):
            return None
        return self._tracks[index + 1]

    def starting_at(self, track_id: SpotifyId) -> PlayContext:
        """Context to record when ``track_id`` is played from this listing."""
        if track_id in self._tracks:
            return self
        return PlayContext((track_id,))
