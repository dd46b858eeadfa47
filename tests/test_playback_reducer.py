"""
Unit Tests for the Playback State Reducer

Tests for:
- Each table entry (Loading, Playing, Paused, EndOfTrack, Stopped, positions)
- TrackChanged metadata and the cover-art side effect
- Preload and pause-on-end side effects and their switches
- Observational and unknown events
- Properties over arbitrary event sequences
"""

import random

import pytest

from conftest import TRACK_A, TRACK_B
from taan_player.domain.playback.entities import (
    ArtistWithRole,
    AudioItem,
    CoverArt,
    PlaybackState,
)
from taan_player.domain.playback.events import (
    EndOfTrack,
    Loading,
    Paused,
    PlayerEvent,
    Playing,
    PositionChanged,
    PositionCorrection,
    Preloading,
    Seeked,
    SessionConnected,
    Stopped,
    TimeToPreloadNextTrack,
    TrackChanged,
    Unavailable,
    VolumeChanged,
)
from taan_player.domain.playback.services import (
    FetchCoverArt,
    PauseEngine,
    PlaybackStateReducer,
    PlayContext,
    PreloadNext,
)
from taan_player.domain.playback.value_objects import (
    AudioItemKind,
    PlaybackStatus,
    SpotifyId,
)

T1 = SpotifyId("track", TRACK_A)
T2 = SpotifyId("track", TRACK_B)


def _run(reducer: PlaybackStateReducer, events: list[PlayerEvent]) -> PlaybackState:
    state = PlaybackState()
    for event in events:
        state = reducer.apply(state, event).state
    return state


class UnknownEvent(PlayerEvent):
    name: str = "mystery"


# =============================================================================
# Table Entries
# =============================================================================


class TestStateTable:
    """Tests for the per-event state transitions."""

    def test_initial_state_is_idle(self):
        state = PlaybackState()

        assert state.status == PlaybackStatus.IDLE
        assert state.is_playing is False
        assert state.position_ms == 0
        assert state.track_id is None

    def test_loading_updates_position_only(self):
        reducer = PlaybackStateReducer()
        playing = PlaybackState(track_id=T1, is_playing=True, position_ms=500)

        state = reducer.apply(playing, Loading(track_id=T2, position_ms=0)).state

        assert state.status == PlaybackStatus.LOADING
        assert state.position_ms == 0
        assert state.track_id == T2
        assert state.is_playing is True

    def test_loading_keeps_paused_flag(self):
        reducer = PlaybackStateReducer()

        state = reducer.apply(PlaybackState(), Loading(track_id=T1, position_ms=0)).state

        assert state.is_playing is False

    def test_playing_sets_flag_and_position(self):
        reducer = PlaybackStateReducer()

        state = reducer.apply(PlaybackState(), Playing(track_id=T1, position_ms=1000)).state

        assert state.is_playing is True
        assert state.status == PlaybackStatus.PLAYING
        assert state.position_ms == 1000

    def test_paused_clears_flag_and_sets_position(self):
        reducer = PlaybackStateReducer()
        playing = PlaybackState(track_id=T1, is_playing=True, position_ms=100)

        state = reducer.apply(playing, Paused(track_id=T1, position_ms=4200)).state

        assert state.is_playing is False
        assert state.status == PlaybackStatus.PAUSED
        assert state.position_ms == 4200

    @pytest.mark.parametrize("event", [EndOfTrack(track_id=T1), Stopped(track_id=T1)])
    def test_end_and_stop_return_to_idle(self, event):
        reducer = PlaybackStateReducer()
        playing = PlaybackState(
            track_id=T1, is_playing=True, position_ms=180_000, title="Song", artist="Band"
        )

        state = reducer.apply(playing, event).state

        assert state.track_id is None
        assert state.is_playing is False
        assert state.position_ms == 0
        assert state.status == PlaybackStatus.IDLE
        assert state.title == "Song"
        assert state.artist == "Band"

    @pytest.mark.parametrize("event_type", [PositionChanged, PositionCorrection, Seeked])
    def test_position_events_touch_position_only(self, event_type):
        reducer = PlaybackStateReducer()
        playing = PlaybackState(track_id=T1, is_playing=True, position_ms=1000, title="Song")

        state = reducer.apply(playing, event_type(track_id=T1, position_ms=250)).state

        assert state == playing.model_copy(update={"position_ms": 250})


# =============================================================================
# TrackChanged
# =============================================================================


class TestTrackChanged:
    """Tests for metadata updates and cover-art effects."""

    def test_metadata_applied_and_cover_requested(self, sample_audio_item):
        reducer = PlaybackStateReducer()
        with_cover = PlaybackState(
            cover_art=CoverArt(url="https://i.scdn.co/image/old", data=b"old")
        )

        transition = reducer.apply(with_cover, TrackChanged(audio_item=sample_audio_item))

        state = transition.state
        assert state.title == "Windowlicker"
        assert state.artist == "Aphex Twin"
        assert state.composer == "Richard D. James"
        assert state.album == "Windowlicker"
        assert state.duration_ms == 366_000
        assert state.cover_art is None
        assert transition.effects == (
            FetchCoverArt(url="https://i.scdn.co/image/cover-a", track_id=T1),
        )

    def test_no_cover_no_fetch(self):
        reducer = PlaybackStateReducer()
        item = AudioItem(track_id=T1, name="Untitled")

        transition = reducer.apply(PlaybackState(), TrackChanged(audio_item=item))

        assert transition.effects == ()

    def test_cover_fetch_can_be_disabled(self, sample_audio_item):
        reducer = PlaybackStateReducer(fetch_cover_art=False)

        transition = reducer.apply(PlaybackState(), TrackChanged(audio_item=sample_audio_item))

        assert transition.effects == ()

    def test_multiple_main_artists_joined(self):
        item = AudioItem(
            track_id=T1,
            name="Collab",
            artists=(ArtistWithRole(name="A"), ArtistWithRole(name="B")),
        )

        state = PlaybackStateReducer().apply(PlaybackState(), TrackChanged(audio_item=item)).state

        assert state.artist == "A, B"
        assert state.composer == ""

    def test_episode_uses_show_as_album(self):
        item = AudioItem(
            track_id=SpotifyId("episode", TRACK_B),
            name="Episode 12",
            kind=AudioItemKind.EPISODE,
            show_name="The Show",
        )

        state = PlaybackStateReducer().apply(PlaybackState(), TrackChanged(audio_item=item)).state

        assert state.album == "The Show"


# =============================================================================
# Side Effects
# =============================================================================


class TestSideEffects:
    """Tests for preload and pause-on-end effects."""

    def test_time_to_preload_requests_preload(self):
        transition = PlaybackStateReducer().apply(
            PlaybackState(), TimeToPreloadNextTrack(track_id=T1)
        )

        assert transition.effects == (PreloadNext(current=T1),)

    def test_preload_can_be_disabled(self):
        transition = PlaybackStateReducer(preload_next_track=False).apply(
            PlaybackState(), TimeToPreloadNextTrack(track_id=T1)
        )

        assert transition.effects == ()

    def test_end_of_track_pauses_engine(self):
        transition = PlaybackStateReducer().apply(PlaybackState(), EndOfTrack(track_id=T1))

        assert transition.effects == (PauseEngine(),)

    def test_pause_on_end_can_be_disabled(self):
        transition = PlaybackStateReducer(pause_on_end_of_track=False).apply(
            PlaybackState(), EndOfTrack(track_id=T1)
        )

        assert transition.effects == ()


# =============================================================================
# Observational and Unknown Events
# =============================================================================


class TestPassiveEvents:
    """Tests for events that never change state."""

    @pytest.mark.parametrize(
        "event",
        [
            Preloading(track_id=T2),
            VolumeChanged(volume=32768),
            SessionConnected(connection_id="c1", user_name="alice"),
            Unavailable(track_id=T1),
        ],
    )
    def test_observational_events_leave_state(self, event):
        state = PlaybackState(track_id=T1, is_playing=True, position_ms=10)

        transition = PlaybackStateReducer().apply(state, event)

        assert transition.handled is True
        assert transition.state is state
        assert transition.effects == ()

    def test_unknown_event_is_unhandled(self):
        state = PlaybackState()

        transition = PlaybackStateReducer().apply(state, UnknownEvent())

        assert transition.handled is False
        assert transition.state is state

    def test_table_covers_every_known_event(self):
        from taan_player.domain.playback import events as events_module

        known = {
            obj
            for obj in vars(events_module).values()
            if isinstance(obj, type) and issubclass(obj, PlayerEvent) and obj is not PlayerEvent
        }

        assert known <= PlaybackStateReducer().handled_event_types()


# =============================================================================
# Sequence Properties
# =============================================================================


class TestSequenceProperties:
    """Properties that hold for any event sequence."""

    def _random_events(self, rng: random.Random, length: int) -> list[PlayerEvent]:
        factories = [
            lambda: Loading(track_id=T1, position_ms=rng.randint(0, 5000)),
            lambda: Playing(track_id=T1, position_ms=rng.randint(0, 5000)),
            lambda: Paused(track_id=T1, position_ms=rng.randint(0, 5000)),
            lambda: EndOfTrack(track_id=T1),
            lambda: Stopped(track_id=T1),
            lambda: PositionChanged(track_id=T1, position_ms=rng.randint(0, 5000)),
            lambda: Seeked(track_id=T1, position_ms=rng.randint(0, 5000)),
            lambda: VolumeChanged(volume=rng.randint(0, 65535)),
            lambda: Unavailable(track_id=T2),
        ]
        return [rng.choice(factories)() for _ in range(length)]

    @pytest.mark.parametrize("seed", range(25))
    def test_is_playing_follows_last_play_pause_event(self, seed):
        """is_playing is true iff the last Playing/Paused/EndOfTrack/Stopped was Playing.

        Loading is left out of the deciding events on purpose: it never changes
        the play/pause flag.
        """
        rng = random.Random(seed)
        events = self._random_events(rng, rng.randint(1, 40))

        state = _run(PlaybackStateReducer(), events)

        deciding = [
            e for e in events if isinstance(e, Playing | Paused | EndOfTrack | Stopped)
        ]
        expected = bool(deciding) and isinstance(deciding[-1], Playing)
        assert state.is_playing is expected

    @pytest.mark.parametrize("seed", range(25))
    def test_end_of_track_always_resets(self, seed):
        """EndOfTrack yields position 0 and not playing whatever came before."""
        rng = random.Random(seed)
        events = self._random_events(rng, rng.randint(0, 30)) + [EndOfTrack(track_id=T1)]

        state = _run(PlaybackStateReducer(), events)

        assert state.position_ms == 0
        assert state.is_playing is False

    def test_full_track_scenario(self, sample_audio_item):
        """TrackChanged, Loading, Playing, Paused, EndOfTrack ends idle at zero."""
        events = [
            TrackChanged(audio_item=sample_audio_item),
            Loading(track_id=T1, position_ms=0),
            Playing(track_id=T1, position_ms=1000),
            Paused(track_id=T1, position_ms=1000),
            EndOfTrack(track_id=T1),
        ]

        state = _run(PlaybackStateReducer(), events)

        assert state.track_id is None
        assert state.is_playing is False
        assert state.position_ms == 0


# =============================================================================
# Play Context
# =============================================================================


class TestPlayContext:
    """Tests for next-track resolution."""

    def test_next_after(self):
        context = PlayContext([T1, T2])

        assert context.next_after(T1) == T2
        assert context.next_after(T2) is None

    def test_unknown_track_has_no_next(self):
        assert PlayContext([T1]).next_after(T2) is None

    def test_non_playable_ids_are_dropped(self):
        playlist = SpotifyId("playlist", TRACK_B)

        assert PlayContext([T1, playlist]).tracks == (T1,)

    def test_starting_at_keeps_listing_when_track_is_in_it(self):
        listing = PlayContext([T1, T2])

        assert listing.starting_at(T1) is listing
        assert listing.starting_at(SpotifyId("track", "0VjIjW4GlUZAMYd2vXMi3b")).tracks == (
            SpotifyId("track", "0VjIjW4GlUZAMYd2vXMi3b"),
        )
