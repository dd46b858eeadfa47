"""
Unit Tests for Domain Models

Tests for:
- SpotifyId parsing from URIs, share links and bare ids
- Credentials and BearerToken invariants
- AudioItem display helpers
- Player event decoding
- Retry-After parsing and the attempt budget
"""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from conftest import PLAYLIST_ID, TRACK_A
from taan_player.application.services.backoff import AttemptBudget, parse_retry_after
from taan_player.domain.auth.entities import BearerToken, Credentials, Session
from taan_player.domain.auth.value_objects import AuthState, CredentialsKind
from taan_player.domain.playback.entities import ArtistWithRole, AudioItem, PlaybackState
from taan_player.domain.playback.events import (
    Playing,
    TrackChanged,
    VolumeChanged,
    parse_player_event,
)
from taan_player.domain.playback.value_objects import ArtistRole, SpotifyId
from taan_player.domain.shared.datetime_utils import UtcDateTime
from taan_player.domain.shared.exceptions import HttpStatusError

# =============================================================================
# SpotifyId
# =============================================================================


class TestSpotifyId:
    """Tests for identifier parsing and validation."""

    def test_from_uri(self):
        sid = SpotifyId.from_uri(f"spotify:track:{TRACK_A}")

        assert sid == SpotifyId("track", TRACK_A)
        assert str(sid) == f"spotify:track:{TRACK_A}"
        assert sid.is_playable

    def test_legacy_user_playlist_uri(self):
        sid = SpotifyId.from_uri(f"spotify:user:someone:playlist:{PLAYLIST_ID}")

        assert sid == SpotifyId("playlist", PLAYLIST_ID)
        assert not sid.is_playable

    @pytest.mark.parametrize(
        "url",
        [
            f"https://open.spotify.com/track/{TRACK_A}",
            f"https://open.spotify.com/track/{TRACK_A}?si=0123abcd",
            f"https://open.spotify.com/intl-de/track/{TRACK_A}",
        ],
    )
    def test_from_share_url(self, url):
        assert SpotifyId.parse(url) == SpotifyId("track", TRACK_A)

    def test_bare_id_uses_default_type(self):
        assert SpotifyId.parse(PLAYLIST_ID, default_type="playlist").item_type == "playlist"
        assert SpotifyId.parse(f"  {TRACK_A} ").item_type == "track"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "short",
            f"{TRACK_A}!",
            "spotify:track",
            f"spotify:podcast:{TRACK_A}",
            f"https://example.com/track/{TRACK_A}",
            "https://open.spotify.com/track",
        ],
    )
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            SpotifyId.parse(value)

    def test_episode_is_playable(self):
        assert SpotifyId("episode", TRACK_A).is_playable


# =============================================================================
# Auth Entities
# =============================================================================


class TestCredentials:
    """Tests for credential construction."""

    def test_kinds(self):
        assert Credentials.stored("blob").kind is CredentialsKind.STORED
        assert Credentials.with_access_token("tok").kind is CredentialsKind.ACCESS_TOKEN

    def test_empty_auth_data_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            Credentials.stored("")

    def test_frozen(self):
        creds = Credentials.stored("blob")

        with pytest.raises(ValidationError):
            creds.username = "mallory"


class TestBearerToken:
    """Tests for token expiry arithmetic."""

    NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_from_expires_in(self):
        token = BearerToken.from_expires_in("tok", 3600, ["streaming"], now=self.NOW)

        assert token.expires_at == self.NOW + timedelta(hours=1)
        assert token.has_scope("streaming")
        assert token.authorization_header == "Bearer tok"

    def test_expiry_with_leeway(self):
        token = BearerToken.from_expires_in("tok", 60, now=self.NOW)

        assert token.is_expired(self.NOW) is False
        assert token.is_expired(self.NOW, leeway_seconds=60) is True
        assert token.is_expired(self.NOW + timedelta(seconds=61)) is True

    def test_negative_lifetime_rejected(self):
        with pytest.raises(ValueError):
            BearerToken.from_expires_in("tok", -1, now=self.NOW)

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValidationError):
            BearerToken(access_token="tok", expires_at=datetime(2024, 1, 1))

    def test_token_not_in_repr(self):
        assert "secret-token" not in repr(BearerToken.from_expires_in("secret-token", 10))


class TestSessionAndState:
    def test_closed_copy(self):
        session = Session(username="alice")

        closed = session.closed()

        assert session.is_live is True
        assert closed.is_live is False
        assert closed.connection_id == session.connection_id

    def test_auth_state_helpers(self):
        assert AuthState.LOGGED_IN.is_logged_in
        assert AuthState.LOADING.is_busy
        assert AuthState.LOGGING_IN.is_busy
        assert not AuthState.LOGGED_OUT.is_busy

    def test_utc_datetime_round_trip(self):
        stamp = UtcDateTime.from_iso("2024-05-01T12:00:00Z")

        assert stamp.iso == "2024-05-01T12:00:00+00:00"
        with pytest.raises(ValueError):
            UtcDateTime(datetime(2024, 5, 1))


# =============================================================================
# Playback Entities and Events
# =============================================================================


class TestAudioItem:
    """Tests for display helpers."""

    def test_roles_split(self):
        item = AudioItem(
            track_id=SpotifyId("track", TRACK_A),
            name="Song",
            artists=(
                ArtistWithRole(name="Lead"),
                ArtistWithRole(name="Guest", role=ArtistRole.FEATURED_ARTIST),
                ArtistWithRole(name="Writer", role=ArtistRole.COMPOSER),
            ),
        )

        assert item.main_artist == "Lead"
        assert item.composer == "Writer"
        assert item.cover_url is None

    def test_cover_url_must_be_http(self):
        with pytest.raises(ValidationError):
            AudioItem.model_validate(
                {"track_id": TRACK_A, "name": "Song", "covers": [{"url": "file:///cover.png"}]}
            )

    def test_playback_state_serializes_track_uri(self):
        state = PlaybackState(track_id=SpotifyId("track", TRACK_A))

        assert state.model_dump(mode="json")["track_id"] == f"spotify:track:{TRACK_A}"


class TestPlayerEventDecoding:
    """Tests for the discriminated event union."""

    def test_decode_playing(self):
        event = parse_player_event(
            {"event_type": "Playing", "track_id": f"spotify:track:{TRACK_A}", "position_ms": 42}
        )

        assert isinstance(event, Playing)
        assert event.track_id == SpotifyId("track", TRACK_A)
        assert event.position_ms == 42

    def test_decode_track_changed(self):
        event = parse_player_event(
            {
                "event_type": "TrackChanged",
                "audio_item": {"track_id": TRACK_A, "name": "Song", "duration_ms": 1000},
            }
        )

        assert isinstance(event, TrackChanged)
        assert event.audio_item.name == "Song"

    def test_volume_out_of_range(self):
        with pytest.raises(ValidationError):
            VolumeChanged(volume=70000)

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_player_event({"event_type": "Teleported"})

    def test_negative_position_rejected(self):
        with pytest.raises(ValidationError):
            Playing(track_id=TRACK_A, position_ms=-1)


# =============================================================================
# Backoff
# =============================================================================


class TestParseRetryAfter:
    """Tests for Retry-After header parsing."""

    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({"Retry-After": "5"}, 5.0),
            ({"retry-after": "2.5"}, 2.5),
            ({"RETRY-AFTER": " 3 "}, 3.0),
            ({}, 0.0),
            (None, 0.0),
            ({"Retry-After": "soon"}, 0.0),
            ({"Retry-After": "-4"}, 0.0),
            ({"Retry-After": "nan"}, 0.0),
            ({"Retry-After": "inf"}, 0.0),
        ],
    )
    def test_parse(self, headers, expected):
        assert parse_retry_after(headers) == expected

    def test_cap(self):
        assert parse_retry_after({"Retry-After": "3600"}, cap=30) == 30

    def test_from_status_error_headers(self):
        exc = HttpStatusError(429, {"Retry-After": "7"})

        assert parse_retry_after(exc.headers) == 7.0
        assert exc.header("RETRY-AFTER") == "7"


class TestAttemptBudget:
    def test_bounded(self):
        budget = AttemptBudget(2)

        assert budget.consume() == 1
        assert not budget.exhausted
        budget.consume()
        assert budget.exhausted

    def test_unbounded(self):
        budget = AttemptBudget(None)
        for _ in range(1000):
            budget.consume()

        assert not budget.exhausted
