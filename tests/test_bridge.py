"""
Unit Tests for the UI Bridge and Session Context

Tests for:
- Command submission from the loop and from other threads
- Update publishing and draining in order
- Command and update payload validation
- Token and session swaps in SessionContext
"""

import asyncio
from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import TRACK_A
from taan_player.application.bridge import (
    AuthStateChanged,
    ErrorRaised,
    FetchPlaylists,
    Pause,
    Play,
    PlayTrack,
    Seek,
    UIBridge,
)
from taan_player.application.context import SessionContext
from taan_player.domain.auth.entities import BearerToken, Session
from taan_player.domain.auth.value_objects import AuthState
from taan_player.domain.playback.value_objects import SpotifyId
from taan_player.domain.shared.datetime_utils import utcnow


class TestCommands:
    """Tests for the inbound channel."""

    @pytest.mark.asyncio
    async def test_commands_arrive_in_order(self):
        bridge = UIBridge()

        bridge.submit(Play())
        await bridge.send(Pause())

        assert await bridge.next_command() == Play()
        assert await bridge.next_command() == Pause()

    @pytest.mark.asyncio
    async def test_submit_threadsafe_requires_bound_loop(self):
        bridge = UIBridge()

        with pytest.raises(RuntimeError, match="not bound"):
            bridge.submit_threadsafe(Play())

    @pytest.mark.asyncio
    async def test_submit_threadsafe_from_worker_thread(self):
        bridge = UIBridge()
        bridge.bind_loop(asyncio.get_running_loop())

        await asyncio.to_thread(bridge.submit_threadsafe, Seek(position_ms=1500))
        command = await asyncio.wait_for(bridge.next_command(), timeout=1)

        assert command == Seek(position_ms=1500)

    def test_play_track_accepts_uri(self):
        command = PlayTrack(track_id=f"spotify:track:{TRACK_A}")

        assert command.track_id == SpotifyId("track", TRACK_A)

    @pytest.mark.parametrize(
        "build",
        [
            lambda: Seek(position_ms=-1),
            lambda: FetchPlaylists(limit=0),
            lambda: FetchPlaylists(limit=51),
            lambda: FetchPlaylists(offset=-10),
            lambda: PlayTrack(track_id="nope"),
        ],
    )
    def test_invalid_commands_rejected(self, build):
        with pytest.raises(ValidationError):
            build()


class TestUpdates:
    """Tests for the outbound channel."""

    @pytest.mark.asyncio
    async def test_drain_returns_everything_published(self):
        bridge = UIBridge()
        bridge.publish(AuthStateChanged(state=AuthState.LOADING))
        bridge.publish(ErrorRaised(message="boom"))

        drained = bridge.drain_updates()

        assert drained == [AuthStateChanged(state=AuthState.LOADING), ErrorRaised(message="boom")]
        assert bridge.drain_updates() == []

    @pytest.mark.asyncio
    async def test_next_update_waits(self):
        bridge = UIBridge()
        waiter = asyncio.create_task(bridge.next_update())
        await asyncio.sleep(0)
        assert not waiter.done()

        bridge.publish(ErrorRaised(message="late"))

        assert await asyncio.wait_for(waiter, timeout=1) == ErrorRaised(message="late")

    def test_updates_serialize_for_ui(self):
        update = AuthStateChanged(state=AuthState.LOGGED_IN, username="alice")

        assert update.model_dump(mode="json") == {
            "update": "AuthStateChanged",
            "state": "logged_in",
            "username": "alice",
        }


class TestSessionContext:
    """Tests for the shared session and token holder."""

    def test_empty(self):
        ctx = SessionContext()

        assert ctx.session is None
        assert ctx.token is None
        assert ctx.has_live_session is False
        assert ctx.token_is_usable() is False

    def test_token_swap(self):
        ctx = SessionContext()
        first = BearerToken.from_expires_in("one", 3600)
        second = BearerToken.from_expires_in("two", 3600)

        ctx.install_token(first)
        ctx.install_token(second)

        assert ctx.token is second

    def test_token_usable_respects_leeway(self):
        ctx = SessionContext()
        ctx.install_token(BearerToken.from_expires_in("tok", 30))

        assert ctx.token_is_usable() is True
        assert ctx.token_is_usable(leeway_seconds=60) is False
        assert ctx.token_is_usable(now=utcnow() + timedelta(minutes=5)) is False

    def test_closed_session_is_not_live(self):
        ctx = SessionContext()
        ctx.bind_session(Session(username="alice").closed())

        assert ctx.has_live_session is False

    def test_clear(self):
        ctx = SessionContext()
        ctx.bind_session(Session(username="alice"))
        ctx.install_token(BearerToken.from_expires_in("tok", 3600))

        ctx.clear()

        assert ctx.session is None
        assert ctx.token is None
