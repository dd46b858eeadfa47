"""UI bridge: an inbound command channel and an outbound state-update channel.

The UI toolkit only ever talks to the coordinators through these two
queues, so the coordinators stay framework-agnostic.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

from pydantic import BaseModel, Field

from taan_player.domain.auth.value_objects import AuthState
from taan_player.domain.library.entities import (
    PlaylistItem,
    PrivateUser,
    SavedTrack,
    SimplifiedPlaylist,
)
from taan_player.domain.playback.entities import PlaybackState
from taan_player.domain.playback.value_objects import SpotifyIdField
from taan_player.domain.shared.types import NonEmptyStr, NonNegativeInt, PageSize, PositionMs

logger = logging.getLogger(__name__)


# === Inbound commands ===


class UICommand(BaseModel):
    """Base class for commands issued by the UI."""

    model_config = {"frozen": True}


class Login(UICommand):
    command: Literal["Login"] = "Login"


class CancelLogin(UICommand):
    command: Literal["CancelLogin"] = "CancelLogin"


class Logout(UICommand):
    command: Literal["Logout"] = "Logout"


class Play(UICommand):
    command: Literal["Play"] = "Play"


class Pause(UICommand):
    command: Literal["Pause"] = "Pause"


class Seek(UICommand):
    command: Literal["Seek"] = "Seek"
    position_ms: PositionMs


class FetchPlaylists(UICommand):
    command: Literal["FetchPlaylists"] = "FetchPlaylists"
    limit: PageSize | None = None
    offset: NonNegativeInt = 0


class FetchPlaylist(UICommand):
    command: Literal["FetchPlaylist"] = "FetchPlaylist"
    # URI, share link or bare playlist id; parsed by the dispatcher.
    playlist_id: NonEmptyStr
    limit: PageSize | None = None
    offset: NonNegativeInt = 0


class FetchSavedTracks(UICommand):
    command: Literal["FetchSavedTracks"] = "FetchSavedTracks"
    limit: PageSize | None = None
    offset: NonNegativeInt = 0


class PlayTrack(UICommand):
    command: Literal["PlayTrack"] = "PlayTrack"
    track_id: SpotifyIdField


# === Outbound updates ===


class UIUpdate(BaseModel):
    """Base class for state snapshots pushed to the UI."""

    model_config = {"frozen": True}


class AuthStateChanged(UIUpdate):
    update: Literal["AuthStateChanged"] = "AuthStateChanged"
    state: AuthState
    username: str = ""


class PlaybackStateChanged(UIUpdate):
    update: Literal["PlaybackStateChanged"] = "PlaybackStateChanged"
    state: PlaybackState


class ErrorRaised(UIUpdate):
    update: Literal["ErrorRaised"] = "ErrorRaised"
    message: str
    code: str | None = None


class UserProfileLoaded(UIUpdate):
    update: Literal["UserProfileLoaded"] = "UserProfileLoaded"
    user: PrivateUser


class PlaylistsLoaded(UIUpdate):
    update: Literal["PlaylistsLoaded"] = "PlaylistsLoaded"
    playlists: list[SimplifiedPlaylist] = Field(default_factory=list)
    offset: NonNegativeInt = 0


class PlaylistItemsLoaded(UIUpdate):
    update: Literal["PlaylistItemsLoaded"] = "PlaylistItemsLoaded"
    playlist_id: str
    items: list[PlaylistItem] = Field(default_factory=list)
    offset: NonNegativeInt = 0


class SavedTracksLoaded(UIUpdate):
    update: Literal["SavedTracksLoaded"] = "SavedTracksLoaded"
    tracks: list[SavedTrack] = Field(default_factory=list)
    offset: NonNegativeInt = 0


# === Bridge ===


class UIBridge:
    """Pair of one-way channels between the UI and the coordinators."""

    def __init__(self) -> None:
        self._commands: asyncio.Queue[UICommand] = asyncio.Queue()
        self._updates: asyncio.Queue[UIUpdate] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Remember the loop that owns the queues, for thread-safe submission."""
        self._loop = loop

    # --- commands (UI -> coordinators) ---

    async def send(self, command: UICommand) -> None:
        await self._commands.put(command)

    def submit(self, command: UICommand) -> None:
        """Enqueue a command from a coroutine or callback on the owning loop."""
        self._commands.put_nowait(command)

    def submit_threadsafe(self, command: UICommand) -> None:
        """Enqueue a command from a UI thread outside the event loop."""
        if self._loop is None:
            raise RuntimeError("UIBridge is not bound to an event loop")
        self._loop.call_soon_threadsafe(self._commands.put_nowait, command)

    async def next_command(self) -> UICommand:
        return await self._commands.get()

    # --- updates (coordinators -> UI) ---

    def publish(self, update: UIUpdate) -> None:
        self._updates.put_nowait(update)
        logger.debug("Published %s", type(update).__name__)

    async def next_update(self) -> UIUpdate:
        return await self._updates.get()

    def drain_updates(self) -> list[UIUpdate]:
        """Return every update published so far without waiting."""
        drained: list[UIUpdate] = []
        while True:
            try:
                drained.append(self._updates.get_nowait())
            except asyncio.QueueEmpty:
                return drained
