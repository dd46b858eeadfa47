"""Command Dispatcher - routes UI commands to the auth coordinator, engine and web API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable
from typing import TYPE_CHECKING, Any

from ...domain.library.entities import FullTrack
from ...domain.playback.services import PlayContext
from ...domain.playback.value_objects import SpotifyId
from ...domain.shared.exceptions import DomainError, LoginCancelledError, ValidationError
from ...domain.shared.messages import LogTemplates
from ..bridge import (
    CancelLogin,
    ErrorRaised,
    FetchPlaylist,
    FetchPlaylists,
    FetchSavedTracks,
    Login,
    Logout,
    Pause,
    Play,
    PlaylistItemsLoaded,
    PlaylistsLoaded,
    PlayTrack,
    SavedTracksLoaded,
    Seek,
    UICommand,
    UserProfileLoaded,
)

if TYPE_CHECKING:
    from ...domain.library.entities import PrivateUser
    from ..bridge import UIBridge
    from ..interfaces.playback_engine import PlaybackEngine
    from ..interfaces.web_api import WebApiClient
    from .auth_coordinator import AuthCoordinator

logger = logging.getLogger(__name__)


def _playable_ids(tracks: Iterable[FullTrack | None]) -> list[SpotifyId]:
    ids: list[SpotifyId] = []
    for track in tracks:
        if track is None or not track.is_playable or track.id is None:
            continue
        try:
            ids.append(SpotifyId(item_type="track", id=track.id))
        except ValueError:
            logger.debug("Skipping track with malformed id %r", track.id)
    return ids


class CommandDispatcher:
    """Consumes UI commands one at a time.

    Anything that may wait on the network runs in its own task so the next
    command is picked up immediately. A failing command is reported to the UI
    as ``ErrorRaised`` and never stops the dispatcher.
    """

    def __init__(
        self,
        *,
        bridge: UIBridge,
        auth: AuthCoordinator,
        engine: PlaybackEngine,
        web_api: WebApiClient,
        page_size: int = 10,
    ) -> None:
        self._bridge = bridge
        self._auth = auth
        self._engine = engine
        self._web_api = web_api
        self._page_size = page_size

        # Tracks of the most recently loaded listing, and the one playback started from.
        self._listing = PlayContext()
        self._play_context = PlayContext()
        self._tasks: set[asyncio.Task[None]] = set()

        self._handlers: dict[type[UICommand], Callable[[Any], None]] = {
            Login: self._on_login,
            CancelLogin: self._on_cancel_login,
            Logout: self._on_logout,
            Play: self._on_play,
            Pause: self._on_pause,
            Seek: self._on_seek,
            FetchPlaylists: self._on_fetch_playlists,
            FetchPlaylist: self._on_fetch_playlist,
            FetchSavedTracks: self._on_fetch_saved_tracks,
            PlayTrack: self._on_play_track,
        }

    @property
    def play_context(self) -> PlayContext:
        return self._play_context

    def next_track(self, current: SpotifyId) -> SpotifyId | None:
        """Resolver handed to the player event coordinator for preloading."""
        return self._play_context.next_after(current)

    async def run(self) -> None:
        logger.info(LogTemplates.DISPATCHER_STARTED)
        try:
            while True:
                command = await self._bridge.next_command()
                self.dispatch(command)
        finally:
            logger.info(LogTemplates.DISPATCHER_STOPPED)

    def dispatch(self, command: UICommand) -> None:
        handler = self._handlers.get(type(command))
        if handler is None:
            logger.warning(LogTemplates.COMMAND_UNKNOWN, command)
            return

        logger.debug(LogTemplates.COMMAND_RECEIVED, type(command).__name__)
        try:
            handler(command)
        except Exception as exc:
            self._report(command, exc)

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def load_user_profile(self) -> PrivateUser:
        user = await self._auth.call_with_retry(self._web_api.current_user)
        self._bridge.publish(UserProfileLoaded(user=user))
        return user

    # === Task plumbing ===

    def _spawn(self, command: UICommand, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[None]:
        task = asyncio.create_task(self._guarded(command, coro), name=type(command).__name__)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guarded(self, command: UICommand, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            await coro
        except LoginCancelledError as exc:
            logger.info(LogTemplates.LOGIN_DISCARDED, exc.attempt)
        except Exception as exc:
            self._report(command, exc)

    def _report(self, command: UICommand, exc: Exception) -> None:
        name = type(command).__name__
        if isinstance(exc, DomainError):
            logger.warning(LogTemplates.COMMAND_FAILED, name, exc.message)
            self._bridge.publish(ErrorRaised(message=exc.message, code=exc.code))
        else:
            logger.exception(LogTemplates.COMMAND_FAILED, name, exc)
            self._bridge.publish(ErrorRaised(message=str(exc) or type(exc).__name__))

    # === Auth ===

    def _on_login(self, command: Login) -> None:
        self._spawn(command, self._login())

    async def _login(self) -> None:
        await self._auth.interactive_login()
        await self.load_user_profile()

    def _on_cancel_login(self, command: CancelLogin) -> None:
        self._auth.cancel_login()

    def _on_logout(self, command: Logout) -> None:
        self._listing = PlayContext()
        self._play_context = PlayContext()
        self._spawn(command, self._auth.logout())

    # === Engine ===

    def _on_play(self, command: Play) -> None:
        self._engine.play()

    def _on_pause(self, command: Pause) -> None:
        self._engine.pause()

    def _on_seek(self, command: Seek) -> None:
        self._engine.seek(command.position_ms)

    def _on_play_track(self, command: PlayTrack) -> None:
        track_id = command.track_id
        if not track_id.is_playable:
            raise ValidationError(f"{track_id} is not playable", field="track_id")
        self._engine.load(track_id, start_playing=True)
        self._play_context = self._listing.starting_at(track_id)
        logger.info(LogTemplates.TRACK_LOADED, track_id)

    # === Web API ===

    def _on_fetch_playlists(self, command: FetchPlaylists) -> None:
        self._spawn(command, self._fetch_playlists(command))

    async def _fetch_playlists(self, command: FetchPlaylists) -> None:
        limit = command.limit or self._page_size
        playlists = await self._auth.call_with_retry(
            lambda: self._web_api.current_user_playlists(limit, command.offset)
        )
        self._bridge.publish(PlaylistsLoaded(playlists=playlists, offset=command.offset))

    def _on_fetch_playlist(self, command: FetchPlaylist) -> None:
        try:
            playlist_id = SpotifyId.parse(command.playlist_id, default_type="playlist")
        except ValueError as exc:
            raise ValidationError(str(exc), field="playlist_id") from exc
        if playlist_id.item_type != "playlist":
            raise ValidationError(f"{playlist_id} is not a playlist", field="playlist_id")
        self._spawn(command, self._fetch_playlist(command, playlist_id))

    async def _fetch_playlist(self, command: FetchPlaylist, playlist_id: SpotifyId) -> None:
        limit = command.limit or self._page_size
        items = await self._auth.call_with_retry(
            lambda: self._web_api.playlist_items(playlist_id, limit, command.offset)
        )
        self._listing = PlayContext(_playable_ids(item.track for item in items))
        self._bridge.publish(
            PlaylistItemsLoaded(playlist_id=playlist_id.id, items=items, offset=command.offset)
        )

    def _on_fetch_saved_tracks(self, command: FetchSavedTracks) -> None:
        self._spawn(command, self._fetch_saved_tracks(command))

    async def _fetch_saved_tracks(self, command: FetchSavedTracks) -> None:
        limit = command.limit or self._page_size
        tracks = await self._auth.call_with_retry(
            lambda: self._web_api.saved_tracks(limit, command.offset)
        )
        self._listing = PlayContext(_playable_ids(saved.track for saved in tracks))
        self._bridge.publish(SavedTracksLoaded(tracks=tracks, offset=command.offset))
