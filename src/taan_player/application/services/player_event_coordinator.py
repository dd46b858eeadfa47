"""Player Event Coordinator - folds the engine's event stream into a UI playback state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ...domain.playback.entities import PlaybackState
from ...domain.playback.events import PlayerEvent, TrackChanged, Unavailable
from ...domain.playback.services import (
    FetchCoverArt,
    PauseEngine,
    PlaybackStateReducer,
    PreloadNext,
    SideEffect,
)
from ...domain.shared.messages import LogTemplates
from ..bridge import PlaybackStateChanged

if TYPE_CHECKING:
    from ...domain.playback.value_objects import SpotifyId
    from ..bridge import UIBridge
    from ..interfaces.cover_art import CoverArtFetcher
    from ..interfaces.playback_engine import PlaybackEngine

logger = logging.getLogger(__name__)

NextTrackResolver = Callable[["SpotifyId"], "SpotifyId | None"]


class PlayerEventCoordinator:
    """Single consumer of the engine's event stream.

    Events are applied strictly in arrival order and never awaited on, so a
    slow cover download cannot hold back the next event. Cover art is fetched
    in its own task and only applied if no newer track has started meanwhile.
    """

    def __init__(
        self,
        *,
        engine: PlaybackEngine,
        bridge: UIBridge,
        reducer: PlaybackStateReducer | None = None,
        cover_fetcher: CoverArtFetcher | None = None,
        next_track_resolver: NextTrackResolver | None = None,
    ) -> None:
        self._engine = engine
        self._bridge = bridge
        self._reducer = reducer or PlaybackStateReducer()
        self._cover_fetcher = cover_fetcher
        self._next_track_resolver = next_track_resolver

        self._state = PlaybackState()
        self._cover_generation = 0
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def pending_cover_fetches(self) -> int:
        return len(self._pending)

    def set_next_track_resolver(self, resolver: NextTrackResolver | None) -> None:
        self._next_track_resolver = resolver

    async def run(self) -> None:
        """Consume engine events until the stream ends."""
        logger.info(LogTemplates.EVENT_LOOP_STARTED)
        async for event in self._engine.events():
            self.handle(event)
        logger.info(LogTemplates.EVENT_LOOP_ENDED)

    def handle(self, event: PlayerEvent) -> None:
        """Apply one event. Failures are logged and never stop the loop."""
        try:
            self._handle(event)
        except Exception:
            logger.exception(LogTemplates.EVENT_HANDLER_FAILED, type(event).__name__)

    async def aclose(self) -> None:
        """Cancel cover fetches still in flight."""
        tasks = list(self._pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._pending.clear()

    # === Internals ===

    def _handle(self, event: PlayerEvent) -> None:
        event_name = type(event).__name__
        logger.debug(LogTemplates.EVENT_RECEIVED, event_name)

        transition = self._reducer.apply(self._state, event)
        if not transition.handled:
            logger.info(LogTemplates.EVENT_UNHANDLED, event_name)
            return

        if isinstance(event, TrackChanged):
            self._cover_generation += 1
            logger.info(
                LogTemplates.TRACK_CHANGED, event.audio_item.name, event.audio_item.track_id
            )
        elif isinstance(event, Unavailable):
            logger.warning(LogTemplates.TRACK_UNAVAILABLE, event.track_id)
        elif transition.state == self._state and not transition.effects:
            logger.debug(LogTemplates.EVENT_OBSERVED, event_name, event)

        if transition.state != self._state:
            self._state = transition.state
            self._publish()

        for effect in transition.effects:
            self._perform(effect)

    def _perform(self, effect: SideEffect) -> None:
        if isinstance(effect, FetchCoverArt):
            self._spawn_cover_fetch(effect)
        elif isinstance(effect, PreloadNext):
            self._preload_after(effect.current)
        elif isinstance(effect, PauseEngine):
            try:
                self._engine.pause()
            except Exception as exc:
                logger.warning(LogTemplates.PAUSE_ON_END_FAILED, exc)

    def _preload_after(self, current: SpotifyId) -> None:
        if self._next_track_resolver is None:
            next_track: SpotifyId | None = current
        else:
            next_track = self._next_track_resolver(current)

        if next_track is None:
            logger.debug(LogTemplates.PRELOAD_NOTHING_NEXT, current)
            return

        logger.debug(LogTemplates.PRELOAD_REQUESTED, next_track)
        try:
            self._engine.preload(next_track)
        except Exception as exc:
            logger.warning(LogTemplates.PRELOAD_FAILED, next_track, exc)

    def _spawn_cover_fetch(self, effect: FetchCoverArt) -> None:
        if self._cover_fetcher is None:
            return
        task = asyncio.create_task(
            self._fetch_cover(effect, self._cover_generation),
            name=f"cover-art-{effect.track_id.id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _fetch_cover(self, effect: FetchCoverArt, generation: int) -> None:
        assert self._cover_fetcher is not None
        logger.debug(LogTemplates.COVER_FETCH_STARTED, effect.url)
        try:
            cover = await self._cover_fetcher.fetch(effect.url)
        except Exception as exc:
            logger.warning(LogTemplates.COVER_FETCH_FAILED, exc)
            return

        if generation != self._cover_generation:
            logger.debug(LogTemplates.COVER_STALE, effect.track_id)
            return

        self._state = self._state.model_copy(update={"cover_art": cover})
        self._publish()

    def _publish(self) -> None:
        try:
            self._bridge.publish(PlaybackStateChanged(state=self._state))
        except Exception:
            logger.exception(LogTemplates.STATE_PUBLISH_FAILED)
