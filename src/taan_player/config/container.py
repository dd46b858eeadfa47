"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the coordinators, adapters and the external
collaborators supplied by the host UI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.bridge import UIBridge
    from ..application.context import SessionContext
    from ..application.interfaces.cover_art import CoverArtFetcher, ImageDecoder
    from ..application.interfaces.credential_store import CredentialStore
    from ..application.interfaces.interactive_login import InteractiveLogin
    from ..application.interfaces.playback_engine import PlaybackEngine
    from ..application.interfaces.streaming_session import StreamingSession
    from ..application.interfaces.web_api import WebApiClient
    from ..application.services.auth_coordinator import AuthCoordinator
    from ..application.services.command_dispatcher import CommandDispatcher
    from ..application.services.lifecycle import PlayerApplication
    from ..application.services.player_event_coordinator import PlayerEventCoordinator
    from ..domain.playback.services import PlaybackStateReducer
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The streaming session, playback engine and interactive login are owned
    by the host and passed in. Everything else is lazily created on first
    access.
    """

    settings: Settings
    streaming_session: StreamingSession | None = None
    playback_engine: PlaybackEngine | None = None
    interactive_login: InteractiveLogin | None = None
    image_decoder: ImageDecoder | None = None

    # Persistence layer
    _database: Database | None = None
    _credential_store: CredentialStore | None = None

    # Shared state and transport
    _session_context: SessionContext | None = None
    _http_client: httpx.AsyncClient | None = None
    _web_api: WebApiClient | None = None
    _cover_fetcher: CoverArtFetcher | None = None
    _bridge: UIBridge | None = None

    # Coordinators
    _reducer: PlaybackStateReducer | None = None
    _auth_coordinator: AuthCoordinator | None = None
    _event_coordinator: PlayerEventCoordinator | None = None
    _dispatcher: CommandDispatcher | None = None
    _application: PlayerApplication | None = None

    def _require(self, name: str, value: Any) -> Any:
        if value is None:
            raise RuntimeError(ErrorMessages.COLLABORATOR_MISSING.format(name=name))
        return value

    # === Persistence ===

    @property
    def database(self) -> Database:
        """Get the credential database."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.cache.url, settings=self.settings.cache)
        return self._database

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            from ..infrastructure.persistence.credential_store import SQLiteCredentialStore

            self._credential_store = SQLiteCredentialStore(self.database)
        return self._credential_store

    # === Shared state and transport ===

    @property
    def session_context(self) -> SessionContext:
        if self._session_context is None:
            from ..application.context import SessionContext

            self._session_context = SessionContext()
        return self._session_context

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Shared httpx client; cover URLs are absolute so they bypass the base URL."""
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(
                base_url=self.settings.spotify.api_base_url,
                timeout=self.settings.spotify.request_timeout_s,
                follow_redirects=True,
            )
        return self._http_client

    @property
    def web_api(self) -> WebApiClient:
        if self._web_api is None:
            from ..infrastructure.web_api.client import HttpWebApiClient

            self._web_api = HttpWebApiClient(
                self.session_context,
                settings=self.settings.spotify,
                http_client=self.http_client,
            )
        return self._web_api

    @property
    def cover_fetcher(self) -> CoverArtFetcher:
        if self._cover_fetcher is None:
            from ..infrastructure.images.cover_art import HttpCoverArtFetcher

            self._cover_fetcher = HttpCoverArtFetcher(
                decoder=self.image_decoder, http_client=self.http_client
            )
        return self._cover_fetcher

    @property
    def bridge(self) -> UIBridge:
        if self._bridge is None:
            from ..application.bridge import UIBridge

            self._bridge = UIBridge()
        return self._bridge

    # === Coordinators ===

    @property
    def reducer(self) -> PlaybackStateReducer:
        if self._reducer is None:
            from ..domain.playback.services import PlaybackStateReducer

            player = self.settings.player
            self._reducer = PlaybackStateReducer(
                pause_on_end_of_track=player.pause_on_end_of_track,
                preload_next_track=player.preload_next_track,
                fetch_cover_art=player.fetch_cover_art,
            )
        return self._reducer

    @property
    def auth_coordinator(self) -> AuthCoordinator:
        if self._auth_coordinator is None:
            from ..application.services.auth_coordinator import AuthCoordinator

            self._auth_coordinator = AuthCoordinator(
                context=self.session_context,
                streaming_session=self._require("streaming_session", self.streaming_session),
                credential_store=self.credential_store,
                interactive_login=self._require("interactive_login", self.interactive_login),
                settings=self.settings.retry,
            )
        return self._auth_coordinator

    @property
    def dispatcher(self) -> CommandDispatcher:
        if self._dispatcher is None:
            from ..application.services.command_dispatcher import CommandDispatcher

            self._dispatcher = CommandDispatcher(
                bridge=self.bridge,
                auth=self.auth_coordinator,
                engine=self._require("playback_engine", self.playback_engine),
                web_api=self.web_api,
                page_size=self.settings.spotify.page_size,
            )
        return self._dispatcher

    @property
    def event_coordinator(self) -> PlayerEventCoordinator:
        if self._event_coordinator is None:
            from ..application.services.player_event_coordinator import (
                PlayerEventCoordinator,
            )

            self._event_coordinator = PlayerEventCoordinator(
                engine=self._require("playback_engine", self.playback_engine),
                bridge=self.bridge,
                reducer=self.reducer,
                cover_fetcher=self.cover_fetcher if self.settings.player.fetch_cover_art else None,
                next_track_resolver=self.dispatcher.next_track,
            )
        return self._event_coordinator

    @property
    def application(self) -> PlayerApplication:
        if self._application is None:
            from ..application.services.lifecycle import PlayerApplication

            self._application = PlayerApplication(
                bridge=self.bridge,
                auth=self.auth_coordinator,
                event_coordinator=self.event_coordinator,
                dispatcher=self.dispatcher,
                environment=self.settings.environment,
            )
        return self._application

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._application is not None:
            try:
                await self._application.stop()
            except Exception as exc:
                logger.warning("Failed stopping player application: %r", exc)

        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

        if self._database is not None:
            await self._database.close()


def create_container(
    settings: Settings,
    *,
    streaming_session: StreamingSession | None = None,
    playback_engine: PlaybackEngine | None = None,
    interactive_login: InteractiveLogin | None = None,
    image_decoder: ImageDecoder | None = None,
) -> Container:
    """Create a new dependency injection container."""
    return Container(
        settings,
        streaming_session=streaming_session,
        playback_engine=playback_engine,
        interactive_login=interactive_login,
        image_decoder=image_decoder,
    )
