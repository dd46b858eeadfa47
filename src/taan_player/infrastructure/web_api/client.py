"""httpx-based client for the web API (profile, playlists, saved tracks)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taan_player.application.interfaces.web_api import WebApiClient
from taan_player.domain.library.entities import (
    PlaylistItem,
    PrivateUser,
    SavedTrack,
    SimplifiedPlaylist,
)
from taan_player.domain.shared.constants import HttpHeaders, SpotifyConstants, WebApiPaths
from taan_player.domain.shared.exceptions import (
    HttpStatusError,
    TransportError,
    UnauthenticatedError,
)
from taan_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from taan_player.application.context import SessionContext
    from taan_player.config.settings import SpotifySettings
    from taan_player.domain.auth.entities import BearerToken
    from taan_player.domain.playback.value_objects import SpotifyId

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _Page(BaseModel):
    """Paging envelope around list endpoints."""

    items: list[dict[str, Any]] = []
    total: int = 0
    offset: int = 0
    limit: int = 0
    next: str | None = None


class HttpWebApiClient(WebApiClient):
    """Stateful REST client.

    The bearer token is read from the shared ``SessionContext`` once per
    request. The client never retries; 401 and 429 surface as
    ``HttpStatusError`` for the auth coordinator to classify.
    """

    def __init__(
        self,
        context: SessionContext,
        *,
        settings: SpotifySettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._context = context
        base_url = settings.api_base_url if settings else SpotifyConstants.API_BASE_URL
        timeout = settings.request_timeout_s if settings else 10.0
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        if http_client is not None and not str(self._http.base_url):
            self._http.base_url = httpx.URL(base_url)

    def set_token(self, token: BearerToken) -> None:
        self._context.install_token(token)

    async def current_user(self) -> PrivateUser:
        payload = await self._get(WebApiPaths.CURRENT_USER)
        return self._parse(PrivateUser, payload)

    async def current_user_playlists(self, limit: int, offset: int = 0) -> list[SimplifiedPlaylist]:
        page = await self._get_page(WebApiPaths.CURRENT_USER_PLAYLISTS, limit, offset)
        return self._parse_items(SimplifiedPlaylist, page)

    async def playlist_items(
        self, playlist_id: SpotifyId, limit: int, offset: int = 0
    ) -> list[PlaylistItem]:
        path = WebApiPaths.PLAYLIST_ITEMS.format(playlist_id=playlist_id.id)
        page = await self._get_page(path, limit, offset)
        return self._parse_items(PlaylistItem, page)

    async def saved_tracks(self, limit: int, offset: int = 0) -> list[SavedTrack]:
        page = await self._get_page(WebApiPaths.SAVED_TRACKS, limit, offset)
        return self._parse_items(SavedTrack, page)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # === Internals ===

    async def _get_page(self, path: str, limit: int, offset: int) -> _Page:
        payload = await self._get(path, params={"limit": limit, "offset": offset})
        return self._parse(_Page, payload)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        token = self._context.token
        if token is None:
            raise UnauthenticatedError(ErrorMessages.NO_BEARER_TOKEN)

        headers = {
            HttpHeaders.AUTHORIZATION: token.authorization_header,
            HttpHeaders.ACCEPT: "application/json",
        }
        logger.debug(LogTemplates.HTTP_REQUEST, path, params or {})
        try:
            response = await self._http.get(path, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(ErrorMessages.REQUEST_FAILED.format(error=exc)) from exc

        logger.debug(LogTemplates.HTTP_RESPONSE, path, response.status_code)
        if response.status_code >= 400:
            raise HttpStatusError(response.status_code, dict(response.headers))

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                ErrorMessages.INVALID_RESPONSE.format(error=exc), status=response.status_code
            ) from exc

    @staticmethod
    def _parse(model: type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except PydanticValidationError as exc:
            raise TransportError(ErrorMessages.INVALID_RESPONSE.format(error=exc)) from exc

    @staticmethod
    def _parse_items(model: type[M], page: _Page) -> list[M]:
        try:
            return TypeAdapter(list[model]).validate_python(page.items)  # type: ignore[valid-type]
        except PydanticValidationError as exc:
            raise TransportError(ErrorMessages.INVALID_RESPONSE.format(error=exc)) from exc
