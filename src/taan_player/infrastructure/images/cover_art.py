"""Cover art download over httpx with a pluggable image decoder."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from taan_player.application.interfaces.cover_art import CoverArtFetcher, ImageDecoder
from taan_player.domain.playback.entities import CoverArt
from taan_player.domain.shared.exceptions import TransportError
from taan_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def raw_decoder(url: str) -> Callable[[bytes], CoverArt]:
    """Decoder that keeps the encoded bytes as-is, for UIs that decode themselves."""

    def decode(data: bytes) -> CoverArt:
        return CoverArt(url=url, data=data)

    return decode


class HttpCoverArtFetcher(CoverArtFetcher):
    def __init__(
        self,
        *,
        decoder: ImageDecoder | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._decoder = decoder
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> CoverArt:
        logger.debug(LogTemplates.COVER_FETCH_STARTED, url)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                ErrorMessages.COVER_FETCH_FAILED.format(url=url, error=exc),
                status=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(ErrorMessages.COVER_FETCH_FAILED.format(url=url, error=exc)) from exc

        decode = self._decoder or raw_decoder(url)
        cover = decode(response.content)
        if not cover.url:
            cover = cover.model_copy(update={"url": url})
        return cover

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
