"""Port interfaces for fetching and decoding cover art."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.playback.entities import CoverArt

ImageDecoder = Callable[[bytes], "CoverArt"]
"""Opaque bytes-to-pixels function supplied by the UI toolkit."""


class CoverArtFetcher(ABC):
    @abstractmethod
    async def fetch(self, url: str) -> "CoverArt":
        """Download and decode the image at ``url``."""
        ...
