"""Port interface for the audio decode/output engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.playback.events import PlayerEvent
    from ...domain.playback.value_objects import SpotifyId


class PlaybackEngine(ABC):
    """Command surface plus an ordered event stream.

    Commands are fire-and-forget and may be sent from any task; the engine
    serializes them internally.
    """

    @abstractmethod
    def load(self, track_id: "SpotifyId", start_playing: bool = True, position_ms: int = 0) -> None:
        ...

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def seek(self, position_ms: int) -> None:
        ...

    @abstractmethod
    def preload(self, track_id: "SpotifyId") -> None:
        ...

    @abstractmethod
    def events(self) -> AsyncIterator["PlayerEvent"]:
        """Yield player events in order until the engine shuts down."""
        ...
