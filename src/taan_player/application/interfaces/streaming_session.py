"""
Streaming Session Interface

Port interface for the long-lived authenticated connection to the service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.auth.entities import BearerToken, Credentials


class StreamingSession(ABC):
    """Abstract interface for the streaming connection.

    Implementations should handle:
    - The service's connection handshake
    - Deriving short-lived web API tokens from the live connection
    """

    @abstractmethod
    async def connect(self, credentials: Credentials) -> None:
        """Authenticate and open the connection.

        Args:
            credentials: Cached or freshly obtained credentials.

        Raises:
            Exception: Any failure to authenticate or connect.
        """
        ...

    @abstractmethod
    async def exchange_token(self) -> BearerToken:
        """Exchange the live connection for a web API bearer token.

        Returns:
            A token with its expiry and granted scopes.
        """
        ...

    @property
    @abstractmethod
    def username(self) -> str:
        """Canonical username of the connected account, empty when disconnected."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection. Safe to call when already disconnected."""
        ...
