"""Port interface for the on-disk credential cache."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.auth.entities import Credentials


class CredentialStore(ABC):
    """Holds previously saved authentication material. No logic of its own."""

    @abstractmethod
    async def load(self) -> "Credentials | None":
        """Return the cached credentials, or None when nothing is cached."""
        ...

    @abstractmethod
    async def save(self, credentials: "Credentials") -> None:
        """Replace the cached credentials."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Forget any cached credentials."""
        ...
