"""Port interface for the out-of-band OAuth browser flow."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.auth.entities import Credentials


class InteractiveLogin(ABC):
    """Opens the browser login and waits for the user to finish it."""

    @abstractmethod
    async def get_credentials(self) -> "Credentials":
        """Return credentials once the user completes the flow.

        May take arbitrarily long. No progress is reported in between.

        Raises:
            Exception: The flow failed or was rejected.
        """
        ...
