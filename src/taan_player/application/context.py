"""Process-scoped session state shared by the auth coordinator and the web API client."""

from __future__ import annotations

import logging
from datetime import datetime

from taan_player.domain.auth.entities import BearerToken, Session

logger = logging.getLogger(__name__)


class SessionContext:
    """Holds the live Session and the current BearerToken.

    Owned by the application root and passed to its users explicitly. The
    auth coordinator is the only writer; any number of concurrent requests
    read. Both values are immutable models swapped by a single reference
    assignment, so a reader sees either the old or the new object.
    """

    def __init__(self) -> None:
        self._session: Session | None = None
        self._token: BearerToken | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def token(self) -> BearerToken | None:
        return self._token

    @property
    def has_live_session(self) -> bool:
        return self._session is not None and self._session.is_live

    def bind_session(self, session: Session) -> None:
        self._session = session

    def install_token(self, token: BearerToken) -> None:
        self._token = token

    def token_is_usable(self, now: datetime | None = None, leeway_seconds: float = 0.0) -> bool:
        token = self._token
        return token is not None and not token.is_expired(now, leeway_seconds)

    def clear(self) -> None:
        if self._session is not None:
            logger.debug("Dropping session %s", self._session.connection_id)
        self._session = None
        self._token = None
