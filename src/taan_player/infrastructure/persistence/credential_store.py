"""SQLite implementation of the credential store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite
from pydantic import SecretStr

from taan_player.application.interfaces.credential_store import CredentialStore
from taan_player.domain.auth.entities import Credentials
from taan_player.domain.auth.value_objects import CredentialsKind
from taan_player.domain.shared.constants import DatabaseTables
from taan_player.domain.shared.datetime_utils import UtcDateTime
from taan_player.domain.shared.exceptions import FatalError
from taan_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)

_TABLE = DatabaseTables.CREDENTIALS


class SQLiteCredentialStore(CredentialStore):
    """Keeps the one cached login in a single-row table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def load(self) -> Credentials | None:
        """Read the cached login.

        Raises:
            FatalError: The cache could not be read or holds a corrupt row.
        """
        try:
            row = await self._db.fetch_one(
                f"SELECT username, kind, auth_data FROM {_TABLE} WHERE id = 1"  # noqa: S608
            )
            if row is None:
                logger.debug(LogTemplates.CREDENTIALS_MISSING)
                return None

            credentials = Credentials(
                kind=CredentialsKind(row["kind"]),
                auth_data=SecretStr(row["auth_data"]),
                username=row["username"] or None,
            )
        except (OSError, aiosqlite.Error, ValueError) as exc:
            raise FatalError(
                ErrorMessages.CREDENTIAL_STORE_READ_FAILED.format(error=exc),
                subsystem="credential_store",
            ) from exc

        logger.info(LogTemplates.CREDENTIALS_LOADED, credentials.username or "<unknown>")
        return credentials

    async def save(self, credentials: Credentials) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {_TABLE} (id, username, kind, auth_data, saved_at)
            VALUES (1, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                username = excluded.username,
                kind = excluded.kind,
                auth_data = excluded.auth_data,
                saved_at = excluded.saved_at
            """,  # noqa: S608
            (
                credentials.username,
                credentials.kind.value,
                credentials.secret(),
                UtcDateTime.now().iso,
            ),
        )
        logger.info(LogTemplates.CREDENTIALS_SAVED, credentials.username or "<unknown>")

    async def clear(self) -> None:
        await self._db.execute(f"DELETE FROM {_TABLE}")  # noqa: S608
        logger.info(LogTemplates.CREDENTIALS_CLEARED)
