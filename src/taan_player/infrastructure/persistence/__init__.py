"""SQLite persistence for the credential cache."""

from taan_player.infrastructure.persistence.credential_store import SQLiteCredentialStore
from taan_player.infrastructure.persistence.database import Database

__all__ = ["Database", "SQLiteCredentialStore"]
