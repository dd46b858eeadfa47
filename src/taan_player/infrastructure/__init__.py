"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite credential cache)
- Web API (httpx REST client)
- Images (httpx cover art fetcher)
"""

from taan_player.infrastructure.images.cover_art import HttpCoverArtFetcher
from taan_player.infrastructure.persistence.credential_store import SQLiteCredentialStore
from taan_player.infrastructure.persistence.database import Database
from taan_player.infrastructure.web_api.client import HttpWebApiClient

__all__ = [
    "Database",
    "HttpCoverArtFetcher",
    "HttpWebApiClient",
    "SQLiteCredentialStore",
]
