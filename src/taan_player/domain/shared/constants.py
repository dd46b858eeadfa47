"""Centralized constants for the streaming service, web API, and local storage."""

from __future__ import annotations


class SpotifyConstants:
    """Identifiers and endpoints of the streaming service."""

    CLIENT_ID = "65b708073fc0480ea92a077233ca87bd"
    REDIRECT_URI = "http://127.0.0.1:8898/login"
    API_BASE_URL = "https://api.spotify.com/v1"
    URI_SCHEME = "spotify"
    OPEN_URL_HOST = "open.spotify.com"
    ID_LENGTH = 22

    OAUTH_SCOPES: tuple[str, ...] = (
        "playlist-modify",
        "playlist-modify-private",
        "playlist-modify-public",
        "playlist-read",
        "playlist-read-collaborative",
        "playlist-read-private",
        "streaming",
        "user-follow-modify",
        "user-follow-read",
        "user-library-modify",
        "user-library-read",
        "user-modify",
        "user-modify-playback-state",
        "user-modify-private",
        "user-personalized",
        "user-read-currently-playing",
        "user-read-email",
        "user-read-play-history",
        "user-read-playback-position",
        "user-read-playback-state",
        "user-read-private",
        "user-read-recently-played",
        "user-top-read",
    )


class WebApiPaths:
    """Relative web API endpoints."""

    CURRENT_USER = "/me"
    CURRENT_USER_PLAYLISTS = "/me/playlists"
    PLAYLIST_ITEMS = "/playlists/{playlist_id}/tracks"
    SAVED_TRACKS = "/me/tracks"


class HttpHeaders:
    AUTHORIZATION = "Authorization"
    RETRY_AFTER = "Retry-After"
    ACCEPT = "Accept"


class HttpStatus:
    UNAUTHORIZED = 401
    TOO_MANY_REQUESTS = 429


class DatabaseTables:
    CREDENTIALS = "credentials"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
