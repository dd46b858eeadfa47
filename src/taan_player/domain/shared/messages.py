"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Identifier Validation Errors
    EMPTY_SPOTIFY_ID = "Spotify ID cannot be empty"
    INVALID_SPOTIFY_ID = "Invalid Spotify ID: {value}"
    INVALID_SPOTIFY_URI = "Invalid Spotify URI: {value}"
    UNSUPPORTED_ITEM_TYPE = "Unsupported Spotify item type: {item_type}"

    # Credential / Token Validation Errors
    EMPTY_ACCESS_TOKEN = "Access token cannot be empty"
    EMPTY_AUTH_DATA = "Credential auth data cannot be empty"
    NEGATIVE_EXPIRY = "Token expiry must not be negative"
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Authentication Errors
    NO_CACHED_CREDENTIALS = "No cached credentials available"
    SESSION_NOT_CONNECTED = "Streaming session is not connected"
    SESSION_CONNECT_FAILED = "Failed to connect streaming session: {error}"
    TOKEN_EXCHANGE_FAILED = "Failed to derive web API token: {error}"
    TOKEN_REFRESH_FAILED = "Failed to refresh client"
    NO_BEARER_TOKEN = "No web API token installed"
    OAUTH_FAILED = "Failed to authenticate: {error}"
    LOGIN_CANCELLED = "Login was cancelled"
    RETRIES_EXHAUSTED_UNAUTHORIZED = "Web API still unauthorized after {attempts} attempts"
    RETRIES_EXHAUSTED_RATE_LIMITED = "Web API still rate limited after {attempts} attempts"

    # Transport Errors
    HTTP_STATUS = "Web API request failed with HTTP {status}"
    REQUEST_FAILED = "Web API request failed: {error}"
    INVALID_RESPONSE = "Web API returned an unexpected payload: {error}"
    COVER_FETCH_FAILED = "Failed to fetch cover art from {url}: {error}"

    # Local Resource Errors
    CREDENTIAL_STORE_INIT_FAILED = "Failed to initialise credential store at {path}: {error}"
    CREDENTIAL_STORE_READ_FAILED = "Failed to read cached credentials: {error}"
    PLAYBACK_ENGINE_INIT_FAILED = "Failed to initialise playback engine: {error}"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_REDIRECT_URI = "Redirect URI must start with http:// or https://"

    # Container
    COLLABORATOR_MISSING = "{name} was not provided to the container"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting player application (environment=%s)"
    APP_STARTED = "Player application tasks started"
    APP_STOPPING = "Stopping player application"
    APP_STOPPED = "Player application stopped"
    APP_TASK_FAILED = "Background task %s failed: %r"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Credential database initialized at %s"
    DATABASE_CLOSED = "Credential database closed"

    # Credential Store
    CREDENTIALS_LOADED = "Loaded cached credentials for %s"
    CREDENTIALS_MISSING = "No cached credentials found"
    CREDENTIALS_SAVED = "Saved credentials for %s"
    CREDENTIALS_CLEARED = "Cleared cached credentials"
    CREDENTIALS_SAVE_FAILED = "Failed to save credentials: %r"
    CREDENTIALS_UNREADABLE = "Cached credentials could not be read: %s"

    # Authentication
    AUTH_STATE_CHANGED = "Auth state changed: %s -> %s"
    AUTH_LISTENER_FAILED = "Auth state listener failed"
    SESSION_CONNECTING = "Connecting streaming session"
    SESSION_CONNECTED = "Streaming session connected as %s (connection %s)"
    SESSION_DISCONNECTED = "Streaming session disconnected"
    SESSION_DISCONNECT_FAILED = "Failed to disconnect streaming session: %r"
    TOKEN_DERIVED = "Installed web API token expiring at %s (%d scopes)"
    TOKEN_EXPIRED_PREFLIGHT = "Web API token missing or expired, refreshing before request"
    TOKEN_REFRESH_ON_401 = "Web API returned 401, refreshing token (attempt %d)"
    TOKEN_REFRESH_FAILED = "Failed to refresh client: %s"
    RATE_LIMITED = "Rate limit hit, waiting for %s seconds (attempt %d)"
    REQUEST_FAILED_NO_RETRY = "Web API request failed with HTTP %s, not retrying"
    RETRIES_EXHAUSTED = "Giving up after %d attempts (last status %s)"
    LOGIN_STARTED = "Starting interactive login (attempt %d)"
    LOGIN_SUCCEEDED = "Successfully logged in as %s"
    LOGIN_FAILED = "Failed to login: %s"
    LOGIN_DISCARDED = "Discarding credentials from abandoned login attempt %d"
    LOGIN_CANCELLED = "Cancelled login attempt %d"
    AUTO_LOGIN_FAILED = "Auto login failed: %s"
    LOGIN_SUPERSEDED = "Login attempt %d was superseded while connecting, dropping its session"
    LOGGED_OUT = "Logged out"

    # Web API
    HTTP_REQUEST = "GET %s %s"
    HTTP_RESPONSE = "GET %s -> %d"

    # Player Events
    EVENT_LOOP_STARTED = "Player event loop started"
    EVENT_LOOP_ENDED = "Player event stream ended"
    EVENT_RECEIVED = "Player event received: %s"
    EVENT_UNHANDLED = "Ignoring unhandled player event: %s"
    EVENT_HANDLER_FAILED = "Error handling player event %s"
    EVENT_OBSERVED = "Player event %s: %s"
    TRACK_CHANGED = "Track changed to %s (%s)"
    TRACK_UNAVAILABLE = "Track %s is unavailable"
    PRELOAD_REQUESTED = "Preloading next track %s"
    PRELOAD_NOTHING_NEXT = "No next track to preload after %s"
    PRELOAD_FAILED = "Failed to preload %s: %r"
    PAUSE_ON_END_FAILED = "Failed to pause after end of track: %r"
    COVER_FETCH_STARTED = "Fetching cover art from %s"
    COVER_FETCH_FAILED = "Failed to get cover image: %s"
    COVER_STALE = "Dropping stale cover art for %s"
    STATE_PUBLISH_FAILED = "Failed to publish playback state"

    # Commands
    COMMAND_RECEIVED = "UI command received: %s"
    COMMAND_UNKNOWN = "Ignoring unknown UI command: %r"
    COMMAND_FAILED = "UI command %s failed: %s"
    DISPATCHER_STARTED = "Command dispatcher started"
    DISPATCHER_STOPPED = "Command dispatcher stopped"
    TRACK_LOADED = "Loaded track %s"
    ENGINE_COMMAND_FAILED = "Playback engine command %s failed: %r"
