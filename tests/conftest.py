import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from taan_player.application.interfaces.cover_art import CoverArtFetcher
from taan_player.application.interfaces.credential_store import CredentialStore
from taan_player.application.interfaces.interactive_login import InteractiveLogin
from taan_player.application.interfaces.playback_engine import PlaybackEngine
from taan_player.application.interfaces.streaming_session import StreamingSession
from taan_player.domain.auth.entities import BearerToken, Credentials
from taan_player.domain.playback.entities import CoverArt
from taan_player.domain.playback.events import PlayerEvent

TRACK_A = "4fnskJdNDDh27vBhsvXChn"
TRACK_B = "30aPCMAtkH6Cf5ejzY4cE4"
TRACK_C = "0VjIjW4GlUZAMYd2vXMi3b"
PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeStreamingSession(StreamingSession):
    """In-memory streaming session that hands out numbered tokens."""

    def __init__(self, username: str = "alice") -> None:
        self._username = username
        self._connected = False
        self.connect_calls: list[Credentials] = []
        self.exchange_calls = 0
        self.disconnect_calls = 0
        self.connect_error: Exception | None = None
        self.exchange_error: Exception | None = None
        self.token_lifetime_s = 3600.0

    async def connect(self, credentials: Credentials) -> None:
        self.connect_calls.append(credentials)
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True

    async def exchange_token(self) -> BearerToken:
        self.exchange_calls += 1
        if self.exchange_error is not None:
            raise self.exchange_error
        return BearerToken.from_expires_in(
            f"token-{self.exchange_calls}", self.token_lifetime_s, ("user-read-private",)
        )

    @property
    def username(self) -> str:
        return self._username if self._connected else ""

    def is_connected(self) -> bool:
        return self._connected

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False


class MemoryCredentialStore(CredentialStore):
    def __init__(self, credentials: Credentials | None = None) -> None:
        self.credentials = credentials
        self.saved: list[Credentials] = []
        self.clear_calls = 0

    async def load(self) -> Credentials | None:
        return self.credentials

    async def save(self, credentials: Credentials) -> None:
        self.saved.append(credentials)
        self.credentials = credentials

    async def clear(self) -> None:
        self.clear_calls += 1
        self.credentials = None


class ControlledLogin(InteractiveLogin):
    """Interactive login whose outcome the test decides.

    Each call to ``get_credentials`` waits on a fresh future, exposed in
    ``pending`` in call order.
    """

    def __init__(self) -> None:
        self.pending: list[asyncio.Future[Credentials]] = []
        self.started = asyncio.Event()

    async def get_credentials(self) -> Credentials:
        future: asyncio.Future[Credentials] = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        self.started.set()
        return await future

    def complete(self, credentials: Credentials, index: int = -1) -> None:
        self.pending[index].set_result(credentials)

    def fail(self, exc: Exception, index: int = -1) -> None:
        self.pending[index].set_exception(exc)


class RecordingEngine(PlaybackEngine):
    """Records commands and replays queued events until ``finish()``."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self._events: asyncio.Queue[PlayerEvent | None] = asyncio.Queue()
        self.fail_on: set[str] = set()

    def _record(self, name: str, *args) -> None:
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")
        self.calls.append((name, *args))

    def load(self, track_id, start_playing: bool = True, position_ms: int = 0) -> None:
        self._record("load", track_id, start_playing, position_ms)

    def play(self) -> None:
        self._record("play")

    def pause(self) -> None:
        self._record("pause")

    def seek(self, position_ms: int) -> None:
        self._record("seek", position_ms)

    def preload(self, track_id) -> None:
        self._record("preload", track_id)

    def emit(self, *events: PlayerEvent) -> None:
        for event in events:
            self._events.put_nowait(event)

    def finish(self) -> None:
        self._events.put_nowait(None)

    async def events(self) -> AsyncIterator[PlayerEvent]:
        while True:
            event = await self._events.get()
            if event is None:
                return
            yield event

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class GatedCoverFetcher(CoverArtFetcher):
    """Cover fetcher whose downloads complete only when released."""

    def __init__(self) -> None:
        self.requested: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}
        self.errors: dict[str, Exception] = {}

    def gate(self, url: str) -> asyncio.Event:
        return self._gates.setdefault(url, asyncio.Event())

    def release(self, url: str) -> None:
        self.gate(url).set()

    async def fetch(self, url: str) -> CoverArt:
        self.requested.append(url)
        await self.gate(url).wait()
        if url in self.errors:
            raise self.errors[url]
        return CoverArt(url=url, data=b"\x89PNG" + url.encode(), width=300, height=300)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


async def settle(rounds: int = 5) -> None:
    """Let spawned tasks run to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from taan_player.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def credential_store(in_memory_database):
    from taan_player.infrastructure.persistence.credential_store import SQLiteCredentialStore

    return SQLiteCredentialStore(in_memory_database)


# ============================================================================
# Auth Fixtures
# ============================================================================


@pytest.fixture
def stored_credentials():
    return Credentials.stored("cached-blob", username="alice")


@pytest.fixture
def session_context():
    from taan_player.application.context import SessionContext

    return SessionContext()


@pytest.fixture
def streaming_session():
    return FakeStreamingSession()


@pytest.fixture
def memory_store():
    return MemoryCredentialStore()


@pytest.fixture
def controlled_login():
    return ControlledLogin()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def retry_settings():
    from taan_player.config.settings import RetrySettings

    return RetrySettings()


@pytest.fixture
def auth(session_context, streaming_session, memory_store, controlled_login, retry_settings, recording_sleep):
    from taan_player.application.services.auth_coordinator import AuthCoordinator

    return AuthCoordinator(
        context=session_context,
        streaming_session=streaming_session,
        credential_store=memory_store,
        interactive_login=controlled_login,
        settings=retry_settings,
        sleep=recording_sleep,
    )


# ============================================================================
# Player Fixtures
# ============================================================================


@pytest.fixture
def bridge():
    from taan_player.application.bridge import UIBridge

    return UIBridge()


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def cover_fetcher():
    return GatedCoverFetcher()


@pytest.fixture
def sample_audio_item():
    from taan_player.domain.playback.entities import ArtistWithRole, AudioItem, CoverImage
    from taan_player.domain.playback.value_objects import ArtistRole, SpotifyId

    return AudioItem(
        track_id=SpotifyId("track", TRACK_A),
        name="Windowlicker",
        duration_ms=366_000,
        covers=(CoverImage(url="https://i.scdn.co/image/cover-a", width=640, height=640),),
        artists=(
            ArtistWithRole(name="Aphex Twin"),
            ArtistWithRole(name="Richard D. James", role=ArtistRole.COMPOSER),
        ),
        album="Windowlicker",
    )
