"""Entry points for hosting the playback session coordinator inside a UI."""

from __future__ import annotations

import json
import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING

from taan_player.domain.shared.exceptions import FatalError
from taan_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from taan_player.application.interfaces.cover_art import ImageDecoder
    from taan_player.application.interfaces.interactive_login import InteractiveLogin
    from taan_player.application.interfaces.playback_engine import PlaybackEngine
    from taan_player.application.interfaces.streaming_session import StreamingSession
    from taan_player.config.container import Container
    from taan_player.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


async def start(
    *,
    streaming_session: StreamingSession,
    playback_engine: PlaybackEngine,
    interactive_login: InteractiveLogin,
    image_decoder: ImageDecoder | None = None,
    settings: Settings | None = None,
) -> Container:
    """Build the container, open the credential cache and start the background tasks.

    A credential cache that cannot be opened is reported to the UI and the
    player still starts, logged out.

    The caller owns the returned container and must ``await container.shutdown()``.
    """
    from taan_player.config.container import create_container
    from taan_player.config.settings import get_settings

    settings = settings or get_settings()
    container = create_container(
        settings,
        streaming_session=streaming_session,
        playback_engine=playback_engine,
        interactive_login=interactive_login,
        image_decoder=image_decoder,
    )
    cache_error: FatalError | None = None
    try:
        await container.initialize()
    except FatalError as exc:
        cache_error = exc
    await container.application.start(cache_error=cache_error)
    return container


async def run(
    *,
    streaming_session: StreamingSession,
    playback_engine: PlaybackEngine,
    interactive_login: InteractiveLogin,
    image_decoder: ImageDecoder | None = None,
    settings: Settings | None = None,
) -> None:
    """Run until the playback engine's event stream ends."""
    from taan_player.config.settings import get_settings

    settings = settings or get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    container = await start(
        streaming_session=streaming_session,
        playback_engine=playback_engine,
        interactive_login=interactive_login,
        image_decoder=image_decoder,
        settings=settings,
    )
    try:
        await container.application.wait_for_player()
        logger.info(LogTemplates.EVENT_LOOP_ENDED)
    finally:
        await container.shutdown()
