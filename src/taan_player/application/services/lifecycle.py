"""Player application lifecycle - owns the long-lived coordinator tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import DomainError, FatalError, UnauthenticatedError
from ...domain.shared.messages import LogTemplates
from ..bridge import AuthStateChanged, ErrorRaised

if TYPE_CHECKING:
    from ...domain.auth.value_objects import AuthState
    from ..bridge import UIBridge
    from .auth_coordinator import AuthCoordinator
    from .command_dispatcher import CommandDispatcher
    from .player_event_coordinator import PlayerEventCoordinator

logger = logging.getLogger(__name__)


class PlayerApplication:
    """Starts and stops the three background tasks.

    - session bring-up from cached credentials
    - the player event loop
    - the UI command dispatcher
    """

    SESSION_TASK = "session-bringup"
    EVENTS_TASK = "player-events"
    COMMANDS_TASK = "ui-commands"

    def __init__(
        self,
        *,
        bridge: UIBridge,
        auth: AuthCoordinator,
        event_coordinator: PlayerEventCoordinator,
        dispatcher: CommandDispatcher,
        environment: str = "development",
    ) -> None:
        self._bridge = bridge
        self._auth = auth
        self._events = event_coordinator
        self._dispatcher = dispatcher
        self._environment = environment
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def task(self, name: str) -> asyncio.Task[None] | None:
        return self._tasks.get(name)

    async def start(self, *, cache_error: FatalError | None = None) -> None:
        """Spawn the background tasks.

        Args:
            cache_error: Failure from opening the credential cache. Bring-up
                reports it and ends LOGGED_OUT, the other tasks still run.
        """
        if self.is_running:
            return
        logger.info(LogTemplates.APP_STARTING, self._environment)

        self._bridge.bind_loop(asyncio.get_running_loop())
        self._auth.set_state_listener(self._on_auth_state)
        self._bridge.publish(AuthStateChanged(state=self._auth.state))

        self._tasks = {
            self.SESSION_TASK: asyncio.create_task(
                self._bring_up(cache_error), name=self.SESSION_TASK
            ),
            self.EVENTS_TASK: asyncio.create_task(self._run_events(), name=self.EVENTS_TASK),
            self.COMMANDS_TASK: asyncio.create_task(self._dispatcher.run(), name=self.COMMANDS_TASK),
        }
        for task in self._tasks.values():
            task.add_done_callback(self._on_task_done)
        logger.info(LogTemplates.APP_STARTED)

    async def wait_for_player(self) -> None:
        """Return once the engine's event stream has ended."""
        task = self._tasks.get(self.EVENTS_TASK)
        if task is not None:
            await asyncio.shield(task)

    async def stop(self) -> None:
        logger.info(LogTemplates.APP_STOPPING)
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

        await self._events.aclose()
        await self._dispatcher.aclose()
        self._auth.set_state_listener(None)
        logger.info(LogTemplates.APP_STOPPED)

    # === Tasks ===

    async def _bring_up(self, cache_error: FatalError | None = None) -> None:
        if cache_error is not None:
            self._auth.bring_up_failed(cache_error)
            self._report_fatal(cache_error)
            return

        try:
            await self._auth.init_from_cache()
        except UnauthenticatedError:
            # Already logged and reported as LOGGED_OUT by the coordinator.
            return
        except FatalError as exc:
            self._report_fatal(exc)
            return

        try:
            await self._dispatcher.load_user_profile()
        except DomainError as exc:
            logger.warning(LogTemplates.COMMAND_FAILED, "load_user_profile", exc.message)
            self._bridge.publish(ErrorRaised(message=exc.message, code=exc.code))

    async def _run_events(self) -> None:
        try:
            await self._events.run()
        except FatalError as exc:
            self._report_fatal(exc)

    def _report_fatal(self, exc: FatalError) -> None:
        logger.error(LogTemplates.APP_TASK_FAILED, exc.subsystem or "unknown", exc)
        self._bridge.publish(ErrorRaised(message=exc.message, code=exc.code))

    def _on_auth_state(self, state: AuthState, username: str) -> None:
        self._bridge.publish(AuthStateChanged(state=state, username=username))

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(LogTemplates.APP_TASK_FAILED, task.get_name(), exc)
