"""Auth Coordinator - session bring-up, token derivation and web API retry discipline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from ...domain.auth.entities import BearerToken, Credentials, Session
from ...domain.auth.value_objects import AuthState
from ...domain.shared.constants import HttpStatus
from ...domain.shared.exceptions import (
    FatalError,
    HttpStatusError,
    LoginCancelledError,
    RateLimitedError,
    TransportError,
    UnauthenticatedError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .backoff import AttemptBudget, parse_retry_after

if TYPE_CHECKING:
    from ...config.settings import RetrySettings
    from ..context import SessionContext
    from ..interfaces.credential_store import CredentialStore
    from ..interfaces.interactive_login import InteractiveLogin
    from ..interfaces.streaming_session import StreamingSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

AuthStateListener = Callable[[AuthState, str], None]
SleepFunc = Callable[[float], Awaitable[None]]


class AuthCoordinator:
    """Owns the streaming session and the web API token derived from it.

    Every web API call goes through ``call_with_retry``, which refreshes the
    token on 401 and honours ``Retry-After`` on 429. Only the calling task is
    suspended while waiting.
    """

    def __init__(
        self,
        *,
        context: SessionContext,
        streaming_session: StreamingSession,
        credential_store: CredentialStore,
        interactive_login: InteractiveLogin,
        settings: RetrySettings,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._context = context
        self._session = streaming_session
        self._store = credential_store
        self._login = interactive_login
        self._settings = settings
        self._sleep = sleep

        self._state = AuthState.LOADING
        self._listener: AuthStateListener | None = None

        # Bumped on every new login, cancel and logout. A login whose number
        # is no longer current must not store or connect its credentials.
        self._login_attempt = 0

    # === State ===

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def username(self) -> str:
        session = self._context.session
        return session.username if session is not None else ""

    @property
    def login_attempt(self) -> int:
        return self._login_attempt

    def set_state_listener(self, listener: AuthStateListener | None) -> None:
        self._listener = listener

    def _set_state(self, state: AuthState) -> None:
        if state is self._state:
            return
        previous, self._state = self._state, state
        logger.info(LogTemplates.AUTH_STATE_CHANGED, previous.name, state.name)
        if self._listener is None:
            return
        try:
            self._listener(state, self.username)
        except Exception:
            logger.exception(LogTemplates.AUTH_LISTENER_FAILED)

    # === Login flows ===

    async def init_from_cache(self) -> Session:
        """Connect with cached credentials.

        Raises:
            UnauthenticatedError: Nothing is cached, or the cache was rejected.
            FatalError: The credential cache could not be read.
        """
        try:
            credentials = await self._store.load()
        except FatalError as exc:
            self.bring_up_failed(exc)
            raise
        except Exception as exc:
            fatal = FatalError(
                ErrorMessages.CREDENTIAL_STORE_READ_FAILED.format(error=exc),
                subsystem="credential_store",
            )
            self.bring_up_failed(fatal)
            raise fatal from exc

        if credentials is None:
            logger.info(LogTemplates.CREDENTIALS_MISSING)
            self._set_state(AuthState.LOGGED_OUT)
            raise UnauthenticatedError(ErrorMessages.NO_CACHED_CREDENTIALS)

        try:
            session = await self.connect(credentials)
        except UnauthenticatedError as exc:
            logger.warning(LogTemplates.AUTO_LOGIN_FAILED, exc.message)
            self._set_state(AuthState.LOGGED_OUT)
            raise

        self._set_state(AuthState.LOGGED_IN)
        return session

    def bring_up_failed(self, exc: FatalError) -> None:
        """Leave LOADING when the credential cache is unusable."""
        logger.warning(LogTemplates.CREDENTIALS_UNREADABLE, exc.message)
        self._set_state(AuthState.LOGGED_OUT)

    async def interactive_login(self) -> Session:
        """Run the browser OAuth flow, then connect and cache the result.

        Raises:
            LoginCancelledError: The attempt was cancelled or superseded.
            UnauthenticatedError: The flow or the connection failed.
        """
        self._login_attempt += 1
        attempt = self._login_attempt
        logger.info(LogTemplates.LOGIN_STARTED, attempt)
        self._set_state(AuthState.LOGGING_IN)

        try:
            credentials = await self._login.get_credentials()
        except Exception as exc:
            if attempt != self._login_attempt:
                raise LoginCancelledError(attempt) from exc
            logger.warning(LogTemplates.LOGIN_FAILED, exc)
            self._set_state(AuthState.LOGGED_OUT)
            raise UnauthenticatedError(ErrorMessages.OAUTH_FAILED.format(error=exc)) from exc

        if attempt != self._login_attempt:
            logger.info(LogTemplates.LOGIN_DISCARDED, attempt)
            raise LoginCancelledError(attempt)

        try:
            session = await self.connect(credentials)
        except UnauthenticatedError as exc:
            logger.warning(LogTemplates.LOGIN_FAILED, exc.message)
            if attempt == self._login_attempt:
                self._set_state(AuthState.LOGGED_OUT)
            raise

        # Logout or cancel ran while connecting.
        if attempt != self._login_attempt:
            logger.info(LogTemplates.LOGIN_SUPERSEDED, attempt)
            await self._drop_session()
            raise LoginCancelledError(attempt)

        try:
            await self._store.save(credentials)
        except Exception as exc:
            # The session is live, the next start will just ask again.
            logger.warning(LogTemplates.CREDENTIALS_SAVE_FAILED, exc)

        logger.info(LogTemplates.LOGIN_SUCCEEDED, session.username)
        self._set_state(AuthState.LOGGED_IN)
        return session

    def cancel_login(self) -> bool:
        """Abandon the in-flight interactive login, if any."""
        if self._state is not AuthState.LOGGING_IN:
            return False
        logger.info(LogTemplates.LOGIN_CANCELLED, self._login_attempt)
        self._login_attempt += 1
        self._set_state(AuthState.LOGGED_OUT)
        return True

    async def logout(self) -> None:
        self._login_attempt += 1
        try:
            await self._store.clear()
        finally:
            await self._drop_session()
            self._set_state(AuthState.LOGGED_OUT)
            logger.info(LogTemplates.LOGGED_OUT)

    async def _drop_session(self) -> None:
        try:
            await self._session.disconnect()
        except Exception as exc:
            logger.warning(LogTemplates.SESSION_DISCONNECT_FAILED, exc)
        self._context.clear()

    # === Session and token ===

    async def connect(self, credentials: Credentials) -> Session:
        """Open the streaming session and derive the first web API token."""
        logger.info(LogTemplates.SESSION_CONNECTING)
        try:
            await self._session.connect(credentials)
        except Exception as exc:
            raise UnauthenticatedError(
                ErrorMessages.SESSION_CONNECT_FAILED.format(error=exc)
            ) from exc

        session = Session(username=self._session.username or credentials.username or "")
        self._context.bind_session(session)
        logger.info(LogTemplates.SESSION_CONNECTED, session.username, session.connection_id)

        await self.derive_web_token()
        return session

    async def derive_web_token(self) -> BearerToken:
        """Exchange the live session for a fresh bearer token and install it."""
        if not self._context.has_live_session or not self._session.is_connected():
            raise UnauthenticatedError(ErrorMessages.SESSION_NOT_CONNECTED)

        try:
            token = await self._session.exchange_token()
        except Exception as exc:
            logger.warning(LogTemplates.TOKEN_REFRESH_FAILED, exc)
            raise UnauthenticatedError(
                ErrorMessages.TOKEN_EXCHANGE_FAILED.format(error=exc)
            ) from exc

        self._context.install_token(token)
        logger.debug(LogTemplates.TOKEN_DERIVED, token.expires_at.isoformat(), len(token.scopes))
        return token

    # === Retry discipline ===

    async def call_with_retry(self, api_call: Callable[[], Awaitable[T]]) -> T:
        """Invoke a web API call, retrying on 401 and 429.

        Args:
            api_call: Zero-argument factory returning a fresh awaitable per attempt.

        Raises:
            UnauthenticatedError: The token could not be refreshed, or 401s
                outlasted the attempt budget.
            TransportError: Any other HTTP or network failure, or 429s
                outlasted the attempt budget.
        """
        budget = AttemptBudget(self._settings.max_attempts)
        while True:
            # A Retry-After wait can outlast the token.
            if not self._context.token_is_usable(
                leeway_seconds=self._settings.token_expiry_leeway_s
            ):
                logger.debug(LogTemplates.TOKEN_EXPIRED_PREFLIGHT)
                await self.derive_web_token()

            attempt = budget.consume()
            try:
                return await api_call()
            except HttpStatusError as exc:
                if exc.status == HttpStatus.UNAUTHORIZED:
                    if budget.exhausted:
                        logger.warning(LogTemplates.RETRIES_EXHAUSTED, budget.used, exc.status)
                        raise UnauthenticatedError(
                            ErrorMessages.RETRIES_EXHAUSTED_UNAUTHORIZED.format(attempts=budget.used)
                        ) from exc
                    logger.info(LogTemplates.TOKEN_REFRESH_ON_401, attempt)
                    await self.derive_web_token()
                elif exc.status == HttpStatus.TOO_MANY_REQUESTS:
                    limited = RateLimitedError(
                        parse_retry_after(exc.headers, cap=self._settings.max_retry_after_seconds)
                    )
                    if budget.exhausted:
                        logger.warning(LogTemplates.RETRIES_EXHAUSTED, budget.used, exc.status)
                        raise TransportError(
                            ErrorMessages.RETRIES_EXHAUSTED_RATE_LIMITED.format(attempts=budget.used),
                            status=exc.status,
                        ) from limited
                    logger.info(LogTemplates.RATE_LIMITED, limited.retry_after, attempt)
                    await self._sleep(limited.retry_after)
                else:
                    logger.warning(LogTemplates.REQUEST_FAILED_NO_RETRY, exc.status)
                    raise TransportError(exc.message, status=exc.status) from exc
