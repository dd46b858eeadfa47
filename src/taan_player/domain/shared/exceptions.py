"""Base exception classes for domain-level errors."""

from __future__ import annotations

from collections.abc import Mapping

from taan_player.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class AuthError(DomainError):
    """Base class for failures surfaced by the auth coordinator."""


class UnauthenticatedError(AuthError):
    """No or invalid credentials, an unrefreshable token, or a failed login."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.TOKEN_REFRESH_FAILED, code="UNAUTHENTICATED")


class LoginCancelledError(UnauthenticatedError):
    """Raised when an abandoned interactive login delivers credentials late."""

    def __init__(self, attempt: int) -> None:
        super().__init__(ErrorMessages.LOGIN_CANCELLED)
        self.code = "LOGIN_CANCELLED"
        self.attempt = attempt


class RateLimitedError(AuthError):
    """Transient rate limit. Always retried internally, never terminal."""

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"Rate limited, retry after {retry_after}s", code="RATE_LIMITED")
        self.retry_after = retry_after


class TransportError(AuthError):
    """Any other HTTP or network failure. Surfaced immediately without retry."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.status = status


class HttpStatusError(DomainError):
    """Raw non-success HTTP response from the web API."""

    def __init__(
        self, status: int, headers: Mapping[str, str] | None = None, message: str | None = None
    ) -> None:
        super().__init__(message or ErrorMessages.HTTP_STATUS.format(status=status), code="HTTP_STATUS")
        self.status = status
        self.headers: dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


class FatalError(DomainError):
    """Unrecoverable local resource failure (credential cache, audio backend)."""

    def __init__(self, message: str, subsystem: str | None = None) -> None:
        super().__init__(message, code="FATAL")
        self.subsystem = subsystem
