"""
Shared Domain Kernel

Contains exceptions, constrained types and messages shared across all bounded contexts.
"""

from taan_player.domain.shared.exceptions import (
    AuthError,
    DomainError,
    FatalError,
    HttpStatusError,
    LoginCancelledError,
    RateLimitedError,
    TransportError,
    UnauthenticatedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "AuthError",
    "UnauthenticatedError",
    "LoginCancelledError",
    "RateLimitedError",
    "TransportError",
    "HttpStatusError",
    "FatalError",
]
