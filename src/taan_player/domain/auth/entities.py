"""Core domain entities for the authentication bounded context."""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from taan_player.domain.auth.value_objects import CredentialsKind
from taan_player.domain.shared.datetime_utils import utcnow
from taan_player.domain.shared.messages import ErrorMessages
from taan_player.domain.shared.types import NonEmptyStr, UtcDatetimeField


class Credentials(BaseModel):
    """Opaque authentication material for the streaming session.

    Immutable once obtained. A re-auth replaces the whole object.
    """

    model_config = ConfigDict(frozen=True)

    kind: CredentialsKind
    auth_data: SecretStr
    username: NonEmptyStr | None = None

    @field_validator("auth_data")
    @classmethod
    def validate_auth_data(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError(ErrorMessages.EMPTY_AUTH_DATA)
        return v

    @classmethod
    def with_access_token(cls, access_token: str, username: str | None = None) -> Credentials:
        """Credentials produced by the interactive OAuth flow."""
        return cls(
            kind=CredentialsKind.ACCESS_TOKEN,
            auth_data=SecretStr(access_token),
            username=username,
        )

    @classmethod
    def stored(cls, blob: str, username: str | None = None) -> Credentials:
        """Reusable credentials loaded from the cache."""
        return cls(kind=CredentialsKind.STORED, auth_data=SecretStr(blob), username=username)

    def secret(self) -> str:
        return self.auth_data.get_secret_value()


class BearerToken(BaseModel):
    """Short-lived web API credential derived from a live streaming session."""

    model_config = ConfigDict(frozen=True)

    access_token: NonEmptyStr = Field(repr=False)
    expires_at: UtcDatetimeField
    scopes: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def from_expires_in(
        cls,
        access_token: str,
        expires_in_seconds: float,
        scopes: list[str] | tuple[str, ...] | frozenset[str] = (),
        *,
        now: datetime | None = None,
    ) -> BearerToken:
        if expires_in_seconds < 0:
            raise ValueError(ErrorMessages.NEGATIVE_EXPIRY)
        issued_at = now or utcnow()
        return cls(
            access_token=access_token,
            expires_at=issued_at + timedelta(seconds=expires_in_seconds),
            scopes=frozenset(scopes),
        )

    def is_expired(self, now: datetime | None = None, leeway_seconds: float = 0.0) -> bool:
        current = now or utcnow()
        return current + timedelta(seconds=leeway_seconds) >= self.expires_at

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"


class Session(BaseModel):
    """One authenticated streaming connection. At most one is live per process."""

    model_config = ConfigDict(frozen=True)

    connection_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    username: str = ""
    is_live: bool = True
    connected_at: UtcDatetimeField = Field(default_factory=utcnow)

    def closed(self) -> Session:
        """Return a copy marked as no longer live."""
        return self.model_copy(update={"is_live": False})
