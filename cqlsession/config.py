"""Immutable connection configuration snapshot."""

from __future__ import annotations

import enum
import ssl
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from cqlsession.contact_points import Endpoint, parse_contact_points
from cqlsession.exceptions import ConfigError

if TYPE_CHECKING:
    from cqlsession.settings import Settings


class Compression(str, enum.Enum):
    """Transport compression modes understood by Cassandra."""

    NONE = "NONE"
    SNAPPY = "SNAPPY"
    LZ4 = "LZ4"


@dataclass(frozen=True, slots=True)
class ConnectionConfig:
    """Everything needed to open one session.

    Built once per activation and never mutated.  Construction rejects an
    empty endpoint list, a username without a password (or the reverse) and
    negative timeouts, so a builder never sees an inconsistent config.
    """

    endpoints: tuple[Endpoint, ...]
    keyspace: Optional[str] = None
    consistency_level: str = "ONE"
    compression: Compression = Compression.NONE
    ssl_context: Optional[ssl.SSLContext] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    read_timeout_ms: Optional[int] = None
    connect_timeout_ms: Optional[int] = None

    def __post_init__(self) -> None:
        endpoints = tuple(self.endpoints)
        if not endpoints:
            raise ConfigError("At least one contact point is required")
        object.__setattr__(self, "endpoints", endpoints)
        if not isinstance(self.consistency_level, str) or not self.consistency_level.strip():
            raise ConfigError(f"Consistency level must be a non-empty string, got {self.consistency_level!r}")
        object.__setattr__(self, "consistency_level", self.consistency_level.strip().upper())
        try:
            object.__setattr__(self, "compression", Compression(self.compression))
        except ValueError as exc:
            raise ConfigError(f"Unknown compression type {self.compression!r}") from exc

        if (self.username is None) != (self.password is None):
            raise ConfigError("username and password must be provided together")

        for name in ("read_timeout_ms", "connect_timeout_ms"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ConfigError(f"{name} must be non-negative, got {value}")

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    @property
    def uses_tls(self) -> bool:
        return self.ssl_context is not None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ConnectionConfig":
        """Parse contact points, resolve TLS and snapshot *settings*."""
        endpoints = parse_contact_points(settings.contact_points)

        provider = settings.ssl_provider()
        ssl_context = provider.create_context(settings.client_auth) if provider is not None else None

        password = settings.password.get_secret_value() if settings.password is not None else None
        return cls(
            endpoints=tuple(endpoints),
            keyspace=settings.keyspace,
            consistency_level=settings.consistency_level,
            compression=settings.compression_type,
            ssl_context=ssl_context,
            username=settings.username,
            password=password,
            read_timeout_ms=settings.read_timeout_ms,
            connect_timeout_ms=settings.connect_timeout_ms,
        )
