"""Declarative settings surface.

:class:`Settings` is what an embedding host fills in, either directly or via
:func:`load_settings` from a TOML file such as::

    contact_points = "node1:9042,node2"
    keyspace = "metrics"
    consistency_level = "QUORUM"
    username = "app"
    password = "secret"
    read_timeout_ms = 12000

    [tls]
    cafile = "/etc/cassandra/ca.pem"
    certfile = "/etc/cassandra/client.pem"
    keyfile = "/etc/cassandra/client.key"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from cqlsession.config import Compression
from cqlsession.contact_points import DEFAULT_CASSANDRA_PORT
from cqlsession.exceptions import ConfigError
from cqlsession.tls import ClientAuth, FileSSLContextProvider, SSLContextProvider


class TlsFiles(BaseModel):
    """PEM file locations for the built-in file based TLS provider."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cafile: Optional[str] = None
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    check_hostname: bool = True
    verify: bool = True

    def provider(self) -> FileSSLContextProvider:
        return FileSSLContextProvider(
            cafile=self.cafile,
            certfile=self.certfile,
            keyfile=self.keyfile,
            check_hostname=self.check_hostname,
            verify=self.verify,
        )


class Settings(BaseModel):
    """Recognised connection options."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    contact_points: str = Field(
        description=(
            "Contact points are addresses of Cassandra nodes, comma-separated in hostname:port "
            f"format, e.g. node1:port,node2:port. The port defaults to {DEFAULT_CASSANDRA_PORT}."
        ),
    )
    keyspace: Optional[str] = Field(
        default=None,
        min_length=1,
        description=(
            "Keyspace bound to the session. When unset, queries must qualify table names "
            "as <KEYSPACE>.<TABLE>."
        ),
    )
    consistency_level: str = Field(
        default="ONE",
        min_length=1,
        description="Default per-request consistency: how many replicas must respond.",
    )
    compression_type: Compression = Field(
        default=Compression.NONE,
        description="Transport compression hint (advisory, not negotiated with the cluster).",
    )
    ssl_context_service: Optional[SSLContextProvider] = Field(
        default=None,
        description="Provider of the client SSL context. TLS is enabled when set.",
    )
    tls: Optional[TlsFiles] = Field(
        default=None,
        description=(
            "PEM files for the built-in TLS provider; ignored when ssl_context_service is set. "
            "Without a certfile, client_auth must be NONE or WANT (it defaults to REQUIRED)."
        ),
    )
    client_auth: ClientAuth = Field(
        default=ClientAuth.REQUIRED,
        description=(
            "Client authentication policy for TLS connections (REQUIRED, WANT, NONE). "
            "Only used when TLS is configured. REQUIRED needs a client certificate; use NONE "
            "or WANT for server verification only."
        ),
    )
    username: Optional[str] = Field(default=None, min_length=1, description="Username to access the cluster.")
    password: Optional[SecretStr] = Field(default=None, description="Password to access the cluster.")
    read_timeout_ms: Optional[NonNegativeInt] = Field(
        default=None,
        description="Read timeout in milliseconds. 0 means no timeout; unset keeps the driver default.",
    )
    connect_timeout_ms: Optional[NonNegativeInt] = Field(
        default=None,
        description="Connect timeout in milliseconds. 0 or unset keeps the driver default connect timeout.",
    )

    @field_validator("consistency_level", mode="before")
    @classmethod
    def _upper_consistency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("compression_type", "client_auth", mode="before")
    @classmethod
    def _upper_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _check_credentials_pair(self) -> "Settings":
        if (self.username is None) != (self.password is None):
            raise ValueError("username and password must be provided together")
        return self

    def ssl_provider(self) -> Optional[SSLContextProvider]:
        """The TLS provider to use, if any."""
        if self.ssl_context_service is not None:
            return self.ssl_context_service
        if self.tls is not None:
            return self.tls.provider()
        return None


def load_settings(path: str | Path, *, table: Optional[str] = None) -> Settings:
    """Load :class:`Settings` from a TOML file.

    *table* selects a sub-table (e.g. ``"cassandra"``) instead of the top level.
    """
    path = Path(path)
    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read settings file {path}: {exc}") from exc

    if table is not None:
        section = raw.get(table)
        if not isinstance(section, dict):
            raise ConfigError(f"Settings file {path} has no [{table}] table")
        raw = section

    return settings_from_mapping(raw)


def settings_from_mapping(values: Any) -> Settings:
    """Validate a plain mapping into :class:`Settings`, mapping errors to :class:`ConfigError`."""
    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {describe_validation_error(exc)}") from exc


def describe_validation_error(exc: ValidationError) -> str:
    """Render a validation error without echoing input values (which may hold secrets)."""
    parts = []
    for error in exc.errors(include_url=False, include_input=False):
        location = ".".join(str(part) for part in error["loc"]) or "settings"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
