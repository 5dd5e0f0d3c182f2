"""Connection bootstrap: turns a :class:`ConnectionConfig` into a live session.

The builder reconciles the optional concerns (TLS, authentication,
consistency, timeouts, compression) into a single ``cassandra.cluster.Cluster``
and performs the connect handshake.  It never retries; retry policy belongs to
whoever calls :meth:`ConnectionBuilder.build`.

Consistency is applied as the *per-request* default of the default execution
profile.  The native protocol binds consistency to each request rather than to
the connection, so a statement may still override it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from cassandra import AuthenticationFailed, ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable

from cqlsession.config import Compression, ConnectionConfig
from cqlsession.contact_points import Endpoint, format_contact_points
from cqlsession.exceptions import AuthenticationError, ConfigError
from cqlsession.exceptions import ConnectionError as CqlConnectionError

logger = logging.getLogger("cqlsession.builder")

ClusterFactory = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ClusterSession:
    """A live session plus the cluster that owns it.

    ``session`` is the native ``cassandra.cluster.Session``; it is returned
    as-is so callers get every driver feature.
    """

    session: Any
    cluster: Any
    cluster_name: Optional[str]
    endpoints: tuple[Endpoint, ...]
    consistency_level: str
    compression: Compression = Compression.NONE

    def close(self) -> None:
        """Shut down the session, then the cluster (connections and pools)."""
        try:
            self.session.shutdown()
        finally:
            self.cluster.shutdown()


class ConnectionBuilder:
    """Opens sessions from :class:`ConnectionConfig` snapshots.

    Parameters
    ----------
    cluster_factory:
        Callable used in place of ``cassandra.cluster.Cluster``.  It receives
        the same keyword arguments.
    """

    def __init__(self, cluster_factory: Optional[ClusterFactory] = None) -> None:
        self._cluster_factory = cluster_factory or Cluster

    # -- public ------------------------------------------------------------

    def build(self, config: ConnectionConfig) -> ClusterSession:
        """Connect to the cluster described by *config*.

        Raises :class:`ConfigError` when there is nothing to connect to,
        :class:`AuthenticationError` when credentials are rejected and
        :class:`ConnectionError` for every other handshake failure.
        """
        if not config.endpoints:
            raise ConfigError("At least one contact point is required")

        endpoints = config.endpoints
        attempted = format_contact_points(endpoints)
        cluster_kwargs = self._cluster_kwargs(config)

        logger.debug(
            "Connecting to %s (keyspace=%s, tls=%s, auth=%s, consistency=%s)",
            attempted,
            config.keyspace,
            config.uses_tls,
            config.has_credentials,
            config.consistency_level,
        )
        if config.compression is not Compression.NONE:
            logger.debug(
                "Compression %s recorded as advisory; transport compression left to the driver",
                config.compression.value,
            )

        cluster = None
        try:
            cluster = self._cluster_factory(**cluster_kwargs)
            session = cluster.connect(config.keyspace)
        except Exception as exc:
            if cluster is not None:
                _shutdown_quietly(cluster)
            raise _wrap_failure(exc, endpoints) from exc

        cluster_name = _cluster_name(cluster)
        logger.info("Connected to Cassandra cluster: %s", cluster_name)
        return ClusterSession(
            session=session,
            cluster=cluster,
            cluster_name=cluster_name,
            endpoints=endpoints,
            consistency_level=config.consistency_level,
            compression=config.compression,
        )

    # -- private -----------------------------------------------------------

    def _cluster_kwargs(self, config: ConnectionConfig) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "contact_points": [ep.as_tuple() for ep in config.endpoints],
            "execution_profiles": {EXEC_PROFILE_DEFAULT: self._default_profile(config)},
        }

        if config.ssl_context is not None:
            kwargs["ssl_context"] = config.ssl_context

        if config.has_credentials:
            kwargs["auth_provider"] = PlainTextAuthProvider(
                username=config.username,
                password=config.password,
            )

        if config.connect_timeout_ms == 0:
            # The driver handshake wait needs a numeric connect timeout.
            logger.debug("connect_timeout_ms=0: keeping the driver default connect timeout")
        elif config.connect_timeout_ms is not None:
            kwargs["connect_timeout"] = config.connect_timeout_ms / 1000.0

        return kwargs

    def _default_profile(self, config: ConnectionConfig) -> ExecutionProfile:
        try:
            consistency = ConsistencyLevel.name_to_value[config.consistency_level]
        except KeyError as exc:
            raise CqlConnectionError(
                f"Unsupported consistency level {config.consistency_level!r}",
                endpoints=config.endpoints,
                cause=exc,
            ) from exc

        profile_kwargs: dict[str, Any] = {"consistency_level": consistency}
        if config.read_timeout_ms is not None:
            profile_kwargs["request_timeout"] = _seconds(config.read_timeout_ms)
        return ExecutionProfile(**profile_kwargs)


def _seconds(millis: int) -> Optional[float]:
    """Request timeouts are in seconds; ``0`` means no timeout."""
    if millis == 0:
        return None
    return millis / 1000.0


def _cluster_name(cluster: Any) -> Optional[str]:
    metadata = getattr(cluster, "metadata", None)
    return getattr(metadata, "cluster_name", None)


def _shutdown_quietly(cluster: Any) -> None:
    try:
        cluster.shutdown()
    except Exception:
        logger.warning("Error shutting down partially built cluster", exc_info=True)


def _find_auth_failure(exc: BaseException) -> Optional[BaseException]:
    if isinstance(exc, AuthenticationFailed):
        return exc
    if isinstance(exc, NoHostAvailable):
        for host_error in (exc.errors or {}).values():
            if isinstance(host_error, AuthenticationFailed):
                return host_error
    return None


def _wrap_failure(exc: Exception, endpoints: tuple[Endpoint, ...]) -> CqlConnectionError:
    attempted = format_contact_points(endpoints)
    auth_failure = _find_auth_failure(exc)
    if auth_failure is not None:
        return AuthenticationError(
            f"Authentication failed connecting to {attempted}: {auth_failure}",
            endpoints=endpoints,
            cause=auth_failure,
        )
    return CqlConnectionError(
        f"Cassandra connection to {attempted} failed: {exc}",
        endpoints=endpoints,
        cause=exc,
    )
