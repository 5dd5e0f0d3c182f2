"""Session lifecycle manager.

``SessionProvider`` owns one Cassandra session per activation:

    activate() → parse contact points → snapshot config → connect → CONNECTED

    deactivate() → close session → close cluster → DISABLED

The embedding host drives ``activate``/``deactivate`` (enable/disable hooks);
any number of threads may call :meth:`SessionProvider.get_session` while the
provider is connected and all of them receive the same shared session.

Consistency is applied as the default of every request made through the
session, not as a property of the connection.  Individual statements can
still set their own consistency level.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Mapping, Optional, Union

from cqlsession.builder import ClusterSession, ConnectionBuilder
from cqlsession.config import ConnectionConfig
from cqlsession.exceptions import ConfigError, NotConnectedError
from cqlsession.settings import Settings, settings_from_mapping

logger = logging.getLogger("cqlsession.provider")

ActivationConfig = Union[Settings, ConnectionConfig, Mapping[str, Any]]


class SessionState(str, enum.Enum):
    """Lifecycle states of a :class:`SessionProvider`."""

    DISABLED = "DISABLED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class SessionProvider:
    """Creates, shares and releases a single Cassandra session.

    Parameters
    ----------
    settings:
        Optional default configuration, used by :meth:`activate` when called
        without arguments and by the context manager.
    builder:
        Connection builder; a default :class:`ConnectionBuilder` is used when
        omitted.
    """

    def __init__(
        self,
        settings: Optional[ActivationConfig] = None,
        *,
        builder: Optional[ConnectionBuilder] = None,
    ) -> None:
        self._settings = settings
        self._builder = builder or ConnectionBuilder()
        self._state = SessionState.DISABLED
        self._handle: Optional[ClusterSession] = None
        self._lock = threading.Lock()

    # -- properties --------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    # -- public API --------------------------------------------------------

    def activate(self, config: Optional[ActivationConfig] = None) -> None:
        """Connect using *config* (or the constructor settings).

        A no-op when already connected.  On failure the provider stays
        ``DISABLED`` and the error propagates; nothing is retried.
        """
        if self._handle is not None:
            return
        with self._lock:
            if self._handle is not None:
                logger.debug("Session already connected; activate ignored")
                return
            source = config if config is not None else self._settings
            if source is None:
                raise ConfigError("No configuration given to activate()")

            self._state = SessionState.CONNECTING
            try:
                connection_config = _to_connection_config(source)
                handle = self._builder.build(connection_config)
            except BaseException:
                self._state = SessionState.DISABLED
                raise

            self._handle = handle
            self._state = SessionState.CONNECTED
            logger.info(
                "Cassandra session activated (cluster=%s, keyspace=%s)",
                handle.cluster_name,
                connection_config.keyspace,
            )

    def get_session(self) -> Any:
        """Return the shared native ``cassandra.cluster.Session``."""
        return self.get_cluster_session().session

    def get_cluster_session(self) -> ClusterSession:
        """Return the full session handle (session, cluster, cluster name, defaults)."""
        handle = self._handle
        if handle is None:
            raise NotConnectedError("Unable to get the Cassandra session: provider is not connected")
        return handle

    def deactivate(self) -> None:
        """Close the session if one is held.  Safe to call any number of times; never raises."""
        with self._lock:
            handle = self._handle
            if handle is None:
                self._state = SessionState.DISABLED
                return
            self._handle = None
            try:
                handle.close()
            except Exception:
                logger.warning("Error closing Cassandra session", exc_info=True)
            finally:
                self._state = SessionState.DISABLED

        logger.info("Cassandra session closed (cluster=%s)", handle.cluster_name)

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> Any:
        """Activate and return the native session directly."""
        self.activate()
        return self.get_session()

    def __exit__(self, *_exc: Any) -> None:
        self.deactivate()


def _to_connection_config(source: ActivationConfig) -> ConnectionConfig:
    if isinstance(source, ConnectionConfig):
        return source
    if isinstance(source, Settings):
        return ConnectionConfig.from_settings(source)
    return ConnectionConfig.from_settings(settings_from_mapping(source))
