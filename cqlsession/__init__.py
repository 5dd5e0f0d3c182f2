"""cqlsession: managed Cassandra sessions with an explicit enable/disable lifecycle.

Quick start::

    from cqlsession import session_provider

    provider = session_provider("node1:9042,node2", keyspace="metrics", consistency_level="QUORUM")
    provider.activate()
    session = provider.get_session()   # native cassandra.cluster.Session
    session.execute("SELECT release_version FROM system.local")
    provider.deactivate()

    # Or with context manager:
    with session_provider("node1") as session:
        session.execute("SELECT now() FROM system.local")
"""

from __future__ import annotations

import logging
from typing import Any

from cqlsession.builder import ClusterSession, ConnectionBuilder
from cqlsession.config import Compression, ConnectionConfig
from cqlsession.contact_points import DEFAULT_CASSANDRA_PORT, Endpoint, format_contact_points, parse_contact_points
from cqlsession.exceptions import (
    AuthenticationError,
    ConfigError,
    ConnectionError,
    CqlSessionError,
    NotConnectedError,
)
from cqlsession.provider import SessionProvider, SessionState
from cqlsession.settings import Settings, TlsFiles, load_settings, settings_from_mapping
from cqlsession.tls import ClientAuth, FileSSLContextProvider, SSLContextProvider

logger = logging.getLogger("cqlsession")


def session_provider(contact_points: str, **options: Any) -> SessionProvider:
    """Create a (not yet activated) session provider.

    Parameters
    ----------
    contact_points : str
        Comma-separated ``host[:port]`` list; the port defaults to 9042.
    **options
        Any other :class:`Settings` field (``keyspace``, ``consistency_level``,
        ``username``, ``password``, ``tls``, ...).

    Returns
    -------
    SessionProvider
        Provider whose ``activate()`` connects with these settings.

    Examples
    --------
    >>> from cqlsession import session_provider
    >>> with session_provider("127.0.0.1", keyspace="app") as session:
    ...     session.execute("SELECT * FROM users LIMIT 1")
    """
    return SessionProvider(settings_from_mapping({"contact_points": contact_points, **options}))


__all__ = [
    # Convenience function
    "session_provider",
    # Lifecycle
    "SessionProvider",
    "SessionState",
    "ConnectionBuilder",
    "ClusterSession",
    # Configuration
    "Settings",
    "TlsFiles",
    "load_settings",
    "ConnectionConfig",
    "Compression",
    "Endpoint",
    "DEFAULT_CASSANDRA_PORT",
    "parse_contact_points",
    "format_contact_points",
    # TLS
    "ClientAuth",
    "SSLContextProvider",
    "FileSSLContextProvider",
    # Exceptions
    "CqlSessionError",
    "ConfigError",
    "ConnectionError",
    "AuthenticationError",
    "NotConnectedError",
]

__version__ = "0.1.0"
