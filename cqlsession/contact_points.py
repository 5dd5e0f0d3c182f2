"""Contact point parsing.

Turns ``"node1:9042, node2"`` into an ordered list of :class:`Endpoint`
values.  The driver tries contact points in this order on first connect, so
input order is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from cqlsession.exceptions import ConfigError

DEFAULT_CASSANDRA_PORT = 9042

_MAX_PORT = 65_535


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Cluster node host/port pair."""

    host: str
    port: int = DEFAULT_CASSANDRA_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"

    def as_tuple(self) -> tuple[str, int]:
        return (self.host, self.port)


def parse_contact_points(text: Optional[str]) -> list[Endpoint]:
    """Parse a comma-separated ``host[:port]`` list.

    Raises :class:`ConfigError` for an empty list, an empty token, an empty
    host, or a port that is not an integer in 1..65535.
    """
    if text is None or not text.strip():
        raise ConfigError("Contact points must not be empty")

    endpoints: list[Endpoint] = []
    for raw_token in text.split(","):
        token = raw_token.strip()
        if not token:
            raise ConfigError(f"Empty contact point in {text!r}")
        endpoints.append(_parse_token(token))
    return endpoints


def format_contact_points(endpoints: Iterable[Endpoint]) -> str:
    """Format endpoints back into ``host:port,host:port``."""
    return ",".join(str(ep) for ep in endpoints)


def _parse_token(token: str) -> Endpoint:
    host, sep, port_text = token.partition(":")
    host = host.strip()
    if not host:
        raise ConfigError(f"Contact point {token!r} has no host")
    if not sep:
        return Endpoint(host)

    port_text = port_text.strip()
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ConfigError(f"Invalid port {port_text!r} in contact point {token!r}") from exc
    if not 0 < port <= _MAX_PORT:
        raise ConfigError(f"Port {port} out of range in contact point {token!r}")
    return Endpoint(host, port)
