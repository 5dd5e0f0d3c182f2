"""Custom exceptions for cqlsession.

All exceptions inherit from CqlSessionError to allow catching any package error.
Secrets (passwords) are never included in exception messages.
"""

from __future__ import annotations

from typing import Optional, Sequence


class CqlSessionError(Exception):
    """Base exception for all cqlsession errors."""


class ConfigError(CqlSessionError):
    """Raised when configuration is malformed or incomplete (no network I/O happened)."""


class ConnectionError(CqlSessionError):  # noqa: A001 - intentional shadow of builtin
    """Raised when the connect handshake with the cluster fails.

    ``endpoints`` lists the contact points that were attempted and ``cause``
    holds the underlying driver exception, when there is one.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoints: Sequence[object] = (),
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.endpoints = tuple(endpoints)
        self.cause = cause


class AuthenticationError(ConnectionError):
    """Raised when the cluster rejects the supplied (or missing) credentials."""


class NotConnectedError(CqlSessionError):
    """Raised when a session is requested while none is established."""
