"""TLS context providers.

Building the :class:`ssl.SSLContext` is delegated to an
:class:`SSLContextProvider`.  The provider receives the configured
:class:`ClientAuth` policy and decides whether a client certificate is
presented to the cluster.

:class:`FileSSLContextProvider` covers the common case of PEM files on disk.
"""

from __future__ import annotations

import enum
import logging
import ssl
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from cqlsession.exceptions import ConfigError

logger = logging.getLogger("cqlsession.tls")


class ClientAuth(str, enum.Enum):
    """Client authentication policy when connecting to a TLS-secured cluster."""

    REQUIRED = "REQUIRED"
    WANT = "WANT"
    NONE = "NONE"


@runtime_checkable
class SSLContextProvider(Protocol):
    """Anything able to hand out a client-side SSL context."""

    def create_context(self, client_auth: ClientAuth) -> ssl.SSLContext:
        """Return a configured client :class:`ssl.SSLContext`."""


@dataclass(frozen=True, slots=True)
class FileSSLContextProvider:
    """Builds an SSL context from PEM files.

    ``cafile`` verifies the server certificate (system trust store when
    omitted).  ``certfile``/``keyfile`` form the client certificate chain:
    mandatory for ``REQUIRED``, used when present for ``WANT`` and ignored for
    ``NONE``.  Server-verification-only TLS therefore needs ``NONE`` or
    ``WANT``.

    ``check_hostname=False`` only skips the hostname match; the certificate is
    still verified against the CA.  ``verify=False`` turns off certificate
    verification entirely (and hostname checking with it).
    """

    cafile: Optional[str] = None
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    check_hostname: bool = True
    verify: bool = True

    def create_context(self, client_auth: ClientAuth) -> ssl.SSLContext:
        client_auth = ClientAuth(client_auth)
        if client_auth is ClientAuth.REQUIRED and not self.certfile:
            raise ConfigError(
                "client_auth REQUIRED but no client certificate (certfile) configured; "
                "set client_auth to NONE or WANT for server verification only"
            )

        try:
            ctx = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=self.cafile)
            if self.verify:
                ctx.check_hostname = self.check_hostname
            else:
                ctx.check_hostname = False
                ctx.verify_mode = ssl.CERT_NONE
            if self.certfile and client_auth is not ClientAuth.NONE:
                ctx.load_cert_chain(self.certfile, self.keyfile)
        except (OSError, ssl.SSLError) as exc:
            raise ConfigError(f"Could not build SSL context: {exc}") from exc

        logger.debug(
            "SSL context created (cafile=%s, verify=%s, client_cert=%s, client_auth=%s)",
            self.cafile,
            self.verify,
            bool(self.certfile) and client_auth is not ClientAuth.NONE,
            client_auth.value,
        )
        return ctx
