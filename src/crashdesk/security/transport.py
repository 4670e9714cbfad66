"""TLS and HTTP client construction for report delivery."""

from __future__ import annotations

import logging
import ssl
from typing import TYPE_CHECKING, Any, Optional, Tuple

import httpx

from crashdesk.config.constants import NULL_VALUE
from crashdesk.infrastructure.logging import get_logger, log_event

from .truststore import TrustStore

if TYPE_CHECKING:
    from crashdesk.config.resolver import ResolvedConfiguration

_LOGGER = get_logger("crashdesk.security.transport")


def create_ssl_context(trust_store: Optional[TrustStore] = None) -> ssl.SSLContext:
    """Return a client context trusting ``trust_store``, or system trust when absent."""

    if trust_store is None or len(trust_store) == 0:
        log_event(_LOGGER, "transport.verify.system", level=logging.DEBUG)
        return ssl.create_default_context()

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.verify_mode = ssl.CERT_REQUIRED
    context.check_hostname = True
    context.load_verify_locations(cadata=trust_store.to_pem())
    log_event(
        _LOGGER,
        "transport.verify.pinned",
        level=logging.DEBUG,
        aliases=list(trust_store.aliases()),
    )
    return context


def _timeout(config: "ResolvedConfiguration") -> httpx.Timeout:
    return httpx.Timeout(
        config.socket_timeout / 1000,
        connect=config.connection_timeout / 1000,
    )


def _basic_auth(config: "ResolvedConfiguration") -> Optional[Tuple[str, str]]:
    login = config.form_uri_basic_auth_login
    if not login or login == NULL_VALUE:
        return None
    password = config.form_uri_basic_auth_password
    if password == NULL_VALUE:
        password = ""
    return login, password


def create_http_client(
    config: "ResolvedConfiguration",
    trust_store: Optional[TrustStore] = None,
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """Build the async HTTP client a report sender posts with."""

    kwargs: dict[str, Any] = {
        "verify": create_ssl_context(trust_store),
        "timeout": _timeout(config),
        "headers": dict(config.http_headers),
    }
    auth = _basic_auth(config)
    if auth is not None:
        kwargs["auth"] = auth
    kwargs.update(client_kwargs)
    return httpx.AsyncClient(**kwargs)


__all__ = ["create_ssl_context", "create_http_client"]
