"""Top-level crashdesk package API."""

from crashdesk.config import DefaultSource, OverrideLayer, ResolvedConfiguration, resolve
from crashdesk.security import create_trust_store
from crashdesk.security.transport import create_http_client, create_ssl_context

__all__ = [
    "DefaultSource",
    "OverrideLayer",
    "ResolvedConfiguration",
    "resolve",
    "create_trust_store",
    "create_http_client",
    "create_ssl_context",
]
