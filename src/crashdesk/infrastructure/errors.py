"""Error taxonomy for crashdesk."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class ErrorCode(str, Enum):
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"
    CONFIGURATION_MISSING_FORM_URI = "CONFIGURATION_MISSING_FORM_URI"
    CERTIFICATE_PARSE_FAILED = "CERTIFICATE_PARSE_FAILED"
    UNSUPPORTED_CERTIFICATE_TYPE = "UNSUPPORTED_CERTIFICATE_TYPE"
    TRUST_STORE_INIT_FAILED = "TRUST_STORE_INIT_FAILED"
    CERTIFICATE_STREAM_FAILED = "CERTIFICATE_STREAM_FAILED"


@dataclass(frozen=True)
class ErrorContext:
    code: str
    detail: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)


class CrashdeskError(Exception):
    """Base error carrying a machine-readable context and a user-facing message."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        user_message: Optional[str] = None,
        detail: Optional[str] = None,
        **extra: Any,
    ) -> None:
        super().__init__(message)
        self.context = ErrorContext(code=code.value, detail=detail, extra=dict(extra))
        self.user_message = user_message or message

    @property
    def code(self) -> str:
        return self.context.code


class ConfigurationError(CrashdeskError):
    """Raised by consumers that require a particular combination of settings.

    Resolution itself never raises this error.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.CONFIGURATION_INVALID,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, **kwargs)


class TrustAnchorError(CrashdeskError):
    """Failure while building a pinned trust store.

    Never propagates past :func:`crashdesk.security.truststore.create_trust_store`.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.CERTIFICATE_PARSE_FAILED,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault(
            "user_message",
            "Certificate pinning unavailable; falling back to system trust.",
        )
        super().__init__(message, code=code, **kwargs)


__all__ = [
    "ErrorCode",
    "ErrorContext",
    "CrashdeskError",
    "ConfigurationError",
    "TrustAnchorError",
]
