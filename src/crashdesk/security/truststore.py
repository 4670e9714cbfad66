"""Build an isolated trust store holding one pinned certificate.

:func:`create_trust_store` never raises: whenever pinning cannot be set up it
logs the reason and returns ``None`` so callers fall back to system trust.
"""

from __future__ import annotations

import hashlib
import logging
import ssl
from contextlib import closing
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from crashdesk.config.constants import DEFAULT_CERTIFICATE_TYPE, TRUST_ANCHOR_ALIAS
from crashdesk.infrastructure.errors import ErrorCode, TrustAnchorError
from crashdesk.infrastructure.logging import get_logger, log_event

from .sources import CertificateSourceLike, open_certificate_stream

_LOGGER = get_logger("crashdesk.security.truststore")

DEFAULT_STORE_TYPE = "PEM"
SUPPORTED_STORE_TYPES = frozenset({DEFAULT_STORE_TYPE})
SUPPORTED_CERTIFICATE_TYPES = frozenset({"X.509", "X509"})

_PEM_BEGIN = b"-----BEGIN CERTIFICATE-----"
_PEM_END = b"-----END CERTIFICATE-----"


@dataclass(frozen=True)
class TrustedCertificate:
    """A parsed certificate kept in DER form."""

    der: bytes

    @property
    def fingerprint(self) -> str:
        """Colon separated, upper-case SHA-256 digest of the DER bytes."""

        digest = hashlib.sha256(self.der).hexdigest().upper()
        return ":".join(digest[index : index + 2] for index in range(0, len(digest), 2))

    def to_pem(self) -> str:
        return ssl.DER_cert_to_PEM_cert(self.der)


class TrustStore:
    """Alias-keyed collection of trusted certificates."""

    def __init__(self, store_type: str = DEFAULT_STORE_TYPE) -> None:
        if store_type not in SUPPORTED_STORE_TYPES:
            raise TrustAnchorError(
                f"Unsupported trust store type: {store_type}",
                code=ErrorCode.TRUST_STORE_INIT_FAILED,
                store_type=store_type,
            )
        self.store_type = store_type
        self._entries: Dict[str, TrustedCertificate] = {}

    def set_certificate_entry(self, alias: str, certificate: TrustedCertificate) -> None:
        self._entries[alias] = certificate

    def get_certificate(self, alias: str) -> Optional[TrustedCertificate]:
        return self._entries.get(alias)

    def aliases(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def fingerprint(self, alias: str = TRUST_ANCHOR_ALIAS) -> Optional[str]:
        certificate = self._entries.get(alias)
        return certificate.fingerprint if certificate is not None else None

    def to_pem(self) -> str:
        """Concatenate every entry as PEM, suitable for ``cadata=``."""

        return "".join(certificate.to_pem() for certificate in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, alias: object) -> bool:
        return alias in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"<TrustStore type={self.store_type} aliases={list(self._entries)}>"


def _check_certificate_type(certificate_type: str) -> None:
    if certificate_type.strip().upper() not in SUPPORTED_CERTIFICATE_TYPES:
        raise TrustAnchorError(
            f"Unsupported certificate type: {certificate_type}",
            code=ErrorCode.UNSUPPORTED_CERTIFICATE_TYPE,
            certificate_type=certificate_type,
        )


def _extract_der(data: bytes) -> bytes:
    start = data.find(_PEM_BEGIN)
    if start == -1:
        return data

    end = data.find(_PEM_END, start)
    if end == -1:
        raise TrustAnchorError("Unterminated PEM certificate block")
    block = data[start : end + len(_PEM_END)].decode("ascii")
    return ssl.PEM_cert_to_DER_cert(block)


def _validate_der(der: bytes) -> None:
    # Loading into a throwaway context makes OpenSSL parse the certificate.
    probe = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    probe.load_verify_locations(cadata=der)
    if probe.cert_store_stats().get("x509", 0) < 1:
        raise TrustAnchorError("No certificate found in stream")


def parse_certificate(data: bytes, certificate_type: str = DEFAULT_CERTIFICATE_TYPE) -> TrustedCertificate:
    """Parse one PEM or DER encoded certificate.

    PEM input uses the first ``CERTIFICATE`` block. Raises
    :class:`TrustAnchorError` for unsupported types and empty input, and
    ``ValueError`` or :class:`ssl.SSLError` for malformed bytes.
    """

    _check_certificate_type(certificate_type)
    if not data.strip():
        raise TrustAnchorError("Certificate stream was empty")

    der = _extract_der(data)
    _validate_der(der)
    return TrustedCertificate(der=der)


def _read_certificate(source: CertificateSourceLike, context: Any) -> Optional[bytes]:
    # providers are host code and may fail in any way
    try:
        stream = open_certificate_stream(source, context)
    except Exception as exc:
        raise TrustAnchorError(
            f"Could not open certificate stream: {type(exc).__name__}: {exc}",
            code=ErrorCode.CERTIFICATE_STREAM_FAILED,
        ) from exc

    if stream is None:
        return None

    with closing(stream) as buffered:
        try:
            return buffered.read()
        except Exception as exc:
            raise TrustAnchorError(
                f"Could not read certificate stream: {type(exc).__name__}: {exc}",
                code=ErrorCode.CERTIFICATE_STREAM_FAILED,
            ) from exc


def create_trust_store(
    source: CertificateSourceLike,
    context: Any = None,
    *,
    certificate_type: str = DEFAULT_CERTIFICATE_TYPE,
) -> Optional[TrustStore]:
    """Return a store trusting only the certificate ``source`` provides.

    ``None`` means "use the system trust": either the source supplied no
    certificate or the certificate could not be loaded.
    """

    try:
        data = _read_certificate(source, context)
        if data is None:
            log_event(
                _LOGGER,
                "truststore.create.absent",
                level=logging.DEBUG,
                message="No pinned certificate configured",
            )
            return None

        certificate = parse_certificate(data, certificate_type)
        store = TrustStore()
        store.set_certificate_entry(TRUST_ANCHOR_ALIAS, certificate)
    except TrustAnchorError as exc:
        log_event(
            _LOGGER,
            "truststore.create.failed",
            level=logging.WARNING,
            message=exc.user_message,
            code=exc.code,
            reason=str(exc),
        )
        return None
    except Exception as exc:
        log_event(
            _LOGGER,
            "truststore.create.failed",
            level=logging.WARNING,
            message="Certificate pinning unavailable; falling back to system trust.",
            code=ErrorCode.CERTIFICATE_PARSE_FAILED.value,
            reason=str(exc),
            error_type=type(exc).__name__,
        )
        return None

    log_event(
        _LOGGER,
        "truststore.create.ok",
        alias=TRUST_ANCHOR_ALIAS,
        fingerprint=certificate.fingerprint,
    )
    return store


__all__ = [
    "DEFAULT_STORE_TYPE",
    "TrustedCertificate",
    "TrustStore",
    "create_trust_store",
    "parse_certificate",
]
