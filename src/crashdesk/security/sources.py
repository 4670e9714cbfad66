"""Certificate sources feeding the trust-store factory.

A source is anything exposing ``open_stream(context)`` that returns a binary
stream positioned at the start of one certificate, or ``None`` when no
certificate is configured. Plain callables with the same signature are
accepted wherever a source is expected.
"""

from __future__ import annotations

import io
from importlib import resources as _resources
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class CertificateSource(Protocol):
    def open_stream(self, context: Any = None) -> Optional[BinaryIO]: ...


CertificateSourceLike = Union[CertificateSource, Callable[[Any], Optional[BinaryIO]]]


class NullCertificateSource:
    """Source used when no pinning is configured."""

    def open_stream(self, context: Any = None) -> Optional[BinaryIO]:
        return None

    def __repr__(self) -> str:
        return "NullCertificateSource()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NullCertificateSource)

    def __hash__(self) -> int:
        return hash(NullCertificateSource)


NO_CERTIFICATE_SOURCE = NullCertificateSource()


class FileCertificateSource:
    """Read the certificate from a file on disk."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def open_stream(self, context: Any = None) -> Optional[BinaryIO]:
        return open(self.path, "rb")

    def __repr__(self) -> str:
        return f"FileCertificateSource({str(self.path)!r})"


class ResourceCertificateSource:
    """Read the certificate bundled as package data."""

    def __init__(self, package: str, resource: str) -> None:
        self.package = package
        self.resource = resource

    def open_stream(self, context: Any = None) -> Optional[BinaryIO]:
        return _resources.files(self.package).joinpath(self.resource).open("rb")

    def __repr__(self) -> str:
        return f"ResourceCertificateSource({self.package!r}, {self.resource!r})"


class BytesCertificateSource:
    """Serve an in-memory certificate; each call gets a fresh stream."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def open_stream(self, context: Any = None) -> Optional[BinaryIO]:
        return io.BytesIO(self._data)

    def __repr__(self) -> str:
        return f"BytesCertificateSource(<{len(self._data)} bytes>)"


def is_certificate_source(candidate: object) -> bool:
    return isinstance(candidate, CertificateSource) or callable(candidate)


def open_certificate_stream(
    source: CertificateSourceLike, context: Any = None
) -> Optional[BinaryIO]:
    if isinstance(source, CertificateSource):
        return source.open_stream(context)
    return source(context)


__all__ = [
    "CertificateSource",
    "CertificateSourceLike",
    "NullCertificateSource",
    "NO_CERTIFICATE_SOURCE",
    "FileCertificateSource",
    "ResourceCertificateSource",
    "BytesCertificateSource",
    "is_certificate_source",
    "open_certificate_stream",
]
