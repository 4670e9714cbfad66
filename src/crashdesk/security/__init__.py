"""Certificate sources and pinned trust stores."""

from .sources import (
    NO_CERTIFICATE_SOURCE,
    BytesCertificateSource,
    CertificateSource,
    CertificateSourceLike,
    FileCertificateSource,
    NullCertificateSource,
    ResourceCertificateSource,
)
from .truststore import TrustedCertificate, TrustStore, create_trust_store

__all__ = [
    "NO_CERTIFICATE_SOURCE",
    "BytesCertificateSource",
    "CertificateSource",
    "CertificateSourceLike",
    "FileCertificateSource",
    "NullCertificateSource",
    "ResourceCertificateSource",
    "TrustedCertificate",
    "TrustStore",
    "create_trust_store",
]
