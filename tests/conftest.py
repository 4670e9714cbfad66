from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

CA_SHA256_FINGERPRINT = (
    "74:9E:1C:65:99:62:D4:E0:CB:91:F1:EB:8A:EA:9B:FD:"
    "B9:A0:A2:63:54:4C:5A:2F:DF:93:66:31:CD:19:FB:0E"
)


def _mark_offline(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.offline)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    _mark_offline(items)


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Keep host manifests and CRASHDESK_* variables out of every test."""

    for name in list(os.environ):
        if name.startswith("CRASHDESK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def ca_pem_path() -> Path:
    return FIXTURES_DIR / "ca.pem"


@pytest.fixture
def ca_der_path() -> Path:
    return FIXTURES_DIR / "ca.der"


@pytest.fixture
def ca_pem_bytes(ca_pem_path: Path) -> bytes:
    return ca_pem_path.read_bytes()


@pytest.fixture
def ca_der_bytes(ca_der_path: Path) -> bytes:
    return ca_der_path.read_bytes()


@pytest.fixture
def ca_fingerprint() -> str:
    return CA_SHA256_FINGERPRINT
