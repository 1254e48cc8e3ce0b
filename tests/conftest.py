"""Test fixtures and utilities."""

from collections.abc import Iterator

import pytest

from vectors import Vectors, load_vectors
from py3bls.config import reload_config
from py3bls.hd_keys import key_gen
from py3bls.keys import PrivateKey, PublicKey


@pytest.fixture(scope="session")
def vectors() -> Vectors:
    """Load the known-answer vectors."""
    return load_vectors()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Make every test start from the default configuration."""
    for name in ("PY3BLS_LOG_LEVEL", "PY3BLS_DEFAULT_SCHEME", "PY3BLS_METRICS_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture(scope="session")
def private_key() -> PrivateKey:
    """A private key from a fixed seed."""
    return key_gen(bytes([0x05] * 32))


@pytest.fixture(scope="session")
def public_key(private_key: PrivateKey) -> PublicKey:
    """The public key of ``private_key``."""
    return private_key.get_g1()


@pytest.fixture(scope="session")
def other_private_key() -> PrivateKey:
    """A second, unrelated private key."""
    return key_gen(bytes([0x50] * 32))
