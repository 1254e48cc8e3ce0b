"""Derivation path utilities.

This module parses EIP-2334 style paths such as ``m/12381/3600/0/0`` and
walks them with the hardened or unhardened derivation functions.
"""

from collections.abc import Sequence

from .errors import InvalidArgumentError
from .hd_keys import (
    derive_child_pk_unhardened,
    derive_child_sk,
    derive_child_sk_unhardened,
)
from .keys import PrivateKey, PublicKey
from .types import MAX_DERIVATION_INDEX, DerivationIndex


def parse_derivation_path(path: str) -> list[DerivationIndex]:
    """Parse a derivation path into its child indices.

    Args:
        path: A path starting with ``m`` (e.g., "m/12381/3600/0/0"); "m" alone
            is the master key and yields no indices

    Returns:
        The indices in derivation order

    Raises:
        InvalidArgumentError: If the path is malformed or an index is outside
            the unsigned 32-bit range

    """
    if path is None:
        raise InvalidArgumentError("path cannot be None")
    if not isinstance(path, str):
        raise InvalidArgumentError(f"path must be a str, got {type(path).__name__}")

    segments = path.strip().split("/")
    if segments[0] != "m":
        raise InvalidArgumentError(f"Derivation path must start with 'm': {path!r}")

    indices: list[DerivationIndex] = []
    for segment in segments[1:]:
        # int() would also accept "+1", " 1" and "1_0"
        if not segment.isdigit() or not segment.isascii():
            raise InvalidArgumentError(f"Invalid path segment {segment!r} in {path!r}")
        index = int(segment)
        if index > MAX_DERIVATION_INDEX:
            raise InvalidArgumentError(
                f"Path index {index} exceeds {MAX_DERIVATION_INDEX} in {path!r}"
            )
        indices.append(DerivationIndex(index))
    return indices


def _indices(path: str | Sequence[int]) -> Sequence[int]:
    if isinstance(path, str):
        return parse_derivation_path(path)
    if path is None:
        raise InvalidArgumentError("path cannot be None")
    return path


def derive_path(master_sk: PrivateKey, path: str | Sequence[int]) -> PrivateKey:
    """Derive a private key with hardened derivation at every level.

    Args:
        master_sk: The root private key
        path: A path string or a sequence of indices

    Returns:
        The private key at the end of the path

    """
    key = master_sk
    for index in _indices(path):
        key = derive_child_sk(key, index)
    return key


def derive_path_unhardened(master_sk: PrivateKey, path: str | Sequence[int]) -> PrivateKey:
    """Derive a private key with unhardened derivation at every level."""
    key = master_sk
    for index in _indices(path):
        key = derive_child_sk_unhardened(key, index)
    return key


def derive_public_path_unhardened(
    master_pk: PublicKey, path: str | Sequence[int]
) -> PublicKey:
    """Derive a public key without the private key.

    The result equals ``derive_path_unhardened(master_sk, path).get_g1()``.
    """
    key = master_pk
    for index in _indices(path):
        key = derive_child_pk_unhardened(key, index)
    return key
