"""Key generation and hierarchical deterministic key derivation.

Hardened derivation follows EIP-2333: the parent key is turned into a
Lamport public key, which seeds key generation for the child. It cannot be
computed from a public key.

Unhardened derivation adds a hash of the parent public key and index to the
parent, so the same child public key can be computed from either the parent
private key or the parent public key (watch-only wallets).

Reference: https://eips.ethereum.org/EIPS/eip-2333
"""

import hashlib
import logging

from . import backend
from .errors import InvalidArgumentError
from .hkdf import HASH_LENGTH, extract_expand
from .keys import PrivateKey, PublicKey, Signature, as_bytes
from .types import MAX_DERIVATION_INDEX, PRIVATE_KEY_SIZE

logger = logging.getLogger(__name__)

KEYGEN_SALT = b"BLS-SIG-KEYGEN-SALT-"
KEYGEN_OKM_LENGTH = 48
LAMPORT_CHUNKS = 255


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def index_to_bytes(index: int) -> bytes:
    """Encode a derivation index as four big-endian bytes.

    Raises:
        InvalidArgumentError: If ``index`` is missing or not an unsigned 32-bit int

    """
    if index is None:
        raise InvalidArgumentError("index cannot be None")
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidArgumentError(f"index must be an int, got {type(index).__name__}")
    if index < 0 or index > MAX_DERIVATION_INDEX:
        raise InvalidArgumentError(
            f"index must be between 0 and {MAX_DERIVATION_INDEX}, got {index}"
        )
    return index.to_bytes(4, "big")


def key_gen(seed: bytes) -> PrivateKey:
    """Generate a private key from at least 32 bytes of seed material.

    This is the HKDF-mod-r construction of the IETF BLS signature draft in the
    form used by the Chia BLS library: the salt is not pre-hashed and is only
    rehashed if the derived scalar is zero.

    Raises:
        InvalidArgumentError: If ``seed`` is missing, not bytes or shorter than 32 bytes

    """
    seed = as_bytes(seed, "seed")
    if len(seed) < PRIVATE_KEY_SIZE:
        raise InvalidArgumentError(f"Seed size must be at least {PRIVATE_KEY_SIZE} bytes")

    ikm = seed + b"\x00"
    info = KEYGEN_OKM_LENGTH.to_bytes(2, "big")
    salt = KEYGEN_SALT
    while True:
        okm = extract_expand(salt, ikm, info, KEYGEN_OKM_LENGTH)
        value = backend.scalar_from_be_bytes_mod_order(okm)
        if value != 0:
            return PrivateKey(value)
        salt = _sha256(salt)


def parent_sk_to_lamport_pk(parent_sk: PrivateKey, index: int) -> bytes:
    """Compress a parent key and index into a 32-byte Lamport public key digest."""
    if parent_sk is None:
        raise InvalidArgumentError("parent_sk cannot be None")
    salt = index_to_bytes(index)

    ikm = parent_sk.to_bytes()
    not_ikm = bytes(b ^ 0xFF for b in ikm)
    output_length = HASH_LENGTH * LAMPORT_CHUNKS
    lamport0 = extract_expand(salt, ikm, b"", output_length)
    lamport1 = extract_expand(salt, not_ikm, b"", output_length)

    lamport_pk = b"".join(
        _sha256(lamport[i : i + HASH_LENGTH])
        for lamport in (lamport0, lamport1)
        for i in range(0, output_length, HASH_LENGTH)
    )
    return _sha256(lamport_pk)


def derive_child_sk(parent_sk: PrivateKey, index: int) -> PrivateKey:
    """Derive a hardened child private key."""
    if parent_sk is None:
        raise InvalidArgumentError("parent_sk cannot be None")
    lamport_pk = parent_sk_to_lamport_pk(parent_sk, index)
    logger.debug(f"Derived hardened child key at index {index}")
    return key_gen(lamport_pk)


def derive_child_sk_unhardened(parent_sk: PrivateKey, index: int) -> PrivateKey:
    """Derive an unhardened child private key.

    The child is ``parent + SHA256(parent_pk || index) mod r``.
    """
    if parent_sk is None:
        raise InvalidArgumentError("parent_sk cannot be None")
    index_bytes = index_to_bytes(index)

    digest = _sha256(parent_sk.get_g1().to_bytes() + index_bytes)
    return PrivateKey.aggregate([parent_sk, PrivateKey.from_bytes_mod_order(digest)])


def derive_child_pk_unhardened(parent_pk: PublicKey, index: int) -> PublicKey:
    """Derive an unhardened child public key without the private key.

    Equals ``derive_child_sk_unhardened(sk, index).get_g1()`` for the matching
    private key.
    """
    if parent_pk is None:
        raise InvalidArgumentError("parent_pk cannot be None")
    index_bytes = index_to_bytes(index)

    digest = _sha256(parent_pk.to_bytes() + index_bytes)
    nonce = backend.scalar_from_be_bytes_mod_order(digest)
    return parent_pk + PublicKey(backend.multiply(backend.G1_GENERATOR, nonce))


def derive_child_g2_unhardened(parent_sig: Signature, index: int) -> Signature:
    """Derive an unhardened child of a G2 element.

    The digest is read little-endian here, unlike the big-endian reduction used
    for key derivation.
    """
    if parent_sig is None:
        raise InvalidArgumentError("signature cannot be None")
    index_bytes = index_to_bytes(index)

    digest = _sha256(parent_sig.to_bytes() + index_bytes)
    nonce = backend.scalar_from_le_bytes_mod_order(digest)
    return parent_sig + Signature(backend.multiply(backend.G2_GENERATOR, nonce))
