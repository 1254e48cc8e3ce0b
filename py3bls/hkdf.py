"""HMAC-SHA256 key derivation (RFC 5869 extract-then-expand).

Used by key generation and by the Lamport step of hardened derivation.
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .errors import InvalidArgumentError
from .keys import as_bytes

HASH_LENGTH = 32
MAX_OUTPUT_LENGTH = 255 * HASH_LENGTH


def extract_expand(salt: bytes, ikm: bytes, info: bytes, length: int) -> bytes:
    """Run HKDF-Extract followed by HKDF-Expand with SHA-256.

    Args:
        salt: Extract salt (may be empty)
        ikm: Input keying material
        info: Expand context string (may be empty)
        length: Number of output bytes, at most 255 * 32

    Returns:
        ``length`` bytes of output keying material

    Raises:
        InvalidArgumentError: If any argument is missing, a byte argument is not bytes,
            or ``length`` is out of range

    """
    salt = as_bytes(salt, "salt")
    ikm = as_bytes(ikm, "ikm")
    info = as_bytes(info, "info")
    if length is None:
        raise InvalidArgumentError("length cannot be None")
    if length < 1 or length > MAX_OUTPUT_LENGTH:
        raise InvalidArgumentError(
            f"HKDF output length must be between 1 and {MAX_OUTPUT_LENGTH}, got {length}"
        )

    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        info=info,
    )
    return hkdf.derive(ikm)
