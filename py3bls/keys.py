"""BLS key material: private keys, public keys and signatures.

All three are immutable values. Public keys live in G1 and signatures in G2;
both accept the point at infinity as valid for compatibility with the Chia
BLS library, which inherited that behaviour from older Relic releases.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

from . import backend
from .backend import Point
from .errors import InvalidArgumentError
from .types import (
    PRIVATE_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    SIGNATURE_SIZE,
    Fingerprint,
    PrivateKeyBytes,
    PublicKeyBytes,
    SignatureBytes,
)


def as_bytes(data: object, what: str) -> bytes:
    """Copy a bytes-like argument into ``bytes``.

    Raises:
        InvalidArgumentError: If ``data`` is None or not bytes, bytearray or memoryview

    """
    if data is None:
        raise InvalidArgumentError(f"{what} cannot be None")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(f"{what} must be bytes, got {type(data).__name__}")
    return bytes(data)


def _require_bytes(data: bytes | None, size: int, what: str) -> bytes:
    data = as_bytes(data, f"{what} bytes")
    if len(data) != size:
        raise InvalidArgumentError(f"Byte representation size must be {size}, got {len(data)}")
    return data


@dataclass(frozen=True, slots=True, eq=False)
class PrivateKey:
    """A BLS private key: a scalar strictly below the group order."""

    value: int

    SIZE: ClassVar[int] = PRIVATE_KEY_SIZE
    ZERO: ClassVar[PrivateKey]

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgumentError("PrivateKey value must be an int")
        if self.value < 0:
            raise InvalidArgumentError("PrivateKey value cannot be negative")
        if self.value >= backend.CURVE_ORDER:
            raise InvalidArgumentError("PrivateKey byte data must be less than the group order")

    @classmethod
    def from_bytes(cls, data: bytes) -> PrivateKey:
        """Load a 32-byte big-endian private key without reducing it.

        Raises:
            InvalidArgumentError: If ``data`` is not 32 bytes or encodes a value
                not below the group order

        """
        data = _require_bytes(data, PRIVATE_KEY_SIZE, "PrivateKey")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_bytes_mod_order(cls, data: bytes) -> PrivateKey:
        """Load a 32-byte big-endian value reduced modulo the group order."""
        data = _require_bytes(data, PRIVATE_KEY_SIZE, "PrivateKey")
        return cls(backend.scalar_from_be_bytes_mod_order(data))

    @classmethod
    def aggregate(cls, private_keys: Iterable[PrivateKey]) -> PrivateKey:
        """Sum private keys modulo the group order.

        The public key of the result equals the sum of the individual public keys.
        """
        if private_keys is None:
            raise InvalidArgumentError("List of private keys cannot be None or empty")
        keys = list(private_keys)
        if not keys:
            raise InvalidArgumentError("List of private keys cannot be None or empty")

        total = 0
        for key in keys:
            if not isinstance(key, PrivateKey):
                raise InvalidArgumentError("Invalid private key found in the list")
            total += key.value
        return cls(total % backend.CURVE_ORDER)

    def to_bytes(self) -> PrivateKeyBytes:
        return PrivateKeyBytes(self.value.to_bytes(PRIVATE_KEY_SIZE, "big"))

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def get_g1(self) -> PublicKey:
        """Return the public key ``G1 * sk``."""
        return PublicKey(backend.multiply(backend.G1_GENERATOR, self.value))

    def get_g2(self) -> Signature:
        """Return ``G2 * sk`` as a signature element."""
        return Signature(backend.multiply(backend.G2_GENERATOR, self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((PrivateKey, self.value))

    def __str__(self) -> str:
        return "0x" + self.to_bytes().hex()

    def __repr__(self) -> str:
        return "PrivateKey(<redacted>)"


PrivateKey.ZERO = PrivateKey(0)


def _scalar(value: PrivateKey | int) -> int:
    if isinstance(value, PrivateKey):
        return value.value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise InvalidArgumentError("Scalar must be a PrivateKey or an int")


@dataclass(frozen=True, slots=True, eq=False)
class _GroupElement(ABC):
    """Shared behaviour of G1 and G2 elements."""

    point: Point

    SIZE: ClassVar[int]
    NAME: ClassVar[str]

    @staticmethod
    @abstractmethod
    def _encode(point: Point) -> bytes:
        """Compress a point of this group."""

    @staticmethod
    @abstractmethod
    def _decode(data: bytes) -> Point:
        """Decompress a point of this group, raising ValueError if malformed."""

    @classmethod
    def _decode_checked(cls, data: bytes) -> Point:
        data = _require_bytes(data, cls.SIZE, cls.NAME)
        try:
            return cls._decode(data)
        except ValueError as e:
            raise InvalidArgumentError(f"{cls.NAME} is invalid") from e

    def to_bytes(self) -> bytes:
        """Return the compressed encoding."""
        return self._encode(self.point)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def is_valid(self) -> bool:
        """Return True if the point is at infinity or in the prime-order subgroup."""
        if backend.is_inf(self.point):
            return True
        return backend.in_subgroup(self.point)

    def is_infinity(self) -> bool:
        return backend.is_inf(self.point)

    def __add__(self, other: object):
        if not isinstance(other, type(self)):
            return NotImplemented
        return type(self)(backend.add(self.point, other.point))

    def add(self, other):
        """Return the group sum; unlike ``+`` this raises on a foreign operand."""
        if other is None:
            raise InvalidArgumentError(f"The provided {self.NAME} cannot be None")
        if not isinstance(other, type(self)):
            raise InvalidArgumentError(f"Cannot add {type(other).__name__} to {self.NAME}")
        return self + other

    def __neg__(self):
        return type(self)(backend.neg(self.point))

    def negate(self):
        return -self

    def __mul__(self, scalar: object):
        if not isinstance(scalar, (PrivateKey, int)) or isinstance(scalar, bool):
            return NotImplemented
        return type(self)(backend.multiply(self.point, _scalar(scalar)))

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return backend.eq(self.point, other.point)

    def __hash__(self) -> int:
        return hash((type(self), self.to_bytes()))

    def __str__(self) -> str:
        return "0x" + self.to_bytes().hex()

    def __repr__(self) -> str:
        return f"{self.NAME}({self.to_bytes().hex()})"


@dataclass(frozen=True, slots=True, eq=False)
class PublicKey(_GroupElement):
    """A BLS public key: a G1 element."""

    SIZE: ClassVar[int] = PUBLIC_KEY_SIZE
    NAME: ClassVar[str] = "PublicKey"
    ZERO: ClassVar[PublicKey]

    @staticmethod
    def _encode(point: Point) -> bytes:
        return backend.g1_compress(point)

    @staticmethod
    def _decode(data: bytes) -> Point:
        return backend.g1_decompress(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> PublicKey:
        """Decode a 48-byte compressed public key and check it.

        Raises:
            InvalidArgumentError: If the encoding is malformed or the point is
                neither infinity nor in the G1 subgroup

        """
        public_key = cls(cls._decode_checked(data))
        if not public_key.is_valid():
            raise InvalidArgumentError("PublicKey is invalid")
        return public_key

    @classmethod
    def from_bytes_unchecked(cls, data: bytes) -> PublicKey:
        """Decode a 48-byte compressed public key without the subgroup check."""
        return cls(cls._decode_checked(data))

    @classmethod
    def generator(cls) -> PublicKey:
        return cls(backend.G1_GENERATOR)

    def to_bytes(self) -> PublicKeyBytes:
        return PublicKeyBytes(self._encode(self.point))

    def get_fingerprint(self) -> Fingerprint:
        """Return the first four bytes of SHA-256 over the compressed key as an int.

        Fingerprints identify keys for humans; they are not collision resistant.
        """
        digest = hashlib.sha256(self.to_bytes()).digest()
        return Fingerprint(int.from_bytes(digest[:4], "big"))

    def fingerprint_hex(self) -> str:
        return f"0x{self.get_fingerprint():08x}"

    def fingerprint_decimal(self) -> str:
        return str(self.get_fingerprint())


PublicKey.ZERO = PublicKey(backend.G1_INFINITY)


@dataclass(frozen=True, slots=True, eq=False)
class Signature(_GroupElement):
    """A BLS signature: a G2 element."""

    SIZE: ClassVar[int] = SIGNATURE_SIZE
    NAME: ClassVar[str] = "Signature"
    ZERO: ClassVar[Signature]

    @staticmethod
    def _encode(point: Point) -> bytes:
        return backend.g2_compress(point)

    @staticmethod
    def _decode(data: bytes) -> Point:
        return backend.g2_decompress(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        """Decode a 96-byte compressed signature.

        Only the encoding and curve membership are checked here; subgroup
        membership is checked during verification.

        Raises:
            InvalidArgumentError: If ``data`` is not 96 bytes or not a G2 point

        """
        return cls(cls._decode_checked(data))

    @classmethod
    def generator(cls) -> Signature:
        return cls(backend.G2_GENERATOR)

    def to_bytes(self) -> SignatureBytes:
        return SignatureBytes(self._encode(self.point))


Signature.ZERO = Signature(backend.G2_INFINITY)
