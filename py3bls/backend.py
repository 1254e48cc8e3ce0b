"""BLS12-381 curve backend.

Thin layer over ``py_ecc`` exposing only what the protocol layer needs:
scalar reduction, G1/G2 group operations, point (de)compression,
hash-to-G2 under a domain separation tag, and pairing-based verification.

Points are ``py_ecc`` optimized (projective) tuples; callers treat them as
opaque and never touch their coordinates.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from py_ecc.bls.g2_primitives import subgroup_check
from py_ecc.bls.hash_to_curve import hash_to_G2
from py_ecc.bls.point_compression import (
    compress_G1,
    compress_G2,
    decompress_G1,
    decompress_G2,
)
from py_ecc.bls.typing import G1Compressed, G2Compressed
from py_ecc.optimized_bls12_381 import (
    FQ12,
    G1,
    G2,
    Z1,
    Z2,
    curve_order,
    final_exponentiate,
    pairing,
)
from py_ecc.optimized_bls12_381 import add as _add
from py_ecc.optimized_bls12_381 import eq as _eq
from py_ecc.optimized_bls12_381 import is_inf as _is_inf
from py_ecc.optimized_bls12_381 import multiply as _multiply
from py_ecc.optimized_bls12_381 import neg as _neg

logger = logging.getLogger(__name__)

Point = Any
"""An optimized py_ecc point in G1 or G2."""

CURVE_ORDER: int = curve_order
G1_GENERATOR: Point = G1
G2_GENERATOR: Point = G2
G1_INFINITY: Point = Z1
G2_INFINITY: Point = Z2

G1_COMPRESSED_SIZE = 48
G2_COMPRESSED_SIZE = 96


# Scalars


def scalar_from_be_bytes_mod_order(data: bytes) -> int:
    """Interpret ``data`` as a big-endian integer reduced modulo the group order."""
    return int.from_bytes(data, "big") % CURVE_ORDER


def scalar_from_le_bytes_mod_order(data: bytes) -> int:
    """Interpret ``data`` as a little-endian integer reduced modulo the group order."""
    return int.from_bytes(data, "little") % CURVE_ORDER


# Group operations


def add(p: Point, q: Point) -> Point:
    return _add(p, q)


def neg(p: Point) -> Point:
    return _neg(p)


def multiply(p: Point, scalar: int) -> Point:
    """Scalar multiplication; ``scalar`` is reduced modulo the group order."""
    return _multiply(p, scalar % CURVE_ORDER)


def eq(p: Point, q: Point) -> bool:
    return bool(_eq(p, q))


def is_inf(p: Point) -> bool:
    return bool(_is_inf(p))


def in_subgroup(p: Point) -> bool:
    """Return True if ``p`` lies in the prime-order subgroup."""
    return bool(subgroup_check(p))


# Serialization


def g1_compress(p: Point) -> bytes:
    return int(compress_G1(p)).to_bytes(G1_COMPRESSED_SIZE, "big")


def g1_decompress(data: bytes) -> Point:
    """Decode a compressed G1 point.

    Checks encoding flags and curve membership but not subgroup membership.

    Raises:
        ValueError: If ``data`` is not a valid compressed G1 point

    """
    if len(data) != G1_COMPRESSED_SIZE:
        raise ValueError(f"G1 point must be {G1_COMPRESSED_SIZE} bytes, got {len(data)}")
    return decompress_G1(G1Compressed(int.from_bytes(data, "big")))


def g2_compress(p: Point) -> bytes:
    z1, z2 = compress_G2(p)
    return int(z1).to_bytes(48, "big") + int(z2).to_bytes(48, "big")


def g2_decompress(data: bytes) -> Point:
    """Decode a compressed G2 point.

    Checks encoding flags and curve membership but not subgroup membership.

    Raises:
        ValueError: If ``data`` is not a valid compressed G2 point

    """
    if len(data) != G2_COMPRESSED_SIZE:
        raise ValueError(f"G2 point must be {G2_COMPRESSED_SIZE} bytes, got {len(data)}")
    z1 = int.from_bytes(data[:48], "big")
    z2 = int.from_bytes(data[48:], "big")
    return decompress_G2(G2Compressed((z1, z2)))


# Hashing and pairing


def hash_to_g2(message: bytes, dst: bytes) -> Point:
    """Hash ``message`` to a G2 point under domain separation tag ``dst``."""
    return hash_to_G2(message, dst, hashlib.sha256)


def core_verify(pk_point: Point, sig_point: Point, message: bytes, dst: bytes) -> bool:
    """Check ``e(sig, G1) == e(H(message), pk)``.

    Returns False instead of evaluating the pairing when the public key is the
    point at infinity or either point lies outside its prime-order subgroup.
    """
    if is_inf(pk_point):
        return False
    if not in_subgroup(pk_point) or not in_subgroup(sig_point):
        return False

    gt = pairing(sig_point, G1, final_exponentiate=False) * pairing(
        hash_to_g2(message, dst), _neg(pk_point), final_exponentiate=False
    )
    return final_exponentiate(gt) == FQ12.one()


class PairingError(Exception):
    """The pairing accumulator was used out of order."""


class Pairing:
    """Multi-pairing accumulator for aggregate verification.

    Usage mirrors the classic accumulate/commit/verify flow::

        ctx = Pairing(dst)
        for pk, msg in zip(pks, msgs):
            if not ctx.aggregate(pk, sig, msg):
                return False
        ctx.commit()
        ok = ctx.final_verify()

    Each ``aggregate`` multiplies ``e(H(msg), pk)`` into the accumulator. The
    signature is taken from the first call and checked for subgroup membership
    once. ``commit`` folds in ``e(sig, -G1)`` and ``final_verify`` performs the
    single final exponentiation.
    """

    def __init__(self, dst: bytes) -> None:
        self._dst = dst
        self._gt = FQ12.one()
        self._signature: Point | None = None
        self._committed = False

    def aggregate(self, pk_point: Point, sig_point: Point, message: bytes) -> bool:
        """Accumulate one (public key, message) term.

        Returns:
            False if the term cannot be accumulated (infinity public key or a
            signature outside the G2 subgroup), True otherwise

        """
        if self._committed:
            raise PairingError("Pairing already committed")
        if is_inf(pk_point):
            logger.debug("Refusing to aggregate a public key at infinity")
            return False
        if self._signature is None:
            if not in_subgroup(sig_point):
                logger.debug("Aggregate signature is not in the G2 subgroup")
                return False
            self._signature = sig_point

        self._gt = self._gt * pairing(
            hash_to_g2(message, self._dst), pk_point, final_exponentiate=False
        )
        return True

    def commit(self) -> None:
        """Fold the signature term into the accumulator."""
        if self._committed:
            raise PairingError("Pairing already committed")
        if self._signature is None:
            raise PairingError("Nothing aggregated")
        self._gt = self._gt * pairing(self._signature, _neg(G1), final_exponentiate=False)
        self._committed = True

    def final_verify(self) -> bool:
        """Return True iff the committed product exponentiates to one."""
        if not self._committed:
            raise PairingError("Pairing must be committed before final verification")
        return final_exponentiate(self._gt) == FQ12.one()
