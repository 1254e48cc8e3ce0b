"""Tests for key generation and HD derivation."""

import pytest

from vectors import Vectors
from py3bls.errors import InvalidArgumentError
from py3bls.hd_keys import (
    derive_child_g2_unhardened,
    derive_child_pk_unhardened,
    derive_child_sk,
    derive_child_sk_unhardened,
    index_to_bytes,
    key_gen,
    parent_sk_to_lamport_pk,
)
from py3bls.keys import PrivateKey, Signature

UNHARDENED_SEED = bytes(
    [1, 50, 6, 244, 24, 199, 1, 25, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14,
     15, 16, 17, 18, 19, 20, 21, 22, 23, 24, 25, 26, 27, 28, 29]
)


class TestKeyGen:
    """Tests for key_gen."""

    def test_known_answer(self, vectors: Vectors) -> None:
        """Test the private key, public key and fingerprints of known seeds."""
        for vector in vectors.key_gen:
            private_key = key_gen(bytes.fromhex(vector.seed))
            public_key = private_key.get_g1()
            if vector.private_key is not None:
                assert private_key.to_bytes().hex() == vector.private_key
            if vector.public_key is not None:
                assert public_key.to_bytes().hex() == vector.public_key
            assert public_key.fingerprint_hex() == vector.fingerprint_hex
            assert public_key.fingerprint_decimal() == vector.fingerprint_decimal

    def test_deterministic(self) -> None:
        """Test that the same seed always gives the same key."""
        seed = bytes(range(32))
        assert key_gen(seed) == key_gen(seed)
        assert key_gen(bytearray(seed)) == key_gen(seed)

    def test_longer_seed(self) -> None:
        """Test that seeds longer than 32 bytes are accepted and all bytes count."""
        seed = bytes(range(40))
        assert key_gen(seed) != key_gen(seed[:32])

    def test_short_seed(self) -> None:
        """Test that a seed under 32 bytes is rejected."""
        with pytest.raises(InvalidArgumentError, match="at least 32 bytes"):
            key_gen(bytes(31))

    def test_none_seed(self) -> None:
        """Test that a missing seed is rejected."""
        with pytest.raises(InvalidArgumentError, match="seed cannot be None"):
            key_gen(None)

    @pytest.mark.parametrize("seed", [32, "x" * 32, list(range(32))])
    def test_non_bytes_seed(self, seed: object) -> None:
        """Test that a seed must be bytes-like instead of being coerced."""
        with pytest.raises(InvalidArgumentError, match="seed must be bytes"):
            key_gen(seed)

    def test_bytearray_seed(self) -> None:
        """Test that a bytearray seed gives the same key as bytes."""
        seed = bytes([0x07] * 32)
        assert key_gen(bytearray(seed)) == key_gen(seed)


class TestHardenedDerivation:
    """Tests for EIP-2333 hardened derivation."""

    def test_vectors(self, vectors: Vectors) -> None:
        """Test the EIP-2333 master and child keys."""
        for vector in vectors.hardened:
            master = key_gen(bytes.fromhex(vector.seed))
            assert master.to_bytes().hex() == vector.master_sk
            child = derive_child_sk(master, vector.index)
            assert child.to_bytes().hex() == vector.child_sk

    def test_lamport_pk_is_32_bytes(self, private_key: PrivateKey) -> None:
        """Test the Lamport digest size and its dependence on the index."""
        first = parent_sk_to_lamport_pk(private_key, 0)
        second = parent_sk_to_lamport_pk(private_key, 1)
        assert len(first) == 32
        assert first != second

    def test_differs_from_unhardened(self, private_key: PrivateKey) -> None:
        """Test that hardened and unhardened children differ."""
        hardened = derive_child_sk(private_key, 42)
        unhardened = derive_child_sk_unhardened(private_key, 42)
        assert hardened != unhardened
        assert hardened.get_g1() != derive_child_pk_unhardened(private_key.get_g1(), 42)

    def test_none_parent(self) -> None:
        """Test that a missing parent key is rejected."""
        with pytest.raises(InvalidArgumentError, match="parent_sk cannot be None"):
            derive_child_sk(None, 0)


class TestUnhardenedDerivation:
    """Tests for unhardened derivation."""

    def test_private_and_public_paths_agree(self) -> None:
        """Test that private and public derivation commute through two levels."""
        private_key = key_gen(UNHARDENED_SEED)
        public_key = private_key.get_g1()

        child_sk = derive_child_sk_unhardened(private_key, 42)
        child_pk = derive_child_pk_unhardened(public_key, 42)
        assert child_sk.get_g1() == child_pk

        grandchild_sk = derive_child_sk_unhardened(child_sk, 12142)
        grandchild_pk = derive_child_pk_unhardened(child_pk, 12142)
        assert grandchild_sk.get_g1() == grandchild_pk

    def test_deterministic_and_index_sensitive(self, private_key: PrivateKey) -> None:
        """Test that children depend only on the parent and index."""
        assert derive_child_sk_unhardened(private_key, 7) == derive_child_sk_unhardened(
            private_key, 7
        )
        assert derive_child_sk_unhardened(private_key, 7) != derive_child_sk_unhardened(
            private_key, 8
        )

    def test_g2_child(self, private_key: PrivateKey) -> None:
        """Test that the signature child differs from its parent and is valid."""
        parent = private_key.get_g2()
        child = derive_child_g2_unhardened(parent, 5)
        assert child != parent
        assert child.is_valid()
        assert derive_child_g2_unhardened(parent, 5) == child

    def test_g2_child_of_zero(self) -> None:
        """Test that the identity still has a well-defined child."""
        child = derive_child_g2_unhardened(Signature.ZERO, 0)
        assert isinstance(child, Signature)
        assert child.is_valid()

    def test_none_arguments(self) -> None:
        """Test that missing parents are rejected."""
        with pytest.raises(InvalidArgumentError, match="parent_sk cannot be None"):
            derive_child_sk_unhardened(None, 0)
        with pytest.raises(InvalidArgumentError, match="parent_pk cannot be None"):
            derive_child_pk_unhardened(None, 0)
        with pytest.raises(InvalidArgumentError, match="signature cannot be None"):
            derive_child_g2_unhardened(None, 0)


class TestIndexToBytes:
    """Tests for derivation index validation."""

    def test_bounds(self) -> None:
        """Test the smallest and largest indices."""
        assert index_to_bytes(0) == b"\x00\x00\x00\x00"
        assert index_to_bytes(0xFFFFFFFF) == b"\xff\xff\xff\xff"
        assert index_to_bytes(3141592653) == (3141592653).to_bytes(4, "big")

    @pytest.mark.parametrize("index", [-1, 2**32])
    def test_out_of_range(self, index: int) -> None:
        """Test that indices outside the u32 range are rejected."""
        with pytest.raises(InvalidArgumentError, match="index must be between"):
            index_to_bytes(index)

    @pytest.mark.parametrize("index", [True, 1.0, "1"])
    def test_wrong_type(self, index: object) -> None:
        """Test that non-int indices are rejected."""
        with pytest.raises(InvalidArgumentError, match="index must be an int"):
            index_to_bytes(index)

    def test_none(self) -> None:
        """Test that a missing index is rejected."""
        with pytest.raises(InvalidArgumentError, match="index cannot be None"):
            index_to_bytes(None)

    def test_derivation_checks_index(self, private_key: PrivateKey) -> None:
        """Test that derivation functions validate the index."""
        with pytest.raises(InvalidArgumentError):
            derive_child_sk(private_key, -1)
        with pytest.raises(InvalidArgumentError):
            derive_child_pk_unhardened(private_key.get_g1(), 2**32)
