"""Type definitions for py3bls.

This module contains type aliases and NewType definitions for domain-specific
types to improve type safety and code readability.
"""

from typing import NewType

PrivateKeyBytes = NewType("PrivateKeyBytes", bytes)
"""Big-endian private key scalar (32 bytes)."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""Compressed G1 public key (48 bytes)."""

SignatureBytes = NewType("SignatureBytes", bytes)
"""Compressed G2 signature (96 bytes)."""

Fingerprint = NewType("Fingerprint", int)
"""First four bytes of SHA-256 over a compressed public key, as an unsigned int."""

DerivationIndex = NewType("DerivationIndex", int)
"""Unsigned 32-bit child index used by hardened and unhardened derivation."""

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 48
SIGNATURE_SIZE = 96
MAX_DERIVATION_INDEX = 0xFFFFFFFF
