"""Domain separation tags for the BLS12-381 G2 ciphersuites.

Each signing scheme hashes messages to G2 under its own tag so that a
signature produced under one scheme never verifies under another.

Reference: https://datatracker.ietf.org/doc/draft-irtf-cfrg-bls-signature/
"""

from enum import Enum


class CipherSuiteID(str, Enum):
    """Fixed ASCII domain separation tags, one per scheme."""

    BASIC = "BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"
    AUGMENTED = "BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_AUG_"
    PROOF_OF_POSSESSION = "BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_POP_"
    POP_PROOF = "BLS_POP_BLS12381G2_XMD:SHA-256_SSWU_RO_POP_"

    @property
    def dst(self) -> bytes:
        """Return the tag as the bytes fed to hash-to-curve."""
        return self.value.encode("ascii")
