"""BLS signature schemes: Basic, Message Augmentation and Proof of Possession.

All three share the same sign/verify/aggregate machinery and differ only in
the domain separation tag and in how messages are transformed before they
are hashed to G2:

- Basic (``BASIC_SCHEME``) requires the messages of an aggregate to be distinct.
- Augmented (``AUG_SCHEME``) prefixes every message with its signer's public key.
- Proof of Possession (``POP_SCHEME``) leaves messages alone and relies on each
  key having presented a possession proof, which enables fast aggregate
  verification of many signatures over one message.

Scheme objects hold no state; use the module-level instances or
``get_scheme(kind)``.

Reference: https://datatracker.ietf.org/doc/draft-irtf-cfrg-bls-signature/
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any, ClassVar, TypeVar

from . import backend, hd_keys
from .ciphersuites import CipherSuiteID
from .config import get_config
from .errors import InvalidArgumentError
from .keys import PrivateKey, PublicKey, Signature
from .metrics import record_verification, track_operation

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SchemeKind(str, Enum):
    """Explicit tag for selecting a scheme."""

    BASIC = "basic"
    AUG = "aug"
    POP = "pop"


def _require(value: Any, name: str, kind: type[T]) -> T:
    if value is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    if not isinstance(value, kind):
        raise InvalidArgumentError(
            f"{name} must be a {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _message_bytes(message: Any, name: str = "message") -> bytes:
    if message is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    if not isinstance(message, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(f"{name} must be bytes, got {type(message).__name__}")
    return bytes(message)


def _require_list(values: Any, name: str, kind: type[T]) -> list[T]:
    if values is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    items = list(values)
    for item in items:
        if item is None:
            raise InvalidArgumentError(f"{name} cannot contain None")
        if not isinstance(item, kind):
            raise InvalidArgumentError(
                f"{name} must contain only {kind.__name__}, got {type(item).__name__}"
            )
    return items


def _require_messages(values: Any) -> list[bytes]:
    if values is None:
        raise InvalidArgumentError("messages cannot be None")
    return [_message_bytes(message, "messages") for message in values]


class CoreSignatureScheme:
    """Shared sign, verify and aggregate logic bound to one ciphersuite."""

    kind: ClassVar[SchemeKind]
    ciphersuite: ClassVar[CipherSuiteID]

    key_gen = staticmethod(hd_keys.key_gen)

    @property
    def dst(self) -> bytes:
        return self.ciphersuite.dst

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.ciphersuite.value})"

    # Primitives shared by all schemes

    @staticmethod
    def _core_sign(private_key: PrivateKey, message: bytes, dst: bytes) -> Signature:
        return Signature(backend.multiply(backend.hash_to_g2(message, dst), private_key.value))

    @staticmethod
    def _core_verify(
        public_key: PublicKey, message: bytes, signature: Signature, dst: bytes
    ) -> bool:
        return backend.core_verify(public_key.point, signature.point, message, dst)

    @staticmethod
    def _core_aggregate_verify(
        public_keys: Sequence[PublicKey],
        messages: Sequence[bytes],
        signature: Signature,
        dst: bytes,
    ) -> bool:
        pairing = backend.Pairing(dst)
        for public_key, message in zip(public_keys, messages):
            if not pairing.aggregate(public_key.point, signature.point, message):
                logger.debug("Aggregate verification short-circuited by the pairing backend")
                return False
        pairing.commit()
        return pairing.final_verify()

    @staticmethod
    def _sum(elements: list[T]) -> T:
        total = elements[0]
        for element in elements[1:]:
            total = total + element
        return total

    # Per-scheme hooks

    def _aggregate_verify(
        self, public_keys: list[PublicKey], messages: list[bytes], signature: Signature
    ) -> bool:
        return self._core_aggregate_verify(public_keys, messages, signature, self.dst)

    # Public API

    def sk_to_pk(self, private_key: PrivateKey) -> PublicKey:
        """Return the public key of ``private_key``."""
        return _require(private_key, "private_key", PrivateKey).get_g1()

    def sign(self, private_key: PrivateKey, message: bytes) -> Signature:
        """Sign ``message`` as ``H(message) * sk`` under this scheme's tag."""
        with track_operation(self.kind.value, "sign"):
            private_key = _require(private_key, "private_key", PrivateKey)
            message = _message_bytes(message)
            return self._core_sign(private_key, message, self.dst)

    def verify(self, public_key: PublicKey, message: bytes, signature: Signature) -> bool:
        """Return True iff ``e(signature, G1) == e(H(message), public_key)``.

        A public key at infinity or a signature outside the G2 subgroup
        verifies False.

        Raises:
            InvalidArgumentError: If any argument is missing or of the wrong type

        """
        with track_operation(self.kind.value, "verify"):
            public_key = _require(public_key, "public_key", PublicKey)
            message = _message_bytes(message)
            signature = _require(signature, "signature", Signature)
            result = self._core_verify(public_key, message, signature, self.dst)
        return record_verification(self.kind.value, "verify", result)

    def aggregate(self, signatures: Sequence[Signature]) -> Signature:
        """Sum signatures in G2.

        Raises:
            InvalidArgumentError: If the list is missing, empty or holds None

        """
        with track_operation(self.kind.value, "aggregate"):
            items = _require_list(signatures, "signatures", Signature)
            if not items:
                raise InvalidArgumentError("signatures cannot be empty")
            return self._sum(items)

    def aggregate_public_keys(self, public_keys: Sequence[PublicKey]) -> PublicKey:
        """Sum public keys in G1."""
        with track_operation(self.kind.value, "aggregate_public_keys"):
            items = _require_list(public_keys, "public_keys", PublicKey)
            if not items:
                raise InvalidArgumentError("public_keys cannot be empty")
            return self._sum(items)

    def aggregate_verify(
        self,
        public_keys: Sequence[PublicKey],
        messages: Sequence[bytes],
        signature: Signature,
    ) -> bool:
        """Verify one aggregate signature over parallel keys and messages.

        With no public keys the result is True only if there are also no
        messages and ``signature`` is ``Signature.ZERO``.

        Raises:
            InvalidArgumentError: If an argument or list element is missing, or
                a non-empty key list differs in length from the message list

        """
        with track_operation(self.kind.value, "aggregate_verify"):
            keys = _require_list(public_keys, "public_keys", PublicKey)
            msgs = _require_messages(messages)
            signature = _require(signature, "signature", Signature)

            if not keys:
                result = not msgs and signature == Signature.ZERO
            elif len(keys) != len(msgs):
                raise InvalidArgumentError(
                    f"public_keys and messages must have the same length, "
                    f"got {len(keys)} and {len(msgs)}"
                )
            else:
                result = self._aggregate_verify(keys, msgs, signature)
        return record_verification(self.kind.value, "aggregate_verify", result)

    # Key derivation

    def derive_child_sk(self, parent_sk: PrivateKey, index: int) -> PrivateKey:
        """Hardened child private key (EIP-2333)."""
        return hd_keys.derive_child_sk(_require(parent_sk, "parent_sk", PrivateKey), index)

    def derive_child_sk_unhardened(self, parent_sk: PrivateKey, index: int) -> PrivateKey:
        return hd_keys.derive_child_sk_unhardened(
            _require(parent_sk, "parent_sk", PrivateKey), index
        )

    def derive_child_pk_unhardened(self, parent_pk: PublicKey, index: int) -> PublicKey:
        return hd_keys.derive_child_pk_unhardened(
            _require(parent_pk, "parent_pk", PublicKey), index
        )

    def derive_child_g2_unhardened(self, parent_sig: Signature, index: int) -> Signature:
        return hd_keys.derive_child_g2_unhardened(
            _require(parent_sig, "signature", Signature), index
        )


class BasicSchemeMPL(CoreSignatureScheme):
    """Basic scheme: aggregates must cover distinct messages."""

    kind = SchemeKind.BASIC
    ciphersuite = CipherSuiteID.BASIC

    def _aggregate_verify(
        self, public_keys: list[PublicKey], messages: list[bytes], signature: Signature
    ) -> bool:
        if len(set(messages)) != len(messages):
            logger.debug("Basic scheme aggregate rejected: duplicate messages")
            return False
        return super()._aggregate_verify(public_keys, messages, signature)


class AugSchemeMPL(CoreSignatureScheme):
    """Message augmentation scheme: every message is bound to its signer's key."""

    kind = SchemeKind.AUG
    ciphersuite = CipherSuiteID.AUGMENTED

    def sign(
        self,
        private_key: PrivateKey,
        message: bytes,
        public_key: PublicKey | None = None,
    ) -> Signature:
        """Sign ``bytes(public_key) || message``.

        ``public_key`` defaults to the signer's own key. Passing an aggregate
        public key lets several signers produce shares of a signature that
        verifies against that aggregate.
        """
        with track_operation(self.kind.value, "sign"):
            private_key = _require(private_key, "private_key", PrivateKey)
            message = _message_bytes(message)
            if public_key is None:
                public_key = private_key.get_g1()
            else:
                public_key = _require(public_key, "public_key", PublicKey)
            return self._core_sign(private_key, public_key.to_bytes() + message, self.dst)

    def verify(self, public_key: PublicKey, message: bytes, signature: Signature) -> bool:
        with track_operation(self.kind.value, "verify"):
            public_key = _require(public_key, "public_key", PublicKey)
            message = _message_bytes(message)
            signature = _require(signature, "signature", Signature)
            result = self._core_verify(
                public_key, public_key.to_bytes() + message, signature, self.dst
            )
        return record_verification(self.kind.value, "verify", result)

    def _aggregate_verify(
        self, public_keys: list[PublicKey], messages: list[bytes], signature: Signature
    ) -> bool:
        augmented = [pk.to_bytes() + msg for pk, msg in zip(public_keys, messages)]
        return super()._aggregate_verify(public_keys, augmented, signature)


class PopSchemeMPL(CoreSignatureScheme):
    """Proof of possession scheme.

    Repeated messages are allowed in aggregates. Keys must be checked with
    ``pop_verify`` before they are trusted.
    """

    kind = SchemeKind.POP
    ciphersuite = CipherSuiteID.PROOF_OF_POSSESSION
    proof_ciphersuite: ClassVar[CipherSuiteID] = CipherSuiteID.POP_PROOF

    def pop_prove(self, private_key: PrivateKey) -> Signature:
        """Sign the serialized public key under the possession proof tag."""
        with track_operation(self.kind.value, "pop_prove"):
            private_key = _require(private_key, "private_key", PrivateKey)
            public_key = private_key.get_g1()
            return self._core_sign(
                private_key, public_key.to_bytes(), self.proof_ciphersuite.dst
            )

    def pop_verify(self, public_key: PublicKey, proof: Signature) -> bool:
        with track_operation(self.kind.value, "pop_verify"):
            public_key = _require(public_key, "public_key", PublicKey)
            proof = _require(proof, "proof", Signature)
            result = self._core_verify(
                public_key, public_key.to_bytes(), proof, self.proof_ciphersuite.dst
            )
        return record_verification(self.kind.value, "pop_verify", result)

    def fast_aggregate_verify(
        self, public_keys: Sequence[PublicKey], message: bytes, signature: Signature
    ) -> bool:
        """Verify a signature that many keys produced over the same message.

        Returns False for an empty key list. Only sound for keys whose
        possession proofs have been verified.
        """
        with track_operation(self.kind.value, "fast_aggregate_verify"):
            keys = _require_list(public_keys, "public_keys", PublicKey)
            message = _message_bytes(message)
            signature = _require(signature, "signature", Signature)
            if not keys:
                logger.debug("fast_aggregate_verify called with no public keys")
                result = False
            else:
                result = self._core_verify(self._sum(keys), message, signature, self.dst)
        return record_verification(self.kind.value, "fast_aggregate_verify", result)


BASIC_SCHEME = BasicSchemeMPL()
AUG_SCHEME = AugSchemeMPL()
POP_SCHEME = PopSchemeMPL()

_SCHEMES: dict[SchemeKind, CoreSignatureScheme] = {
    SchemeKind.BASIC: BASIC_SCHEME,
    SchemeKind.AUG: AUG_SCHEME,
    SchemeKind.POP: POP_SCHEME,
}


def get_scheme(kind: SchemeKind | str | None = None) -> CoreSignatureScheme:
    """Return the scheme instance for ``kind``.

    Without a kind, ``Config.default_scheme`` selects the scheme.

    Raises:
        InvalidArgumentError: If ``kind`` names no scheme

    """
    if kind is None:
        kind = get_config().normalized_default_scheme
    try:
        return _SCHEMES[SchemeKind(kind.lower())]
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown scheme: {kind}") from e
