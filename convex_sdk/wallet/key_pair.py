"""
convex_sdk.wallet.key_pair
==========================

Ed25519 key pairs for signing transaction hashes.

The node hands back a hex digest from ``transaction/prepare``; the signer
decodes it to bytes, signs with Ed25519 and returns a ``0x``-prefixed hex
signature. Public keys are exposed checksum-cased, with (``public_key_checksum``)
and without (``public_key_api``) the ``0x`` prefix.

Keys are exported as PKCS#8 PEM encrypted with a password, using the
``cryptography`` package's best available encryption.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..errors import KeyPairError
from ..utils.bytes import hex_to_bytes, remove_0x_prefix, to_hex

log = logging.getLogger(__name__)

__all__ = ["Signer", "KeyPair"]


@runtime_checkable
class Signer(Protocol):
    """Anything that can sign a prepared transaction hash."""

    @property
    def public_key_api(self) -> str: ...

    def sign(self, hash_hex: str) -> str: ...


def _checksum(hex_value: str) -> str:
    # Deferred: convex_sdk.address imports the account module, which imports us.
    from ..address import to_public_key_checksum

    return to_public_key_checksum(hex_value)


class KeyPair:
    """Ed25519 private/public key pair."""

    __slots__ = ("_private_key", "_public_key", "_public_bytes")

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        self._public_key: Ed25519PublicKey = private_key.public_key()
        self._public_bytes = self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    # --- construction ---------------------------------------------------

    @classmethod
    def create(cls) -> "KeyPair":
        """Generate a fresh random key pair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_private_key(cls, private_key: Union[bytes, str]) -> "KeyPair":
        """Build from 32 raw private-key bytes (or their hex form)."""
        raw = hex_to_bytes(private_key) if isinstance(private_key, str) else bytes(private_key)
        try:
            return cls(Ed25519PrivateKey.from_private_bytes(raw))
        except ValueError as e:
            raise KeyPairError(f"invalid Ed25519 private key: {e}") from e

    @classmethod
    def import_from_string(cls, text: str, password: str) -> "KeyPair":
        """Decrypt a PKCS#8 PEM private key with *password*."""
        try:
            key = serialization.load_pem_private_key(
                text.strip().encode("ascii"),
                password=password.encode("utf-8") if password else None,
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyPairError(f"unable to import private key: {e}") from e
        if not isinstance(key, Ed25519PrivateKey):
            raise KeyPairError(f"expected an Ed25519 key, got {type(key).__name__}")
        return cls(key)

    @classmethod
    def import_from_file(cls, filename: Union[str, Path], password: str) -> "KeyPair":
        path = Path(filename)
        if not path.is_file():
            raise KeyPairError(f"key file not found: {path}")
        log.debug("importing key pair from %s", path)
        return cls.import_from_string(path.read_text(encoding="ascii"), password)

    # --- export ---------------------------------------------------------

    def export_to_string(self, password: str) -> str:
        """Encrypted PKCS#8 PEM of the private key."""
        if not password:
            raise KeyPairError("a password is required to export a private key")
        pem = self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
        )
        return pem.decode("ascii")

    def export_to_file(self, filename: Union[str, Path], password: str) -> Path:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_to_string(password), encoding="ascii")
        try:
            path.chmod(0o600)
        except OSError:
            log.warning("could not restrict permissions on %s", path)
        return path

    # --- keys -----------------------------------------------------------

    @property
    def public_key(self) -> bytes:
        return self._public_bytes

    @property
    def private_key(self) -> bytes:
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @property
    def public_key_checksum(self) -> str:
        """Checksum-cased public key with a ``0x`` prefix."""
        return _checksum(self._public_bytes.hex())

    @property
    def public_key_api(self) -> str:
        """Checksum-cased public key as sent to the node (no ``0x``)."""
        return remove_0x_prefix(self.public_key_checksum) or ""

    # --- signing --------------------------------------------------------

    def sign(self, hash_hex: str) -> str:
        """
        Sign a hex digest (as returned by ``transaction/prepare``).

        Returns the signature as ``0x``-prefixed hex.
        """
        try:
            message = hex_to_bytes(hash_hex)
        except ValueError as e:
            raise KeyPairError(f"hash to sign is not hex: {hash_hex!r}") from e
        return to_hex(self._private_key.sign(message))

    def verify(self, hash_hex: str, signature: str) -> bool:
        try:
            self._public_key.verify(hex_to_bytes(signature), hex_to_bytes(hash_hex))
        except (InvalidSignature, ValueError):
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return self._public_bytes == other._public_bytes

    def __hash__(self) -> int:
        return hash(self._public_bytes)

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key_checksum})"
