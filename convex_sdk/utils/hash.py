from __future__ import annotations

import hashlib

from .bytes import BytesLike, ensure_bytes, to_hex


# --- NIST SHA3 (FIPS-202) -----------------------------------------------------
# Always available via hashlib on Python 3.6+. The network's checksum casing is
# defined over SHA3-256, not legacy Keccak padding.

def sha3_256(data: BytesLike) -> bytes:
    """Return SHA3-256 digest of *data*."""
    h = hashlib.sha3_256()
    h.update(ensure_bytes(data))
    return h.digest()


def sha3_256_hex(data: BytesLike, *, prefix: bool = True) -> str:
    return to_hex(sha3_256(data), prefix=prefix)


__all__ = ["sha3_256", "sha3_256_hex"]
