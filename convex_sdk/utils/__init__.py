"""
convex_sdk.utils
----------------

Small helpers shared across the SDK:

- bytes : hex <-> bytes conversion and '0x' prefix handling
- hash  : SHA3-256 digests
- retry : bounded retry combinator with jittered backoff
"""

from .bytes import hex_to_bytes, is_hex_string, prefix_0x, remove_0x_prefix, to_hex
from .hash import sha3_256, sha3_256_hex
from .retry import RetryPolicy, jittered_delay

__all__ = [
    "hex_to_bytes",
    "is_hex_string",
    "prefix_0x",
    "remove_0x_prefix",
    "to_hex",
    "sha3_256",
    "sha3_256_hex",
    "RetryPolicy",
    "jittered_delay",
]
