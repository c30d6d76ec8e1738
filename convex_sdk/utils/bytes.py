from __future__ import annotations

import re
from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def prefix_0x(value: Optional[str]) -> Optional[str]:
    """Return *value* with a single leading '0x' (None passes through)."""
    if value is None:
        return None
    return "0x" + remove_0x_prefix(value)


def remove_0x_prefix(value: Optional[str]) -> Optional[str]:
    """Strip one leading '0x'/'0X' (None passes through)."""
    if value is None:
        return None
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def is_hex_string(value: str) -> bool:
    """True for a non-empty string of hex digits, optionally '0x' prefixed."""
    if not isinstance(value, str):
        return False
    return bool(_HEX_RE.match(remove_0x_prefix(value) or ""))


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """
    Bytes -> hex string (lowercase). Prefix with '0x' by default.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def hex_to_bytes(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even length; case-insensitive.
    """
    if not isinstance(s, str):
        raise TypeError("hex_to_bytes expects a string")
    s = remove_0x_prefix(s) or ""
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts bytes-like objects as-is and treats strings as hex.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return hex_to_bytes(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


__all__ = [
    "BytesLike",
    "prefix_0x",
    "remove_0x_prefix",
    "is_hex_string",
    "to_hex",
    "hex_to_bytes",
    "ensure_bytes",
]
