"""
convex_sdk.address
==================

Address normalization and checksum casing.

Formats
-------
A ledger address is a non-negative integer. It travels in several shapes:

- ``42``            plain int
- ``"42"``          decimal string
- ``"0x2a"``        hex string
- ``"#42"``         the node's own notation
- ``Account``       an identity that already knows its address

:func:`to_address` folds all of them into the same ``int``.

Public keys (and other 32-byte hex values) are displayed checksum-cased: each
hex letter is upper-cased when the matching nibble of ``sha3_256(raw_bytes)``
is greater than 7. The casing is part of the network's display format, so
:func:`to_checksum` must stay bit-exact.
"""

from __future__ import annotations

from typing import Union

from .account import Account
from .errors import InvalidAddress
from .utils.bytes import is_hex_string, remove_0x_prefix
from .utils.hash import sha3_256

AddressLike = Union[int, str, Account]

PUBLIC_KEY_HEX_LENGTH = 64

__all__ = [
    "AddressLike",
    "to_address",
    "is_address",
    "to_checksum",
    "is_checksum_valid",
    "to_public_key_checksum",
    "is_public_key",
    "is_public_key_checksum",
    "InvalidAddress",
]


def _parse_text(text: str) -> int:
    s = text.strip()
    if s.startswith("#"):
        s = s[1:]
    try:
        if s[:2].lower() == "0x":
            if not is_hex_string(s):
                raise ValueError(s)
            return int(s[2:], 16)
        # ASCII only: str.isdigit() also accepts other scripts' digits
        if not (s.isascii() and s.isdigit()):
            raise ValueError(s)
        return int(s, 10)
    except ValueError as e:
        raise InvalidAddress(f"not a numeric address: {text!r}") from e


def to_address(value: AddressLike) -> int:
    """
    Normalize *value* to the canonical integer address.

    Raises InvalidAddress for negative numbers, non-numeric strings, accounts
    without an address and unsupported types.
    """
    if isinstance(value, Account):
        if value.address is None:
            raise InvalidAddress("account has no address assigned")
        return to_address(value.address)
    if isinstance(value, bool):
        raise InvalidAddress("bool is not an address")
    if isinstance(value, int):
        address = value
    elif isinstance(value, str):
        address = _parse_text(value)
    else:
        raise InvalidAddress(f"unsupported address type: {type(value).__name__}")
    if address < 0:
        raise InvalidAddress(f"address must be non-negative, got {address}")
    return address


def is_address(value: object) -> bool:
    try:
        to_address(value)  # type: ignore[arg-type]
    except InvalidAddress:
        return False
    return True


def to_checksum(hex_value: str) -> str:
    """
    Return the ``0x``-prefixed checksum-cased form of *hex_value*.

    Casing is bounded by the 64 nibbles of the SHA3-256 digest.
    """
    clean = (remove_0x_prefix(hex_value) or "").lower()
    if not is_hex_string(clean) or len(clean) % 2 != 0:
        raise InvalidAddress(f"not an even-length hex string: {hex_value!r}")
    digest = sha3_256(bytes.fromhex(clean)).hex()
    out = []
    for index, char in enumerate(clean[: len(digest)]):
        if int(digest[index], 16) > 7:
            out.append(char.upper())
        else:
            out.append(char)
    return "0x" + "".join(out)


def is_checksum_valid(value: str) -> bool:
    """True iff *value* already carries the casing :func:`to_checksum` derives."""
    clean = remove_0x_prefix(value) if isinstance(value, str) else None
    if not clean:
        return False
    try:
        expected = to_checksum(clean)
    except InvalidAddress:
        return False
    return clean == expected[2:]


# Public keys share the address casing rules.
to_public_key_checksum = to_checksum


def is_public_key(value: str) -> bool:
    clean = remove_0x_prefix(value) if isinstance(value, str) else None
    return bool(clean) and len(clean) == PUBLIC_KEY_HEX_LENGTH and is_hex_string(clean)


def is_public_key_checksum(value: str) -> bool:
    return is_public_key(value) and is_checksum_valid(value)
