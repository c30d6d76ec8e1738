"""
convex_sdk.tx.build
===================

Source-expression builders for the two transaction dialects.

The node accepts transactions as source text in either the Lisp dialect
(``convex-lisp``, prefix form) or the Scrypt dialect (``convex-scrypt``,
function-call form). Both express the same operations; only the surface
syntax differs. Builders here return plain strings that the coordinator sends
as the ``source`` field.

Examples
--------
    from convex_sdk.tx.build import Language, balance, transfer

    balance(42)                          # '(balance #42)'
    balance(42, Language.SCRYPT)         # 'balance (#42)'
    transfer(7, 1000)                    # '(transfer #7 1000)'

Registry expressions exist only in Lisp form; the registry always sends them
with ``Language.LISP``.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Union

__all__ = [
    "Language",
    "balance",
    "transfer",
    "address_of",
    "registry_address",
    "registry_lookup",
    "registry_register",
    "registry_update",
]


class Language(str, Enum):
    LISP = "convex-lisp"
    SCRYPT = "convex-scrypt"

    @classmethod
    def parse(cls, value: Union[str, "Language", None]) -> "Language":
        if isinstance(value, Language):
            return value
        if value is None or value == "":
            return cls.LISP
        v = str(value).strip().lower()
        aliases = {"lisp": cls.LISP, "scrypt": cls.SCRYPT}
        if v in aliases:
            return aliases[v]
        try:
            return cls(v)
        except ValueError:
            raise ValueError(f"Unsupported transaction language: {value!r}") from None


def _symbol(name: str) -> str:
    # json.dumps yields a double-quoted, escaped string literal.
    return f"(symbol {json.dumps(name)})"


# -----------------------------------------------------------------------------
# Account operations (both dialects)
# -----------------------------------------------------------------------------


def balance(address: int, language: Language = Language.LISP) -> str:
    if language is Language.SCRYPT:
        return f"balance (#{address})"
    return f"(balance #{address})"


def transfer(to_address: int, amount: int, language: Language = Language.LISP) -> str:
    if language is Language.SCRYPT:
        return f"transfer (#{to_address} {amount})"
    return f"(transfer #{to_address} {amount})"


def address_of(function_name: str, language: Language = Language.LISP) -> str:
    if language is Language.SCRYPT:
        return f"address ({function_name})"
    return f"(address {function_name})"


# -----------------------------------------------------------------------------
# Name registry (Lisp only)
# -----------------------------------------------------------------------------


def registry_address() -> str:
    return "(address *registry*)"


def registry_lookup(name: str) -> str:
    return f"(get cns-database {_symbol(name)})"


def registry_register(registry: int, name: str) -> str:
    return f"(call #{registry} (register {{:name {_symbol(name)}}}))"


def registry_update(registry: int, name: str, address: int) -> str:
    return f"(call #{registry} (cns-update {_symbol(name)} #{address}))"
