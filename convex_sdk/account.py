"""
Identity binding a signer to an optional ledger address and registered name.

Accounts are immutable: the address and name become known only after the
network has registered the key, and each step yields a new ``Account``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .wallet.key_pair import Signer

__all__ = ["Account"]


@dataclass(frozen=True)
class Account:
    key_pair: Signer
    address: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def create(
        cls, key_pair: Signer, address: Optional[int] = None, name: Optional[str] = None
    ) -> "Account":
        return cls(key_pair=key_pair, address=None if address is None else int(address), name=name)

    def with_address(self, address: int) -> "Account":
        return replace(self, address=int(address))

    def with_name(self, name: str) -> "Account":
        return replace(self, name=name)

    @property
    def public_key_api(self) -> str:
        return self.key_pair.public_key_api

    def sign(self, hash_hex: str) -> str:
        return self.key_pair.sign(hash_hex)

    def __str__(self) -> str:
        label = f" {self.name}" if self.name else ""
        where = f"#{self.address}" if self.address is not None else "<unregistered>"
        return f"Account({where}{label})"
