"""
Data shapes returned by the node and the registry.

Nothing here performs network I/O; these are dataclasses plus converters from
the node's JSON bodies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .address import to_address

__all__ = ["NodeResult", "RegistryEntry", "AccountInformation"]


@dataclass(frozen=True)
class NodeResult:
    """
    Successful response body from query / submit.

    ``value`` is the application result; ``raw`` keeps the full body for
    domain metadata the SDK does not model (e.g. a deployed address).
    """

    value: Any = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> "NodeResult":
        return cls(value=body.get("value"), raw=dict(body))

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)


@dataclass(frozen=True)
class RegistryEntry:
    """Resolution record for one registered name."""

    address: int
    owner: int


@dataclass(frozen=True)
class AccountInformation:
    address: int
    is_library: bool = False
    is_actor: bool = False
    memory_size: int = 0
    allowance: int = 0
    type: Optional[str] = None
    balance: int = 0
    sequence: int = 0
    environment: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> "AccountInformation":
        return cls(
            address=to_address(body["address"]),
            is_library=bool(body.get("is_library", False)),
            is_actor=bool(body.get("is_actor", False)),
            memory_size=int(body.get("memory_size") or 0),
            allowance=int(body.get("allowance") or 0),
            type=body.get("type"),
            balance=int(body.get("balance") or 0),
            sequence=int(body.get("sequence") or 0),
            environment=dict(body.get("environment") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "is_library": self.is_library,
            "is_actor": self.is_actor,
            "memory_size": self.memory_size,
            "allowance": self.allowance,
            "type": self.type,
            "balance": self.balance,
            "sequence": self.sequence,
            "environment": dict(self.environment),
        }
