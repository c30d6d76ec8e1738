"""
Typed error classes for the Convex Python SDK.

Two families of node failures are distinguished:

- transport errors (:class:`ApiRequestError`): the HTTP exchange itself failed
  (non-2xx status, network fault, body that is not JSON);
- application errors (:class:`ApiError`): the node answered 2xx but the body
  carries an ``errorCode``.

Callers branch on :class:`ErrorKind` / :class:`ErrorCode` rather than on
exception names. :class:`Outcome` wraps either a successful value or one of
these errors for code paths that prefer a result value over ``try``/``except``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

__all__ = [
    "ConvexSdkError",
    "ErrorKind",
    "ErrorCode",
    "ApiRequestError",
    "ApiError",
    "InvalidAddress",
    "KeyPairError",
    "RegistryError",
    "Outcome",
]

T = TypeVar("T")


class ConvexSdkError(Exception):
    """Base class for all SDK errors."""


class ErrorKind(str, Enum):
    OK = "ok"
    TRANSPORT = "transport"
    APPLICATION = "application"


class ErrorCode(str, Enum):
    """Application error codes the SDK reacts to."""

    # Another transaction from the same account already took this sequence slot.
    SEQUENCE = "SEQUENCE"
    # The address has no on-chain account.
    NOBODY = "NOBODY"

    @classmethod
    def parse(cls, code: Any) -> Optional["ErrorCode"]:
        try:
            return cls(str(code))
        except ValueError:
            return None


@dataclass(eq=False)
class ApiRequestError(ConvexSdkError):
    """Raised when the HTTP request fails (non-2xx, network error, bad body)."""

    source: str
    status_code: int
    text: str

    kind = ErrorKind.TRANSPORT

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.source}: {self.status_code} {self.text}"


@dataclass(eq=False)
class ApiError(ConvexSdkError):
    """Raised when the node returns a body with an ``errorCode``."""

    source: str
    code: str
    value: Any = None

    kind = ErrorKind.APPLICATION

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.source}: {self.code} {self.value}"

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return ErrorCode.parse(self.code)

    @property
    def is_sequence_conflict(self) -> bool:
        return self.error_code is ErrorCode.SEQUENCE

    @property
    def is_no_such_account(self) -> bool:
        return self.error_code is ErrorCode.NOBODY


class InvalidAddress(ConvexSdkError, ValueError):
    """Raised for values that cannot be normalized to a ledger address."""


class KeyPairError(ConvexSdkError):
    """Raised when a key cannot be imported, exported or used for signing."""


class RegistryError(ConvexSdkError):
    """Raised when a registry transaction returns no value."""


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a node call: either ``value`` or ``error``, never both.

    ``kind`` tells the caller which branch applies without an isinstance
    ladder; ``unwrap()`` restores exception semantics.
    """

    value: Optional[T] = None
    error: Optional[ConvexSdkError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ConvexSdkError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind:
        if self.error is None:
            return ErrorKind.OK
        return getattr(self.error, "kind", ErrorKind.TRANSPORT)

    @property
    def error_code(self) -> Optional[ErrorCode]:
        if isinstance(self.error, ApiError):
            return self.error.error_code
        return None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
