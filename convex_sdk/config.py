"""
SDK configuration: node URL, default dialect, timeouts and retry/top-up knobs.

- Loads sane defaults and supports overrides via environment variables (CONVEX_*).
- Provides helpers for building HTTP headers and validating the node URL.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .tx.build import Language
from .version import user_agent as default_user_agent

_DEFAULT_URL = "https://convex.world"

DEFAULT_SEND_MAX_ATTEMPTS = 20
DEFAULT_BACKOFF_BASE = 1.0
DEFAULT_BACKOFF_JITTER = 2.0
DEFAULT_TOPUP_MIN_BALANCE = 10_000_000
DEFAULT_TOPUP_RETRY_COUNT = 8


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(slots=True)
class SDKConfig:
    # Node
    url: str = field(default_factory=lambda: _DEFAULT_URL)
    language: Language = Language.LISP
    request_timeout: float = 30.0
    # Sequence-conflict retry
    send_max_attempts: int = DEFAULT_SEND_MAX_ATTEMPTS
    backoff_base: float = DEFAULT_BACKOFF_BASE
    backoff_jitter: float = DEFAULT_BACKOFF_JITTER
    # Faucet top-up
    topup_min_balance: int = DEFAULT_TOPUP_MIN_BALANCE
    topup_request_amount: int = DEFAULT_TOPUP_MIN_BALANCE
    topup_retry_count: int = DEFAULT_TOPUP_RETRY_COUNT
    # Headers / identity
    user_agent: str = field(default_factory=default_user_agent)

    @classmethod
    def from_env(cls, prefix: str = "CONVEX_") -> "SDKConfig":
        """
        Create config from environment variables:

        CONVEX_URL                  (http/https)
        CONVEX_LANGUAGE             (convex-lisp | convex-scrypt)
        CONVEX_TIMEOUT              (float seconds)
        CONVEX_SEND_MAX_ATTEMPTS    (int)
        CONVEX_BACKOFF_BASE         (float seconds)
        CONVEX_BACKOFF_JITTER       (float seconds)
        CONVEX_TOPUP_MIN_BALANCE    (int)
        CONVEX_TOPUP_REQUEST_AMOUNT (int)
        CONVEX_TOPUP_RETRY_COUNT    (int)
        CONVEX_USER_AGENT           (str)
        """
        url = _env(f"{prefix}URL", _DEFAULT_URL)
        _ensure_scheme(url, ("http", "https"))
        return cls(
            url=url or _DEFAULT_URL,
            language=Language.parse(_env(f"{prefix}LANGUAGE", Language.LISP.value)),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "30.0")),
            send_max_attempts=int(_env(f"{prefix}SEND_MAX_ATTEMPTS", str(DEFAULT_SEND_MAX_ATTEMPTS))),
            backoff_base=float(_env(f"{prefix}BACKOFF_BASE", str(DEFAULT_BACKOFF_BASE))),
            backoff_jitter=float(_env(f"{prefix}BACKOFF_JITTER", str(DEFAULT_BACKOFF_JITTER))),
            topup_min_balance=int(_env(f"{prefix}TOPUP_MIN_BALANCE", str(DEFAULT_TOPUP_MIN_BALANCE))),
            topup_request_amount=int(
                _env(f"{prefix}TOPUP_REQUEST_AMOUNT", str(DEFAULT_TOPUP_MIN_BALANCE))
            ),
            topup_retry_count=int(_env(f"{prefix}TOPUP_RETRY_COUNT", str(DEFAULT_TOPUP_RETRY_COUNT))),
            user_agent=_env(f"{prefix}USER_AGENT") or default_user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        data["language"] = Language.parse(data["language"])
        _ensure_scheme(data["url"], ("http", "https"))
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "language": self.language.value,
            "request_timeout": float(self.request_timeout),
            "send_max_attempts": int(self.send_max_attempts),
            "backoff_base": float(self.backoff_base),
            "backoff_jitter": float(self.backoff_jitter),
            "topup_min_balance": int(self.topup_min_balance),
            "topup_request_amount": int(self.topup_request_amount),
            "topup_retry_count": int(self.topup_retry_count),
            "user_agent": self.user_agent,
        }


__all__ = [
    "SDKConfig",
    "DEFAULT_SEND_MAX_ATTEMPTS",
    "DEFAULT_BACKOFF_BASE",
    "DEFAULT_BACKOFF_JITTER",
    "DEFAULT_TOPUP_MIN_BALANCE",
    "DEFAULT_TOPUP_RETRY_COUNT",
]
