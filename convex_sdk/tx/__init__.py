"""
convex_sdk.tx
=============

Transaction helpers: build source expressions and run them against a node.

Submodules
----------
- build : ``Language`` and per-dialect source builders (balance, transfer, registry calls).
- send  : ``TransactionCoordinator`` (prepare -> sign -> submit with sequence-conflict retry, queries).

Typical usage
-------------
    from convex_sdk.tx import build
    from convex_sdk.tx.send import TransactionCoordinator

    coordinator = TransactionCoordinator(node)
    result = coordinator.send(build.transfer(42, 1000), account)
    print(result.value)
"""

from __future__ import annotations

from . import build as build
from .build import Language

__all__ = ["build", "Language"]
