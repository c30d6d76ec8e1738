"""
convex_sdk.rpc
--------------

Transport to the node's HTTP/JSON API.

    from convex_sdk.rpc import NodeTransport
    node = NodeTransport(url="https://convex.world")
"""

from __future__ import annotations

from .http import NodeTransport

__all__ = ["NodeTransport"]
