from __future__ import annotations

"""
HTTP/JSON transport to a node's REST API (sync).

- One shared ``httpx.Client`` per transport; safe to use from several threads.
- Classifies failures: non-2xx, network faults and non-JSON bodies raise
  ApiRequestError; a 2xx body carrying ``errorCode`` raises ApiError.
- Never retries: retry policy belongs to the caller (see tx.send).

Example:
    from convex_sdk.rpc.http import NodeTransport
    with NodeTransport("https://convex.world") as node:
        body = node.post("query", "/api/v1/query", {"address": "#9", "lang": "convex-lisp", "source": "*balance*"})
        print(body["value"])
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import ApiError, ApiRequestError
from ..version import user_agent

log = logging.getLogger(__name__)

JSONBody = Dict[str, Any]

# Status code recorded when no HTTP response was received at all.
NO_RESPONSE = 0

PATH_CREATE_ACCOUNT = "/api/v1/createAccount"
PATH_FAUCET = "/api/v1/faucet"
PATH_QUERY = "/api/v1/query"
PATH_PREPARE = "/api/v1/transaction/prepare"
PATH_SUBMIT = "/api/v1/transaction/submit"
PATH_ACCOUNTS = "/api/v1/accounts"


@dataclass
class NodeTransport:
    """Synchronous JSON client for the node's ``/api/v1`` endpoints."""

    url: str
    timeout: float = 30.0
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _client: httpx.Client = field(init=False, repr=False)

    def __post_init__(self) -> None:
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.Client(
            base_url=self.url.rstrip("/"),
            timeout=self.timeout,
            headers=merged_headers,
            transport=self.transport,
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "NodeTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self._client.close()

    # --- public API ------------------------------------------------------

    def post(self, name: str, path: str, data: Mapping[str, Any]) -> JSONBody:
        """POST ``data`` as JSON to ``path``; return the decoded body or raise."""
        return self._request(name, "POST", path, json=dict(data))

    def get(self, name: str, path: str) -> JSONBody:
        return self._request(name, "GET", path)

    # --- internals -------------------------------------------------------

    def _request(self, name: str, method: str, path: str, **kwargs: Any) -> JSONBody:
        log.debug("%s %s %s", name, method, path)
        try:
            r = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiRequestError(name, NO_RESPONSE, str(e) or type(e).__name__) from e

        if not r.is_success:
            log.debug("%s failed: HTTP %s", name, r.status_code)
            raise ApiRequestError(name, r.status_code, r.reason_phrase or r.text[:256])

        try:
            body = r.json()
        except ValueError as e:
            raise ApiRequestError(name, r.status_code, f"non-JSON response: {r.text[:256]}") from e
        if not isinstance(body, dict):
            raise ApiRequestError(name, r.status_code, f"unexpected response type: {type(body).__name__}")

        if body.get("errorCode"):
            log.debug("%s returned errorCode=%s", name, body["errorCode"])
            raise ApiError(name, str(body["errorCode"]), body.get("value"))
        return body


__all__ = [
    "NodeTransport",
    "NO_RESPONSE",
    "PATH_CREATE_ACCOUNT",
    "PATH_FAUCET",
    "PATH_QUERY",
    "PATH_PREPARE",
    "PATH_SUBMIT",
    "PATH_ACCOUNTS",
]
