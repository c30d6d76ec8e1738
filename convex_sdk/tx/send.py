"""
convex_sdk.tx.send
==================

Run transactions against a node: two-phase signed submission for
state-changing calls, single-phase queries for reads.

Protocol
--------
1. ``prepare``  POST /api/v1/transaction/prepare {address, lang, source[, sequence]}
                -> {"hash": "<hex>"}
2. sign         the account's signer signs the hash
3. ``submit``   POST /api/v1/transaction/submit {address, accountKey, hash, sig}
                -> {"value": ...}

The node embeds the account's next sequence number into the prepared hash.
When two senders on the same account race for one sequence slot, the loser's
submit fails with errorCode ``SEQUENCE``; :meth:`TransactionCoordinator.send`
then repeats the whole prepare/sign/submit chain (a stale hash can never be
reused) after a jittered sleep, up to the policy's attempt limit. Any other
error aborts at once.

Queries (``POST /api/v1/query``) are not signed, carry no sequence number and
are never retried.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from ..account import Account
from ..address import AddressLike, to_address
from ..errors import ApiError, ApiRequestError, Outcome
from ..rpc.http import PATH_PREPARE, PATH_QUERY, PATH_SUBMIT
from ..types import NodeResult
from ..utils.bytes import remove_0x_prefix
from ..utils.retry import RetryPolicy
from .build import Language

log = logging.getLogger(__name__)

__all__ = [
    "TransactionCoordinator",
    "default_send_policy",
    "is_sequence_conflict",
    "DEFAULT_MAX_ATTEMPTS",
]

DEFAULT_MAX_ATTEMPTS = 20


class _Transport(Protocol):
    """Minimal interface expected from convex_sdk.rpc.http.NodeTransport."""

    def post(self, name: str, path: str, data: Mapping[str, Any]) -> Dict[str, Any]: ...


def is_sequence_conflict(exc: BaseException) -> bool:
    return isinstance(exc, ApiError) and exc.is_sequence_conflict


def default_send_policy(
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base: float = 1.0,
    jitter: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
) -> RetryPolicy:
    """Retry policy for ``send``: only sequence conflicts are retryable."""
    return RetryPolicy.jittered(
        max_attempts=max_attempts,
        base=base,
        jitter=jitter,
        retry_if=is_sequence_conflict,
        sleep=sleep,
        rng=rng,
    )


def _wire_address(address: AddressLike) -> str:
    return f"#{to_address(address)}"


def _log_retry(attempt: int, exc: BaseException, sleep_s: float) -> None:
    log.warning("sequence conflict on attempt %d (%s); retrying in %.2fs", attempt, exc, sleep_s)


@dataclass
class TransactionCoordinator:
    transport: _Transport
    language: Language = Language.LISP
    retry: RetryPolicy = field(default_factory=default_send_policy)

    # --- single steps ----------------------------------------------------

    def prepare(
        self,
        address: AddressLike,
        source: str,
        language: Optional[Language] = None,
        sequence: Optional[int] = None,
    ) -> str:
        """Ask the node for the hash to sign. Returns the hash as sent by the node."""
        data: Dict[str, Any] = {
            "address": _wire_address(address),
            "lang": (language or self.language).value,
            "source": source,
        }
        if sequence is not None:
            data["sequence"] = int(sequence)
        body = self.transport.post("transaction_prepare", PATH_PREPARE, data)
        hash_hex = body.get("hash")
        if not hash_hex:
            raise ApiRequestError("transaction_prepare", 200, "response carries no hash")
        return str(hash_hex)

    def submit(self, address: AddressLike, public_key: str, hash_hex: str, signature: str) -> NodeResult:
        data = {
            "address": _wire_address(address),
            "accountKey": remove_0x_prefix(public_key),
            "hash": hash_hex,
            "sig": remove_0x_prefix(signature),
        }
        return NodeResult.from_dict(self.transport.post("transaction_submit", PATH_SUBMIT, data))

    # --- composed operations ----------------------------------------------

    def send(
        self,
        source: str,
        account: Account,
        language: Optional[Language] = None,
        sequence: Optional[int] = None,
    ) -> NodeResult:
        """
        Prepare, sign and submit ``source`` as ``account``.

        Sequence conflicts are retried under ``self.retry`` unless the caller
        pinned an explicit ``sequence`` (a pinned slot cannot change between
        attempts, so it is tried once).
        """
        address = to_address(account)
        lang = language or self.language

        def _attempt() -> NodeResult:
            hash_hex = self.prepare(address, source, lang, sequence)
            signature = account.sign(hash_hex)
            return self.submit(address, account.public_key_api, hash_hex, signature)

        if sequence is not None:
            return _attempt()
        policy = self.retry if self.retry.on_retry is not None else replace(self.retry, on_retry=_log_retry)
        log.debug("send from #%d: %s", address, source)
        return policy.call(_attempt)

    def query(self, source: str, address: AddressLike, language: Optional[Language] = None) -> NodeResult:
        """Run a read-only ``source`` in the context of ``address``."""
        data = {
            "address": _wire_address(address),
            "lang": (language or self.language).value,
            "source": source,
        }
        return NodeResult.from_dict(self.transport.post("transaction_query", PATH_QUERY, data))

    def query_outcome(
        self, source: str, address: AddressLike, language: Optional[Language] = None
    ) -> Outcome[NodeResult]:
        """:meth:`query` as a typed result; callers branch on ``outcome.kind``."""
        address = to_address(address)
        try:
            return Outcome.success(self.query(source, address, language))
        except (ApiError, ApiRequestError) as e:
            return Outcome.failure(e)
