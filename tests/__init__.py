"""
tests
=====

Shared stand-ins for unit tests:

    from tests import RecordingTransport, StubSigner

- RecordingTransport : in-memory NodeTransport with queued replies per endpoint
- StubSigner         : signer returning a fixed signature
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

Reply = Union[Dict[str, Any], BaseException, Callable[[Mapping[str, Any]], Dict[str, Any]]]


class RecordingTransport:
    """
    In-memory stand-in for NodeTransport.

    Replies are queued per endpoint name; each reply is a dict (returned), an
    exception (raised) or a callable taking the request data.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._replies: Dict[str, List[Reply]] = {}
        self._defaults: Dict[str, Reply] = {}

    def queue(self, name: str, *replies: Reply) -> "RecordingTransport":
        self._replies.setdefault(name, []).extend(replies)
        return self

    def always(self, name: str, reply: Reply) -> "RecordingTransport":
        self._defaults[name] = reply
        return self

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def requests(self, name: str) -> List[Dict[str, Any]]:
        return [data for call_name, _path, data in self.calls if call_name == name]

    def post(self, name: str, path: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append((name, path, dict(data)))
        return self._reply(name, data)

    def get(self, name: str, path: str) -> Dict[str, Any]:
        self.calls.append((name, path, {}))
        return self._reply(name, {})

    def close(self) -> None:
        pass

    def _reply(self, name: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        queued = self._replies.get(name)
        if queued:
            reply = queued.pop(0)
        elif name in self._defaults:
            reply = self._defaults[name]
        else:
            raise AssertionError(f"unexpected call: {name} {dict(data)}")
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return reply(data)
        return dict(reply)


class StubSigner:
    """Signer returning a fixed signature; records what it signed."""

    public_key_api = "ab" * 32

    def __init__(self, signature: str = "0xdead") -> None:
        self.signature = signature
        self.signed: List[str] = []

    def sign(self, hash_hex: str) -> str:
        self.signed.append(hash_hex)
        return self.signature


__all__ = ["RecordingTransport", "StubSigner", "Reply"]
