"""
convex_sdk.registry
===================

Name resolution through the on-chain name registry (CNS).

The registry is an actor whose own address is discovered once by querying
``(address *registry*)`` as the reserved system account ``#9``. Names are
looked up with ``(get cns-database (symbol "<name>"))``; the value is a pair
``[address, owner]``.

Caching rules
-------------
- A hit never touches the network.
- A miss that resolves is cached until :meth:`RegistryCache.clear_cache`.
- A miss that does not resolve is *not* cached, so a name registered later is
  picked up on the next call.
- Clearing drops all names but keeps the registry actor's address.

Registration is two transactions (register, then bind the address). They are
not atomic: if the second fails the name stays registered but unbound on
chain, the cache is left untouched and the error reaches the caller.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Protocol

from .account import Account
from .address import AddressLike, to_address
from .errors import RegistryError
from .tx import build
from .tx.build import Language
from .types import NodeResult, RegistryEntry

log = logging.getLogger(__name__)

__all__ = ["RegistryCache", "SYSTEM_QUERY_ADDRESS"]

# Reserved system account used to discover the registry actor.
SYSTEM_QUERY_ADDRESS = 9


class _Coordinator(Protocol):
    def query(self, source: str, address: AddressLike, language: Optional[Language] = None) -> NodeResult: ...

    def send(
        self,
        source: str,
        account: Account,
        language: Optional[Language] = None,
        sequence: Optional[int] = None,
    ) -> NodeResult: ...


def _entry_from_pair(value: Any) -> Optional[RegistryEntry]:
    if isinstance(value, (list, tuple)) and len(value) >= 2 and value[0] is not None:
        return RegistryEntry(address=to_address(value[0]), owner=to_address(value[1]))
    return None


class RegistryCache:
    """
    Memoizing resolver for registry names.

    With ``single_flight`` (the default) concurrent misses for the same name
    wait on one lookup instead of each querying the node.
    """

    def __init__(self, coordinator: _Coordinator, *, single_flight: bool = True) -> None:
        self.coordinator = coordinator
        self.single_flight = single_flight
        self._items: Dict[str, RegistryEntry] = {}
        self._address: Optional[int] = None
        self._guard = threading.Lock()
        # name -> [lock, waiters]; dropped when the last waiter leaves
        self._inflight: Dict[str, List[Any]] = {}

    # --- cache management --------------------------------------------------

    def clear_cache(self) -> None:
        """Forget every resolved name (the registry address is kept)."""
        self._items = {}

    def __contains__(self, name: str) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    # --- lookups -------------------------------------------------------------

    @property
    def address(self) -> int:
        """Address of the registry actor, resolved on first use."""
        if self._address is None:
            result = self.coordinator.query(build.registry_address(), SYSTEM_QUERY_ADDRESS, Language.LISP)
            self._address = to_address(result.value)
            log.debug("registry actor at #%d", self._address)
        return self._address

    def item(self, name: str) -> Optional[RegistryEntry]:
        """Return the cached or freshly resolved entry for ``name`` (None if unregistered)."""
        entry = self._items.get(name)
        if entry is not None:
            log.debug("registry hit: %s", name)
            return entry
        if not self.single_flight:
            return self._lookup(name)
        with self._guard:
            slot = self._inflight.setdefault(name, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                entry = self._items.get(name)
                if entry is not None:
                    return entry
                return self._lookup(name)
        finally:
            with self._guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._inflight[name]

    def _lookup(self, name: str) -> Optional[RegistryEntry]:
        log.debug("registry miss: %s", name)
        result = self.coordinator.query(build.registry_lookup(name), self.address, Language.LISP)
        entry = _entry_from_pair(result.value)
        if entry is not None:
            self._items[name] = entry
        return entry

    def is_registered(self, name: str) -> bool:
        return self.item(name) is not None

    def resolve_address(self, name: str) -> Optional[int]:
        entry = self.item(name)
        return entry.address if entry is not None else None

    def resolve_owner(self, name: str) -> Optional[int]:
        entry = self.item(name)
        return entry.owner if entry is not None else None

    # --- registration ----------------------------------------------------------

    def register(self, name: str, address: AddressLike, account: Account) -> RegistryEntry:
        """
        Register ``name`` under ``account`` (which pays the fees) and bind it
        to ``address``.
        """
        target = to_address(address)
        registry = self.address

        registered = self.coordinator.send(build.registry_register(registry, name), account, Language.LISP)
        if not registered.value:
            raise RegistryError(f"registry refused to register {name!r}")

        updated = self.coordinator.send(build.registry_update(registry, name, target), account, Language.LISP)
        if not updated.value:
            raise RegistryError(f"registry did not bind {name!r} to #{target}")

        entry = None
        if isinstance(updated.value, dict):
            entry = _entry_from_pair(updated.value.get(name))
        if entry is None:
            entry = RegistryEntry(address=target, owner=to_address(account))
        self._items[name] = entry
        log.info("registered %s -> #%d (owner #%d)", name, entry.address, entry.owner)
        return entry
