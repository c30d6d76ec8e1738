"""
convex_sdk.api
==============

High-level client for a Convex node.

``ConvexAPI`` wires one :class:`~convex_sdk.rpc.http.NodeTransport`, one
:class:`~convex_sdk.tx.send.TransactionCoordinator` and one
:class:`~convex_sdk.registry.RegistryCache`, and layers the everyday account
operations on top of them.

Example
-------
    from convex_sdk import ConvexAPI, KeyPair

    with ConvexAPI.create("https://convex.world") as convex:
        account = convex.create_account(KeyPair.create())
        convex.top_up_account(account)
        print(convex.get_balance(account))
        print(convex.send("(map inc [1 2 3 4 5])", account).value)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .account import Account
from .address import AddressLike, to_address
from .config import SDKConfig
from .errors import ErrorCode
from .rpc.http import PATH_ACCOUNTS, PATH_CREATE_ACCOUNT, PATH_FAUCET, NodeTransport
from .registry import RegistryCache
from .tx import build
from .tx.build import Language
from .tx.send import TransactionCoordinator, default_send_policy
from .types import AccountInformation, NodeResult
from .wallet.key_pair import Signer

log = logging.getLogger(__name__)

__all__ = ["ConvexAPI", "ACCOUNT_NAME_PREFIX"]

# Account names live under this prefix in the registry.
ACCOUNT_NAME_PREFIX = "account."


class ConvexAPI:
    def __init__(
        self,
        url: Optional[str] = None,
        language: Union[Language, str, None] = None,
        *,
        config: Optional[SDKConfig] = None,
        transport: Optional[NodeTransport] = None,
        coordinator: Optional[TransactionCoordinator] = None,
        registry: Optional[RegistryCache] = None,
    ) -> None:
        self.config = SDKConfig.with_overrides(config, url=url, language=language)
        self.language = self.config.language
        self.transport = transport or NodeTransport(
            self.config.url,
            timeout=self.config.request_timeout,
            headers=self.config.http_headers(),
        )
        self.coordinator = coordinator or TransactionCoordinator(
            self.transport,
            language=self.language,
            retry=default_send_policy(
                max_attempts=self.config.send_max_attempts,
                base=self.config.backoff_base,
                jitter=self.config.backoff_jitter,
            ),
        )
        self.registry = registry or RegistryCache(self.coordinator)

    @classmethod
    def create(cls, url: str, language: Union[Language, str, None] = None) -> "ConvexAPI":
        return cls(url, language)

    @classmethod
    def from_config(cls, config: SDKConfig) -> "ConvexAPI":
        return cls(config=config)

    @property
    def url(self) -> str:
        return self.config.url

    def __enter__(self) -> "ConvexAPI":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self.transport.close()

    # --- accounts -------------------------------------------------------------

    def create_account(self, key_pair: Signer) -> Account:
        """Ask the node for a new address bound to ``key_pair``'s public key."""
        body = self.transport.post(
            "create_account", PATH_CREATE_ACCOUNT, {"accountKey": key_pair.public_key_api}
        )
        account = Account.create(key_pair, to_address(body["address"]))
        log.info("created account #%d", account.address)
        return account

    def get_account_info(self, address: AddressLike) -> AccountInformation:
        body = self.transport.get("get_account_info", f"{PATH_ACCOUNTS}/{to_address(address)}")
        return AccountInformation.from_dict(body)

    def load_account(self, name: str, key_pair: Signer) -> Optional[Account]:
        """Build an Account for a registered account name, or None if unregistered."""
        address = self.resolve_account_name(name)
        if address is None:
            return None
        return Account.create(key_pair, address, name)

    def setup_account(self, name: str, key_pair: Signer) -> Account:
        """
        Load the account registered as ``name``; otherwise create, fund and
        register a new one. The account is topped up either way.
        """
        account = self.load_account(name, key_pair)
        if account is None:
            account = self.create_account(key_pair)
            self.top_up_account(account)
            account = self.register_account_name(name, account)
        self.top_up_account(account)
        return account

    def register_account_name(
        self, name: str, account: Account, address: Optional[AddressLike] = None
    ) -> Account:
        """
        Register ``name`` in the registry, paid for by ``account``.

        ``address`` defaults to the account's own address.
        """
        target = to_address(account if address is None else address)
        entry = self.registry.register(f"{ACCOUNT_NAME_PREFIX}{name}", target, account)
        return Account.create(account.key_pair, entry.address, name)

    def resolve_account_name(self, name: str) -> Optional[int]:
        return self.registry.resolve_address(f"{ACCOUNT_NAME_PREFIX}{name}")

    def resolve_name(self, name: str) -> Optional[int]:
        """Resolve any registry name (libraries, actors, ...)."""
        return self.registry.resolve_address(name)

    # --- funds ----------------------------------------------------------------

    def request_funds(self, amount: int, account: AddressLike) -> int:
        """Request ``amount`` from the development faucet; returns the amount granted."""
        body = self.transport.post(
            "request_funds",
            PATH_FAUCET,
            {"address": to_address(account), "amount": int(amount)},
        )
        return int(body.get("value") or 0)

    def top_up_account(
        self,
        account: AddressLike,
        min_balance: Optional[int] = None,
        retry_count: Optional[int] = None,
    ) -> int:
        """
        Request faucet funds until the balance reaches ``min_balance`` or
        ``retry_count`` requests have been made.

        Best effort: returns the total granted even if the threshold was not met.
        """
        min_balance = self.config.topup_min_balance if min_balance is None else int(min_balance)
        retries = self.config.topup_retry_count if retry_count is None else int(retry_count)
        total = 0
        while retries > 0 and self.get_balance(account) < min_balance:
            total += self.request_funds(self.config.topup_request_amount, account)
            retries -= 1
        log.debug("topped up #%d by %d", to_address(account), total)
        return total

    def get_balance(self, address: AddressLike) -> int:
        """Balance of ``address``; an address with no account has balance 0."""
        address = to_address(address)
        outcome = self.coordinator.query_outcome(build.balance(address, self.language), address)
        if outcome.error_code is ErrorCode.NOBODY:
            return 0
        result = outcome.unwrap()
        return int(result.value or 0)

    def transfer(self, to: AddressLike, amount: int, from_account: Account) -> int:
        """Transfer ``amount`` to ``to``; returns the amount transferred."""
        if int(amount) < 0:
            raise ValueError("transfer amount must be non-negative")
        source = build.transfer(to_address(to), int(amount), self.language)
        result = self.send(source, from_account)
        return int(result.value or 0)

    # --- generic --------------------------------------------------------------

    def get_address(self, function_name: str, address: AddressLike) -> Optional[int]:
        """Address of a deployed function as seen from ``address`` (None if unknown)."""
        result = self.query(build.address_of(function_name, self.language), address)
        return None if result.value is None else to_address(result.value)

    def send(
        self,
        source: str,
        account: Account,
        language: Union[Language, str, None] = None,
        sequence: Optional[int] = None,
    ) -> NodeResult:
        lang = Language.parse(language) if language is not None else None
        return self.coordinator.send(source, account, lang, sequence)

    def query(
        self, source: str, address: AddressLike, language: Union[Language, str, None] = None
    ) -> NodeResult:
        lang = Language.parse(language) if language is not None else None
        return self.coordinator.query(source, address, lang)
