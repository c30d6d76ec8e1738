from __future__ import annotations

from typing import Any, Dict, Mapping

import pytest

from convex_sdk.account import Account
from convex_sdk.api import ConvexAPI
from convex_sdk.config import SDKConfig
from convex_sdk.errors import ApiError, ApiRequestError
from convex_sdk.rpc.http import PATH_ACCOUNTS, PATH_CREATE_ACCOUNT, PATH_FAUCET
from convex_sdk.tx.send import TransactionCoordinator

from . import RecordingTransport, StubSigner


class FakeLedger:
    """Balances plus a name table, served through RecordingTransport handlers."""

    def __init__(self, transport: RecordingTransport) -> None:
        self.balances: Dict[int, int] = {}
        self.names: Dict[str, list] = {}
        self.next_address = 100
        transport.always("transaction_query", self.query)
        transport.always("request_funds", self.faucet)
        transport.always("create_account", self.create)
        transport.always("transaction_prepare", {"hash": "aa"})
        transport.always("transaction_submit", {"value": True})

    def query(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        source = data["source"]
        if source == "(address *registry*)":
            return {"value": 9}
        if source.startswith("(get cns-database"):
            name = source.split('"')[1]
            return {"value": self.names.get(name)}
        if source.startswith("(balance #"):
            address = int(source[len("(balance #"):-1])
            if address not in self.balances:
                raise ApiError("transaction_query", "NOBODY", "no account")
            return {"value": self.balances[address]}
        return {"value": None}

    def faucet(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.balances[data["address"]] = self.balances.get(data["address"], 0) + data["amount"]
        return {"address": data["address"], "amount": data["amount"], "value": data["amount"]}

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        address = self.next_address
        self.next_address += 1
        self.balances[address] = 0
        return {"address": address}


@pytest.fixture()
def config() -> SDKConfig:
    return SDKConfig(url="http://node.test", topup_min_balance=1000, topup_request_amount=400, topup_retry_count=8)


@pytest.fixture()
def api(config: SDKConfig, transport: RecordingTransport, coordinator: TransactionCoordinator) -> ConvexAPI:
    return ConvexAPI(config=config, transport=transport, coordinator=coordinator)


@pytest.fixture()
def ledger(transport: RecordingTransport) -> FakeLedger:
    return FakeLedger(transport)


def test_balance_of_unknown_account_is_zero(api: ConvexAPI, ledger: FakeLedger) -> None:
    assert api.get_balance(4242) == 0


def test_balance_of_known_account(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    ledger.balances[12] = 5000
    assert api.get_balance("#12") == 5000
    assert transport.requests("transaction_query")[-1]["source"] == "(balance #12)"


def test_balance_propagates_other_errors(api: ConvexAPI, transport: RecordingTransport) -> None:
    transport.queue("transaction_query", ApiRequestError("transaction_query", 502, "Bad Gateway"))
    with pytest.raises(ApiRequestError):
        api.get_balance(12)


def test_create_account(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    signer = StubSigner()
    account = api.create_account(signer)
    assert account.address == 100
    assert account.key_pair is signer
    assert transport.calls[-1] == ("create_account", PATH_CREATE_ACCOUNT, {"accountKey": "ab" * 32})


def test_request_funds(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    assert api.request_funds(250, "#7") == 250
    assert transport.calls[-1] == ("request_funds", PATH_FAUCET, {"address": 7, "amount": 250})


def test_top_up_until_threshold(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    ledger.balances[5] = 100
    granted = api.top_up_account(5)
    assert granted == 1200
    assert ledger.balances[5] == 1300
    assert transport.count("request_funds") == 3


def test_top_up_noop_when_funded(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    ledger.balances[5] = 10_000
    assert api.top_up_account(5) == 0
    assert transport.count("request_funds") == 0


def test_top_up_bounded_by_retry_count(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    ledger.balances[5] = 0
    granted = api.top_up_account(5, min_balance=10**9, retry_count=2)
    assert granted == 800
    assert transport.count("request_funds") == 2


def test_transfer(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport, account: Account) -> None:
    transport.queue("transaction_submit", {"value": 500})
    assert api.transfer("#77", 500, account) == 500
    assert transport.requests("transaction_prepare")[-1]["source"] == "(transfer #77 500)"


def test_zero_transfer(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport, account: Account) -> None:
    transport.queue("transaction_submit", {"value": 0})
    assert api.transfer(77, 0, account) == 0


def test_negative_transfer_rejected(api: ConvexAPI, transport: RecordingTransport, account: Account) -> None:
    with pytest.raises(ValueError):
        api.transfer(77, -1, account)
    assert transport.calls == []


def test_transfer_scrypt(config: SDKConfig, transport: RecordingTransport, ledger: FakeLedger, account: Account) -> None:
    api = ConvexAPI(config=config, language="scrypt", transport=transport)
    transport.queue("transaction_submit", {"value": 3})
    api.transfer(77, 3, account)
    prepared = transport.requests("transaction_prepare")[-1]
    assert prepared["source"] == "transfer (#77 3)"
    assert prepared["lang"] == "convex-scrypt"


def test_get_address(api: ConvexAPI, transport: RecordingTransport) -> None:
    transport.queue("transaction_query", {"value": "#88"}, {"value": None})
    assert api.get_address("my-fn", 12) == 88
    assert transport.requests("transaction_query")[0]["source"] == "(address my-fn)"
    assert api.get_address("missing", 12) is None


def test_get_account_info(api: ConvexAPI, transport: RecordingTransport) -> None:
    transport.queue(
        "get_account_info",
        {
            "address": 12,
            "is_library": False,
            "is_actor": False,
            "memory_size": 76,
            "allowance": 10000,
            "type": "user",
            "balance": 99,
            "sequence": 3,
            "environment": {},
        },
    )
    info = api.get_account_info("#12")
    assert transport.calls[-1][:2] == ("get_account_info", f"{PATH_ACCOUNTS}/12")
    assert info.address == 12
    assert info.balance == 99
    assert info.sequence == 3
    assert info.type == "user"


def test_send_and_query_pass_language(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport, account: Account) -> None:
    api.send("x", account, language="scrypt")
    api.query("y", 12, language="convex-lisp")
    assert transport.requests("transaction_prepare")[-1]["lang"] == "convex-scrypt"
    assert transport.requests("transaction_query")[-1]["lang"] == "convex-lisp"


def test_resolve_names(api: ConvexAPI, ledger: FakeLedger) -> None:
    ledger.names["convex.fungible"] = [66, 1]
    ledger.names["account.alice"] = [123, 123]
    assert api.resolve_name("convex.fungible") == 66
    assert api.resolve_account_name("alice") == 123
    assert api.resolve_account_name("nobody") is None


def test_load_account(api: ConvexAPI, ledger: FakeLedger) -> None:
    ledger.names["account.alice"] = [123, 123]
    signer = StubSigner()
    account = api.load_account("alice", signer)
    assert account == Account.create(signer, 123, "alice")
    assert api.load_account("bob", signer) is None


def test_register_account_name(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport, account: Account) -> None:
    named = api.register_account_name("carol", account)
    assert named.address == 1234
    assert named.name == "carol"
    sources = [r["source"] for r in transport.requests("transaction_prepare")]
    assert sources[-1] == '(call #9 (cns-update (symbol "account.carol") #1234))'


def test_setup_account_creates_funds_and_registers(
    api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport
) -> None:
    signer = StubSigner()
    account = api.setup_account("dave", signer)

    assert account.address == 100
    assert account.name == "dave"
    assert ledger.balances[100] >= 1000
    assert transport.count("create_account") == 1
    sources = [r["source"] for r in transport.requests("transaction_prepare")]
    assert sources == [
        '(call #9 (register {:name (symbol "account.dave")}))',
        '(call #9 (cns-update (symbol "account.dave") #100))',
    ]


def test_setup_account_loads_existing(api: ConvexAPI, ledger: FakeLedger, transport: RecordingTransport) -> None:
    ledger.names["account.erin"] = [55, 55]
    ledger.balances[55] = 10**9
    account = api.setup_account("erin", StubSigner())
    assert account.address == 55
    assert transport.count("create_account") == 0
    assert transport.count("transaction_prepare") == 0
    assert transport.count("request_funds") == 0


def test_close_closes_transport(config: SDKConfig, transport: RecordingTransport) -> None:
    closed = []
    transport.close = lambda: closed.append(True)  # type: ignore[method-assign]
    with ConvexAPI(config=config, transport=transport):
        pass
    assert closed == [True]


def test_create_and_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONVEX_URL", raising=False)
    monkeypatch.delenv("CONVEX_LANGUAGE", raising=False)
    with ConvexAPI.create("http://node.test", "scrypt") as convex:
        assert convex.url == "http://node.test"
        assert convex.language.value == "convex-scrypt"
        assert convex.coordinator.retry.max_attempts == 20
    cfg = SDKConfig(url="http://other.test", send_max_attempts=4)
    with ConvexAPI.from_config(cfg) as convex:
        assert convex.url == "http://other.test"
        assert convex.coordinator.retry.max_attempts == 4
        assert convex.registry.coordinator is convex.coordinator
