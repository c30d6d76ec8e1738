from __future__ import annotations

from typing import List

import pytest

from convex_sdk.account import Account
from convex_sdk.tx.send import TransactionCoordinator, default_send_policy
from convex_sdk.wallet.key_pair import KeyPair

from . import RecordingTransport, StubSigner


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def coordinator(transport: RecordingTransport, sleeps: List[float]) -> TransactionCoordinator:
    return TransactionCoordinator(transport, retry=default_send_policy(sleep=sleeps.append))


@pytest.fixture()
def signer() -> StubSigner:
    return StubSigner()


@pytest.fixture()
def account(signer: StubSigner) -> Account:
    return Account.create(signer, 1234)


@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    return KeyPair.create()
