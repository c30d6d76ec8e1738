"""
Address normalization and checksum casing.

Includes the published checksum vector and property tests over random
fixed-length hex strings.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from convex_sdk.account import Account
from convex_sdk.address import (
    is_address,
    is_checksum_valid,
    is_public_key,
    is_public_key_checksum,
    to_address,
    to_checksum,
)
from convex_sdk.errors import InvalidAddress

VECTOR_IN = "0x5288fec4153b702430771dfac8aed0b21cafca4344dae0d47b97f0bf532b3306"
VECTOR_OUT = "0x5288Fec4153b702430771DFAC8AeD0B21CAFca4344daE0d47B97F0bf532b3306"

hex64 = st.binary(min_size=32, max_size=32).map(bytes.hex)


def test_checksum_known_vector() -> None:
    assert to_checksum(VECTOR_IN) == VECTOR_OUT
    assert to_checksum(VECTOR_IN[2:]) == VECTOR_OUT
    assert to_checksum(VECTOR_OUT.upper().replace("0X", "0x")) == VECTOR_OUT


def test_checksum_vector_validates() -> None:
    assert is_checksum_valid(VECTOR_OUT)
    assert is_checksum_valid(VECTOR_OUT[2:])
    assert is_public_key_checksum(VECTOR_OUT)
    assert not is_checksum_valid(VECTOR_OUT.lower().replace("5288fec", "5288FEC"))


@given(hex64)
def test_checksum_round_trip(h: str) -> None:
    checksummed = to_checksum(h)
    assert checksummed.startswith("0x")
    assert len(checksummed) == len(h) + 2
    assert checksummed.lower() == "0x" + h
    assert is_checksum_valid(checksummed)
    assert to_checksum(h) == checksummed


@given(hex64)
def test_checksum_ignores_input_casing(h: str) -> None:
    assert to_checksum(h.upper()) == to_checksum(h)


@pytest.mark.parametrize("bad", ["0xabc", "xyz1", "0x12g4"])
def test_checksum_rejects_bad_hex(bad: str) -> None:
    with pytest.raises(InvalidAddress):
        to_checksum(bad)


def test_is_checksum_valid_on_garbage() -> None:
    assert not is_checksum_valid("")
    assert not is_checksum_valid("0x")
    assert not is_checksum_valid("not hex")


def test_public_key_shape() -> None:
    assert is_public_key(VECTOR_IN)
    assert is_public_key(VECTOR_IN[2:])
    assert not is_public_key(VECTOR_IN[:-2])
    assert not is_public_key("zz" * 32)


@pytest.mark.parametrize("value", ["#42", "42", 42, " #42 ", "0x2a", "#0x2A"])
def test_to_address_forms_agree(value) -> None:
    assert to_address(value) == 42


def test_to_address_zero() -> None:
    assert to_address("#0") == 0
    assert to_address(0) == 0


def test_to_address_large_values() -> None:
    big = 2**80 + 7
    assert to_address(str(big)) == big
    assert to_address(f"#{big}") == big


def test_to_address_from_account() -> None:
    account = Account.create(object(), 17)  # type: ignore[arg-type]
    assert to_address(account) == 17


@pytest.mark.parametrize(
    "bad",
    ["-1", -1, "#-5", "abc", "", "#", "4 2", 1.5, None, True, "٣", "#٣", "0x٣", "0x", "0x_ff"],
)
def test_to_address_rejects(bad) -> None:
    with pytest.raises(InvalidAddress):
        to_address(bad)
    assert not is_address(bad)


def test_to_address_account_without_address() -> None:
    with pytest.raises(InvalidAddress):
        to_address(Account.create(object()))  # type: ignore[arg-type]


def test_invalid_address_is_value_error() -> None:
    with pytest.raises(ValueError):
        to_address("nope")
