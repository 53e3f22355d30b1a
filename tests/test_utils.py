"""Unit tests for utils.py functions."""

from __future__ import annotations

import re

import pytest

from oraculum.utils import (
    hex_to_bytes,
    hex_to_int,
    is_hex_address,
    keccak256,
    to_checksum_address,
    uuidv7,
)


class TestKeccak:
    def test_empty_input(self) -> None:
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_function_selector(self) -> None:
        assert keccak256(b"transfer(address,uint256)")[:4].hex() == "a9059cbb"


class TestAddresses:
    @pytest.mark.parametrize(
        "address",
        [
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
            "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
            "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
        ],
    )
    def test_eip55_vectors(self, address: str) -> None:
        assert to_checksum_address(address.lower()) == address

    def test_is_hex_address(self) -> None:
        assert is_hex_address("0x" + "ab" * 20)
        assert not is_hex_address("0x" + "ab" * 19)
        assert not is_hex_address("ab" * 20)
        assert not is_hex_address("0x" + "zz" * 20)


class TestHex:
    def test_hex_to_bytes(self) -> None:
        assert hex_to_bytes("0x0102") == b"\x01\x02"
        assert hex_to_bytes("0x") == b""
        assert hex_to_bytes("0xf") == b"\x0f"

    def test_hex_to_int(self) -> None:
        assert hex_to_int("0x5208") == 21000
        assert hex_to_int(7) == 7
        assert hex_to_int(None) is None


class TestUuidV7:
    def test_format(self) -> None:
        value = str(uuidv7())
        assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-7[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}", value)

    def test_unique(self) -> None:
        assert len({str(uuidv7()) for _ in range(100)}) == 100
