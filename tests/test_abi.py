"""Tests for the interface-description parser and type tags."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from oraculum.errors import MalformedDescriptor
from oraculum.pneuma.abi import load_abi_document, parse_descriptor, parse_type


class TestParseType:
    """Type strings resolve once into the closed TypeTag variant."""

    @pytest.mark.parametrize(
        "type_string, kind, size",
        [
            ("uint256", "uint", 256),
            ("uint8", "uint", 8),
            ("uint", "uint", 256),
            ("int", "int", 256),
            ("int64", "int", 64),
            ("bytes32", "fixed_bytes", 32),
            ("bytes1", "fixed_bytes", 1),
            ("bytes", "bytes", None),
            ("address", "address", None),
            ("bool", "bool", None),
            ("string", "string", None),
        ],
    )
    def test_scalars(self, type_string: str, kind: str, size: Any) -> None:
        tag = parse_type(type_string)
        assert tag.kind == kind
        assert tag.size == size

    def test_int_alias_is_canonicalized(self) -> None:
        assert parse_type("uint").canonical == "uint256"
        assert parse_type("int").canonical == "int256"

    def test_dynamic_array(self) -> None:
        tag = parse_type("bytes32[]")
        assert tag.kind == "array"
        assert tag.item.kind == "fixed_bytes"
        assert tag.canonical == "bytes32[]"

    def test_nested_fixed_array(self) -> None:
        tag = parse_type("uint8[2][]")
        assert tag.kind == "array"
        assert tag.item.kind == "fixed_array"
        assert tag.item.size == 2
        assert tag.canonical == "uint8[2][]"

    def test_tuple_with_components(self) -> None:
        tag = parse_type(
            "tuple[]",
            [{"name": "who", "type": "address"}, {"name": "amount", "type": "uint256"}],
        )
        assert tag.kind == "array"
        assert tag.item.kind == "tuple"
        assert [c.name for c in tag.item.components] == ["who", "amount"]
        assert tag.canonical == "(address,uint256)[]"

    @pytest.mark.parametrize("bad", ["uint7", "uint512", "bytes33", "bytes0", "float", "uint256[0]", "[]", "tuple"])
    def test_rejects_unsupported(self, bad: str) -> None:
        with pytest.raises(ValueError):
            parse_type(bad)


class TestParseDescriptor:
    """Document-level parsing."""

    def test_engine_abi_keeps_every_record_in_order(self, engine_abi: list[dict[str, Any]]) -> None:
        descriptors = parse_descriptor(engine_abi)
        assert len(descriptors) == len(engine_abi)
        assert [d.kind for d in descriptors] == [r["type"] for r in engine_abi]
        assert descriptors[0].name == "commitEntropy"

    def test_accepts_json_text(self, engine_abi: list[dict[str, Any]]) -> None:
        assert parse_descriptor(json.dumps(engine_abi)) == parse_descriptor(engine_abi)

    def test_parsing_is_idempotent(self, engine_abi: list[dict[str, Any]]) -> None:
        text = json.dumps(engine_abi)
        first = parse_descriptor(text)
        second = parse_descriptor(text)
        assert first == second
        assert [d.signature for d in first] == [d.signature for d in second]

    def test_parameter_order_is_preserved(self, engine_abi: list[dict[str, Any]]) -> None:
        verify = next(d for d in parse_descriptor(engine_abi) if d.name == "verifyLeaf")
        assert [p.name for p in verify.parameters] == ["proof", "leaf"]
        assert verify.signature == "verifyLeaf(bytes32[],bytes32)"

    def test_tuple_output(self, engine_abi: list[dict[str, Any]]) -> None:
        get_step = next(d for d in parse_descriptor(engine_abi) if d.name == "getStep")
        assert get_step.output_types == ["(bytes,bytes,bytes,bytes,bytes,bytes)"]

    def test_missing_mutability_takes_write_path(self) -> None:
        (fn,) = parse_descriptor([{"type": "function", "name": "poke", "inputs": []}])
        assert fn.mutability == "nonpayable"
        assert fn.is_write
        assert not fn.is_read

    def test_legacy_payable_flag(self) -> None:
        (fn,) = parse_descriptor([{"type": "function", "name": "deposit", "payable": True}])
        assert fn.is_payable

    def test_receive_and_constructor_names(self, engine_abi: list[dict[str, Any]]) -> None:
        descriptors = parse_descriptor(engine_abi)
        kinds = {d.kind: d for d in descriptors}
        assert kinds["receive"].name == "receive"
        assert kinds["constructor"].name == "constructor"
        assert not kinds["receive"].is_function

    def test_overloads_are_all_kept(self) -> None:
        document = [
            {"type": "function", "name": "mint", "inputs": [{"name": "to", "type": "address"}]},
            {
                "type": "function",
                "name": "mint",
                "inputs": [{"name": "to", "type": "address"}, {"name": "n", "type": "uint256"}],
            },
        ]
        descriptors = parse_descriptor(document)
        assert [d.signature for d in descriptors] == ["mint(address)", "mint(address,uint256)"]

    def test_known_selectors(self, engine_abi: list[dict[str, Any]]) -> None:
        by_name = {d.name: d for d in parse_descriptor(engine_abi)}
        assert by_name["owner"].selector.hex() == "8da5cb5b"
        assert by_name["renounceOwnership"].selector.hex() == "715018a6"
        assert by_name["transferOwnership"].selector.hex() == "f2fde38b"


class TestMalformedDescriptor:
    """Structural failures block the whole document."""

    def test_missing_type_fails_entire_document(self, engine_abi: list[dict[str, Any]]) -> None:
        broken = [dict(r) for r in engine_abi]
        del broken[3]["type"]
        with pytest.raises(MalformedDescriptor) as excinfo:
            parse_descriptor(broken)
        assert any(err.startswith("3") for err in excinfo.value.errors)

    def test_invalid_json(self) -> None:
        with pytest.raises(MalformedDescriptor):
            parse_descriptor("[{not json")

    def test_not_a_sequence(self) -> None:
        with pytest.raises(MalformedDescriptor):
            parse_descriptor({"type": "function", "name": "x"})

    def test_unknown_record_type(self) -> None:
        with pytest.raises(MalformedDescriptor):
            parse_descriptor([{"type": "modifier", "name": "onlyOwner"}])

    def test_function_without_name(self) -> None:
        with pytest.raises(MalformedDescriptor):
            parse_descriptor([{"type": "function", "inputs": []}])

    def test_unknown_parameter_type(self) -> None:
        with pytest.raises(MalformedDescriptor) as excinfo:
            parse_descriptor(
                [{"type": "function", "name": "f", "inputs": [{"name": "x", "type": "uint7"}]}]
            )
        assert "uint7" in str(excinfo.value)

    def test_bad_mutability(self) -> None:
        with pytest.raises(MalformedDescriptor):
            parse_descriptor([{"type": "function", "name": "f", "stateMutability": "constant"}])


class TestLoadAbiDocument:
    def test_plain_array(self, tmp_path: Path, engine_abi: list[dict[str, Any]]) -> None:
        path = tmp_path / "engine.json"
        path.write_text(json.dumps(engine_abi), encoding="utf-8")
        assert load_abi_document(path) == engine_abi

    def test_compiler_artifact(self, tmp_path: Path, engine_abi: list[dict[str, Any]]) -> None:
        path = tmp_path / "Engine.json"
        path.write_text(json.dumps({"abi": engine_abi, "bytecode": {"object": "0x"}}), encoding="utf-8")
        assert load_abi_document(path) == engine_abi

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_abi_document(tmp_path / "absent.json")

    def test_not_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("abi: nope", encoding="utf-8")
        with pytest.raises(MalformedDescriptor):
            load_abi_document(path)
