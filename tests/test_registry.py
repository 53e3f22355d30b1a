"""Tests for the Method Registry and the interface summary."""

from __future__ import annotations

from typing import Any

import pytest

from oraculum.codex.registry import MethodRegistry
from oraculum.codex.summary import describe_operation, generate_interface_summary
from oraculum.errors import AmbiguousOperation, MalformedDescriptor, UnknownOperation

STEP_ENGINE = [
    {
        "type": "function",
        "name": "getStepCount",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "revealEntropy",
        "inputs": [{"name": "entropy", "type": "bytes"}],
        "outputs": [],
        "stateMutability": "payable",
    },
    {"type": "event", "name": "EntropyRevealed", "inputs": [{"name": "data", "type": "bytes"}]},
]

OVERLOADED = [
    {"type": "function", "name": "mint", "inputs": [{"name": "to", "type": "address"}]},
    {
        "type": "function",
        "name": "mint",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
    },
    {"type": "function", "name": "burn", "inputs": [], "stateMutability": "nonpayable"},
]


class TestClassification:
    def test_step_engine_scenario(self) -> None:
        registry = MethodRegistry.from_document(STEP_ENGINE)
        assert [fn.name for fn in registry] == ["getStepCount", "revealEntropy"]
        assert registry.get("getStepCount").is_read
        assert registry.get("revealEntropy").is_write
        assert registry.get("revealEntropy").is_payable
        assert [e.name for e in registry.events] == ["EntropyRevealed"]

    def test_engine_abi_split(self, engine_abi: list[dict[str, Any]]) -> None:
        registry = MethodRegistry.from_document(engine_abi)
        assert len(registry) == 23
        assert len(registry.read_operations) == 14
        assert len(registry.write_operations) == 9
        assert {e.name for e in registry.errors} == {"OwnableInvalidOwner", "OwnableUnauthorizedAccount"}
        assert "constructor" not in registry

    def test_pure_is_read(self, engine_abi: list[dict[str, Any]]) -> None:
        registry = MethodRegistry.from_document(engine_abi)
        assert registry.is_read("computeKeccakHash")

    def test_functions_keep_declaration_order(self, engine_abi: list[dict[str, Any]]) -> None:
        registry = MethodRegistry.from_document(engine_abi)
        expected = [r["name"] for r in engine_abi if r["type"] == "function"]
        assert [fn.name for fn in registry] == expected

    def test_malformed_document_builds_nothing(self) -> None:
        broken = STEP_ENGINE + [{"name": "orphan", "inputs": []}]
        with pytest.raises(MalformedDescriptor):
            MethodRegistry.from_document(broken)


class TestLookup:
    def test_unknown(self) -> None:
        registry = MethodRegistry.from_document(STEP_ENGINE)
        with pytest.raises(UnknownOperation):
            registry.get("EntropyRevealed")

    def test_overloaded_name_is_ambiguous(self) -> None:
        registry = MethodRegistry.from_document(OVERLOADED)
        with pytest.raises(AmbiguousOperation) as excinfo:
            registry.get("mint")
        assert excinfo.value.candidates == ["mint(address)", "mint(address,uint256)"]

    def test_signature_disambiguates(self) -> None:
        registry = MethodRegistry.from_document(OVERLOADED)
        assert registry.arity("mint(address,uint256)") == 2
        assert registry.arity("mint(address)") == 1

    def test_keys_use_signature_only_for_overloads(self) -> None:
        registry = MethodRegistry.from_document(OVERLOADED)
        assert registry.keys() == ["mint(address)", "mint(address,uint256)", "burn"]

    def test_repeated_signature_is_listed_once(self) -> None:
        document = [
            {"type": "function", "name": "poke", "inputs": [], "stateMutability": "view"},
            {"type": "function", "name": "poke", "inputs": [], "stateMutability": "nonpayable"},
            {"type": "function", "name": "burn", "inputs": []},
        ]
        registry = MethodRegistry.from_document(document)

        assert [fn.signature for fn in registry] == ["poke()", "burn()"]
        assert registry.get("poke").is_read
        assert registry.keys() == ["poke", "burn"]
        assert [fn.mutability for fn in registry.shadowed] == ["nonpayable"]
        assert generate_interface_summary(registry).splitlines() == [
            "poke(): read (view)",
            "burn(): write (nonpayable)",
        ]

    def test_contains(self) -> None:
        registry = MethodRegistry.from_document(OVERLOADED)
        assert "mint" in registry
        assert "burn()" in registry
        assert "approve" not in registry


class TestInterfaceSummary:
    def test_step_engine_listing(self) -> None:
        registry = MethodRegistry.from_document(STEP_ENGINE)
        assert generate_interface_summary(registry).splitlines() == [
            "getStepCount(): read (view) -> uint256",
            "revealEntropy(entropy: bytes): write (payable)",
        ]

    def test_one_line_per_function_in_order(self, engine_abi: list[dict[str, Any]]) -> None:
        registry = MethodRegistry.from_document(engine_abi)
        lines = generate_interface_summary(registry).splitlines()
        assert len(lines) == len(registry)
        assert [line.split("(", 1)[0] for line in lines] == [fn.name for fn in registry]

    def test_unnamed_parameters_and_tuple_outputs(self, engine_abi: list[dict[str, Any]]) -> None:
        registry = MethodRegistry.from_document(engine_abi)
        assert describe_operation(registry.get("shards")) == "shards(arg0: uint256): read (view) -> address"
        assert describe_operation(registry.get("getStep")) == (
            "getStep(id: uint256): read (view) -> (bytes,bytes,bytes,bytes,bytes,bytes)"
        )
        assert describe_operation(registry.get("verifyLeaf")) == (
            "verifyLeaf(proof: bytes32[], leaf: bytes32): read (view) -> bool"
        )

    def test_summary_is_deterministic(self, engine_abi: list[dict[str, Any]]) -> None:
        first = generate_interface_summary(MethodRegistry.from_document(engine_abi))
        second = generate_interface_summary(MethodRegistry.from_document(engine_abi))
        assert first == second
