"""Tests for the Input State Store."""

from __future__ import annotations

import pytest

from oraculum.codex.inputs import InputStore


class TestInputStore:
    def test_unset_operation_pads_to_arity(self) -> None:
        store = InputStore()
        assert store.get_args("verifyLeaf", 2) == ["", ""]
        assert store.get_args("owner", 0) == []

    @pytest.mark.parametrize("arity", [0, 1, 3, 5])
    def test_length_always_matches_arity(self, arity: int) -> None:
        store = InputStore()
        store.set_slot("f", 2, "x")
        assert len(store.get_args("f", arity)) == arity

    def test_set_then_read_round_trip(self) -> None:
        store = InputStore()
        store.set_slot("transferOwnership", 0, "0xabc")
        assert store.get_args("transferOwnership", 1)[0] == "0xabc"

    def test_sparse_slots_read_as_empty(self) -> None:
        store = InputStore()
        store.set_slot("f", 2, "third")
        assert store.get_args("f", 3) == ["", "", "third"]

    def test_replace_keeps_other_slots(self) -> None:
        store = InputStore()
        store.set_slot("f", 0, "a")
        store.set_slot("f", 1, "b")
        store.set_slot("f", 0, "c")
        assert store.get_args("f", 2) == ["c", "b"]

    def test_operations_are_independent(self) -> None:
        store = InputStore()
        store.set_slot("f", 0, "a")
        store.set_slot("g", 0, "b")
        assert store.get_args("f", 1) == ["a"]
        assert store.get_args("g", 1) == ["b"]

    def test_values_are_not_validated(self) -> None:
        store = InputStore()
        store.set_slot("updateFee", 0, "not a number")
        assert store.get_slot("updateFee", 0) == "not a number"

    def test_snapshot_is_not_mutated_by_later_edits(self) -> None:
        store = InputStore()
        store.set_slot("f", 0, "a")
        before = store.snapshot()
        store.set_slot("f", 0, "b")
        assert before["f"] == ("a",)

    def test_negative_index(self) -> None:
        with pytest.raises(IndexError):
            InputStore().set_slot("f", -1, "x")

    def test_clear(self) -> None:
        store = InputStore()
        store.set_slot("f", 0, "a")
        store.clear()
        assert store.get_args("f", 1) == [""]
