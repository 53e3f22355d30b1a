"""
Input State Store - Argument text per operation and positional slot.

Values are stored exactly as typed. Conversion to the declared ABI type
happens at call time in the remote handle.
"""

from __future__ import annotations

from typing import Mapping


class InputStore:
    def __init__(self) -> None:
        self._slots: dict[str, tuple[str, ...]] = {}

    def set_slot(self, operation: str, index: int, value: str) -> None:
        """Replace the value at ``index`` for ``operation``; earlier slots pad as empty."""
        if index < 0:
            raise IndexError(f"Slot index must be non-negative, got {index}")
        current = list(self._slots.get(operation, ()))
        if len(current) <= index:
            current.extend([""] * (index + 1 - len(current)))
        current[index] = value
        self._slots = {**self._slots, operation: tuple(current)}

    def get_args(self, operation: str, arity: int) -> list[str]:
        """Exactly ``arity`` values; slots never set read as ``""``."""
        stored = self._slots.get(operation, ())
        return [stored[i] if i < len(stored) else "" for i in range(arity)]

    def get_slot(self, operation: str, index: int) -> str:
        stored = self._slots.get(operation, ())
        return stored[index] if 0 <= index < len(stored) else ""

    def clear(self) -> None:
        self._slots = {}

    def snapshot(self) -> Mapping[str, tuple[str, ...]]:
        return dict(self._slots)
