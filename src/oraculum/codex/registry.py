"""
Method Registry - Classifies parsed descriptors and resolves operation names.

Functions are keyed by their canonical signature. A bare name resolves only
when it names exactly one function; overloaded names must be disambiguated
by the caller.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from ..errors import AmbiguousOperation, UnknownOperation
from ..pneuma.abi import ERROR, EVENT, OperationDescriptor, parse_descriptor


class MethodRegistry:
    def __init__(self, descriptors: Sequence[OperationDescriptor]) -> None:
        self.descriptors: tuple[OperationDescriptor, ...] = tuple(descriptors)
        self.events = tuple(d for d in self.descriptors if d.kind == EVENT)
        self.errors = tuple(d for d in self.descriptors if d.kind == ERROR)

        self._by_signature: dict[str, OperationDescriptor] = {}
        self._by_name: dict[str, list[OperationDescriptor]] = {}
        shadowed: list[OperationDescriptor] = []
        for fn in self.descriptors:
            if not fn.is_function:
                continue
            # Identical signatures declared twice: the later one is unreachable.
            if fn.signature in self._by_signature:
                shadowed.append(fn)
                continue
            self._by_signature[fn.signature] = fn
            self._by_name.setdefault(fn.name, []).append(fn)
        self.functions: tuple[OperationDescriptor, ...] = tuple(self._by_signature.values())
        self.shadowed: tuple[OperationDescriptor, ...] = tuple(shadowed)

    @classmethod
    def from_document(cls, document) -> "MethodRegistry":
        """Parse and index a document; raises MalformedDescriptor on any bad record."""
        return cls(parse_descriptor(document))

    def __iter__(self) -> Iterator[OperationDescriptor]:
        return iter(self.functions)

    def __len__(self) -> int:
        return len(self.functions)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and (key in self._by_signature or key in self._by_name)

    @property
    def read_operations(self) -> tuple[OperationDescriptor, ...]:
        return tuple(fn for fn in self.functions if fn.is_read)

    @property
    def write_operations(self) -> tuple[OperationDescriptor, ...]:
        return tuple(fn for fn in self.functions if fn.is_write)

    def get(self, key: str) -> OperationDescriptor:
        """
        Resolve an operation by signature or by unique name.

        Raises:
            UnknownOperation: If nothing matches
            AmbiguousOperation: If a bare name matches several overloads
        """
        if key in self._by_signature:
            return self._by_signature[key]
        matches = self._by_name.get(key)
        if not matches:
            raise UnknownOperation(f"No function {key!r} in the interface description")
        if len(matches) > 1:
            raise AmbiguousOperation(key, [m.signature for m in matches])
        return matches[0]

    def key_for(self, descriptor: OperationDescriptor) -> str:
        """Shortest unambiguous lookup key: the name, or the signature for overloads."""
        if len(self._by_name.get(descriptor.name, [])) > 1:
            return descriptor.signature
        return descriptor.name

    def keys(self) -> list[str]:
        return [self.key_for(fn) for fn in self.functions]

    def is_read(self, key: str) -> bool:
        return self.get(key).is_read

    def arity(self, key: str) -> int:
        return len(self.get(key).parameters)
