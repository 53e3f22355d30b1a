"""
ABI Parser - Turns an interface-description document into operation descriptors.

Every parameter type is resolved once, at parse time, into a ``TypeTag``
so that argument conversion and result decoding can dispatch on the tag
instead of re-reading type strings on every call.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import MalformedDescriptor
from ..utils import keccak256
from .schemas import ABI_SCHEMA, SchemaRegistry, SchemaValidationError

FUNCTION = "function"
CONSTRUCTOR = "constructor"
EVENT = "event"
ERROR = "error"
RECEIVE = "receive"
FALLBACK = "fallback"

READ_MUTABILITIES = frozenset({"pure", "view"})
WRITE_MUTABILITIES = frozenset({"nonpayable", "payable"})

_INT_RE = re.compile(r"^(u?int)(\d*)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(\d+)$")


@dataclass(frozen=True)
class TypeTag:
    """
    Closed variant describing one ABI type.

    Attributes:
        kind: One of "uint", "int", "address", "bool", "bytes",
              "fixed_bytes", "string", "array", "fixed_array", "tuple"
        size: Bit width (integers), byte width (fixed bytes) or
              length (fixed arrays)
        item: Element type for arrays
        components: Member parameters for tuples
    """
    kind: str
    size: Optional[int] = None
    item: Optional["TypeTag"] = None
    components: tuple["Parameter", ...] = ()

    @property
    def canonical(self) -> str:
        """Type string as used in function signatures and by eth-abi."""
        if self.kind in ("uint", "int"):
            return f"{self.kind}{self.size}"
        if self.kind == "fixed_bytes":
            return f"bytes{self.size}"
        if self.kind == "array":
            return f"{self.item.canonical}[]"
        if self.kind == "fixed_array":
            return f"{self.item.canonical}[{self.size}]"
        if self.kind == "tuple":
            return "(" + ",".join(c.type.canonical for c in self.components) + ")"
        return self.kind

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeTag
    indexed: bool = False

    @property
    def type_string(self) -> str:
        return self.type.canonical


@dataclass(frozen=True)
class OperationDescriptor:
    """One callable (or documentary) entry of an interface description."""
    kind: str
    name: str
    mutability: Optional[str]
    parameters: tuple[Parameter, ...] = ()
    outputs: tuple[Parameter, ...] = ()
    anonymous: bool = False

    @property
    def is_function(self) -> bool:
        return self.kind == FUNCTION

    @property
    def is_read(self) -> bool:
        return self.mutability in READ_MUTABILITIES

    @property
    def is_write(self) -> bool:
        return self.mutability in WRITE_MUTABILITIES

    @property
    def is_payable(self) -> bool:
        return self.mutability == "payable"

    @property
    def input_types(self) -> list[str]:
        return [p.type.canonical for p in self.parameters]

    @property
    def output_types(self) -> list[str]:
        return [p.type.canonical for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        """First 4 bytes of keccak256(signature)."""
        return keccak256(self.signature.encode("utf-8"))[:4]


def parse_type(type_string: str, components: Optional[list[dict[str, Any]]] = None) -> TypeTag:
    """
    Resolve an ABI type string into a ``TypeTag``.

    Raises:
        ValueError: If the type is not a supported ABI type
    """
    if type_string.endswith("]"):
        open_idx = type_string.rfind("[")
        if open_idx <= 0:
            raise ValueError(f"Unsupported ABI type: {type_string}")
        item = parse_type(type_string[:open_idx], components)
        dim = type_string[open_idx + 1:-1]
        if dim == "":
            return TypeTag("array", item=item)
        if not dim.isdigit() or int(dim) == 0:
            raise ValueError(f"Invalid array length in ABI type: {type_string}")
        return TypeTag("fixed_array", size=int(dim), item=item)

    if type_string == "tuple":
        if components is None:
            raise ValueError("Tuple type without components")
        return TypeTag("tuple", components=tuple(_parse_parameter(c) for c in components))

    if type_string in ("address", "bool", "string", "bytes"):
        return TypeTag(type_string)

    match = _INT_RE.match(type_string)
    if match:
        width = int(match.group(2)) if match.group(2) else 256
        if width % 8 or not 8 <= width <= 256:
            raise ValueError(f"Invalid integer width in ABI type: {type_string}")
        return TypeTag(match.group(1), size=width)

    match = _FIXED_BYTES_RE.match(type_string)
    if match:
        width = int(match.group(1))
        if not 1 <= width <= 32:
            raise ValueError(f"Invalid byte width in ABI type: {type_string}")
        return TypeTag("fixed_bytes", size=width)

    raise ValueError(f"Unsupported ABI type: {type_string}")


def _parse_parameter(entry: dict[str, Any]) -> Parameter:
    return Parameter(
        name=entry.get("name", ""),
        type=parse_type(entry["type"], entry.get("components")),
        indexed=bool(entry.get("indexed", False)),
    )


def _mutability(record: dict[str, Any]) -> Optional[str]:
    if record["type"] in (EVENT, ERROR):
        return None
    declared = record.get("stateMutability")
    if declared:
        return declared
    # Absent stateMutability always takes the write path.
    return "payable" if record.get("payable") is True else "nonpayable"


def _build_descriptor(record: dict[str, Any]) -> OperationDescriptor:
    kind = record["type"]
    return OperationDescriptor(
        kind=kind,
        name=record.get("name") or kind,
        mutability=_mutability(record),
        parameters=tuple(_parse_parameter(p) for p in record.get("inputs", [])),
        outputs=tuple(_parse_parameter(p) for p in record.get("outputs", [])),
        anonymous=bool(record.get("anonymous", False)),
    )


def parse_descriptor(
    document: Union[str, bytes, list[dict[str, Any]]],
    registry: Optional[SchemaRegistry] = None,
) -> tuple[OperationDescriptor, ...]:
    """
    Parse an interface-description document.

    Declaration order is preserved and same-named entries are all kept.

    Args:
        document: JSON text or an already-decoded list of records

    Returns:
        Ordered tuple of OperationDescriptor

    Raises:
        MalformedDescriptor: If the document is not a well-formed sequence
            of records; no partial result is ever returned
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as exc:
            raise MalformedDescriptor(f"Interface description is not valid JSON: {exc}") from exc

    registry = registry or SchemaRegistry.default()
    try:
        registry.validate_instance(document, ABI_SCHEMA)
    except SchemaValidationError as exc:
        raise MalformedDescriptor(
            "Interface description failed validation: " + "; ".join(exc.errors),
            errors=exc.errors,
        ) from exc

    descriptors = []
    for index, record in enumerate(document):
        try:
            descriptors.append(_build_descriptor(record))
        except (KeyError, ValueError) as exc:
            raise MalformedDescriptor(
                f"Record {index} ({record.get('name', record['type'])}): {exc}",
                errors=[f"{index}: {exc}"],
            ) from exc

    return tuple(descriptors)


def load_abi_document(path: Path) -> list[dict[str, Any]]:
    """
    Load an interface description from disk.

    Accepts either a plain JSON array or a compiler artifact
    (Foundry / Hardhat) carrying the array under ``abi``.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedDescriptor: If the file is not JSON
    """
    if not path.exists():
        raise FileNotFoundError(f"ABI not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedDescriptor(f"{path} is not valid JSON: {exc}") from exc

    if isinstance(payload, dict) and "abi" in payload:
        return payload["abi"]
    return payload
