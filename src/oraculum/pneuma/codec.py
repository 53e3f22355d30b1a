"""
Codec - Type-directed conversion between operator text and ABI values.

All conversions dispatch on ``TypeTag.kind``; nothing outside this module
inspects ABI type strings at call time.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from ..errors import EncodingFailure, RemoteFailure
from ..utils import hex_to_bytes, is_hex_address, to_checksum_address
from .abi import OperationDescriptor, TypeTag

ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")

# Solidity panic codes
PANIC_REASONS = {
    0x00: "generic compiler panic",
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x22: "corrupt storage byte array",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to zero-initialized function",
}

_TRUE_WORDS = frozenset({"true", "1", "yes", "y"})
_FALSE_WORDS = frozenset({"false", "0", "no", "n"})


# ---------------------------------------------------------------------------
# Operator text -> Python values
# ---------------------------------------------------------------------------

def coerce_argument(tag: TypeTag, raw: Any, label: str = "argument") -> Any:
    """
    Convert one raw value into the Python value eth-abi expects for ``tag``.

    ``raw`` is operator text at the top level; inside arrays and tuples it
    may also be an already-decoded JSON scalar.

    Raises:
        EncodingFailure: If the value cannot represent the declared type
    """
    kind = tag.kind
    if kind in ("uint", "int"):
        return _coerce_int(tag, raw, label)
    if kind == "address":
        return _coerce_address(raw, label)
    if kind == "bool":
        return _coerce_bool(raw, label)
    if kind in ("bytes", "fixed_bytes"):
        return _coerce_bytes(tag, raw, label)
    if kind == "string":
        if not isinstance(raw, str):
            raise EncodingFailure(f"{label}: expected a string, got {raw!r}")
        return raw
    if kind in ("array", "fixed_array"):
        items = _as_json_container(raw, label)
        if not isinstance(items, list):
            raise EncodingFailure(f"{label}: expected a JSON array for {tag}")
        if kind == "fixed_array" and len(items) != tag.size:
            raise EncodingFailure(
                f"{label}: expected {tag.size} elements for {tag}, got {len(items)}"
            )
        return [coerce_argument(tag.item, item, f"{label}[{i}]") for i, item in enumerate(items)]
    if kind == "tuple":
        members = _as_json_container(raw, label)
        if isinstance(members, dict):
            try:
                members = [members[c.name] for c in tag.components]
            except KeyError as exc:
                raise EncodingFailure(f"{label}: missing tuple member {exc}") from exc
        if not isinstance(members, list) or len(members) != len(tag.components):
            raise EncodingFailure(
                f"{label}: expected {len(tag.components)} tuple members for {tag}"
            )
        return tuple(
            coerce_argument(c.type, value, f"{label}.{c.name or i}")
            for i, (c, value) in enumerate(zip(tag.components, members))
        )
    raise EncodingFailure(f"{label}: unsupported type {tag}")


def coerce_arguments(descriptor: OperationDescriptor, raw_args: Sequence[Any]) -> list[Any]:
    """Convert the positional raw values of an invocation."""
    if len(raw_args) != len(descriptor.parameters):
        raise EncodingFailure(
            f"{descriptor.signature} takes {len(descriptor.parameters)} arguments, "
            f"got {len(raw_args)}"
        )
    return [
        coerce_argument(param.type, raw, param.name or f"arg{i}")
        for i, (param, raw) in enumerate(zip(descriptor.parameters, raw_args))
    ]


def _coerce_int(tag: TypeTag, raw: Any, label: str) -> int:
    if isinstance(raw, bool):
        raise EncodingFailure(f"{label}: expected an integer, got a boolean")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip().replace("_", "")
        if not text:
            raise EncodingFailure(f"{label}: expected an integer, got an empty value")
        try:
            negative = text.startswith("-")
            digits = text[1:] if negative else text
            # One optional leading "-" and nothing but digits after it.
            if not digits[:1].isalnum():
                raise ValueError(digits)
            if digits.lower().startswith("0x"):
                value = int(digits, 16)
            else:
                value = int(digits, 10)
            value = -value if negative else value
        except ValueError as exc:
            raise EncodingFailure(f"{label}: {raw!r} is not an integer") from exc
    else:
        raise EncodingFailure(f"{label}: expected an integer, got {raw!r}")

    if tag.kind == "uint":
        low, high = 0, 2 ** tag.size - 1
    else:
        low, high = -(2 ** (tag.size - 1)), 2 ** (tag.size - 1) - 1
    if not low <= value <= high:
        raise EncodingFailure(f"{label}: {value} is out of range for {tag}")
    return value


def _coerce_address(raw: Any, label: str) -> str:
    if not isinstance(raw, str) or not is_hex_address(raw.strip()):
        raise EncodingFailure(f"{label}: {raw!r} is not a 20-byte hex address")
    text = raw.strip()
    checksummed = to_checksum_address(text)
    body = text[2:]
    if body != body.lower() and body != body.upper() and text != checksummed:
        raise EncodingFailure(f"{label}: {text} has an invalid EIP-55 checksum")
    return checksummed


def _coerce_bool(raw: Any, label: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise EncodingFailure(f"{label}: {raw!r} is not a boolean")


def _coerce_bytes(tag: TypeTag, raw: Any, label: str) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        value = bytes(raw)
    elif isinstance(raw, str) and raw.strip().lower().startswith("0x"):
        if len(raw.strip()) % 2:
            raise EncodingFailure(f"{label}: {raw!r} has an odd number of hex digits")
        try:
            value = hex_to_bytes(raw.strip())
        except ValueError as exc:
            raise EncodingFailure(f"{label}: {raw!r} is not valid hex") from exc
    else:
        raise EncodingFailure(f"{label}: expected 0x-prefixed hex for {tag}, got {raw!r}")

    if tag.kind == "fixed_bytes" and len(value) > tag.size:
        raise EncodingFailure(f"{label}: {len(value)} bytes do not fit in {tag}")
    return value


def _as_json_container(raw: Any, label: str) -> Any:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise EncodingFailure(f"{label}: expected JSON, {exc}") from exc
    raise EncodingFailure(f"{label}: expected a JSON array, got {raw!r}")


# ---------------------------------------------------------------------------
# Calldata / return data
# ---------------------------------------------------------------------------

def encode_call(descriptor: OperationDescriptor, args: Sequence[Any]) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    types = descriptor.input_types
    try:
        encoded_args = encode(types, list(args)) if types else b""
    except (EncodingError, TypeError, ValueError, OverflowError) as exc:
        raise EncodingFailure(f"{descriptor.signature}: {exc}") from exc
    return "0x" + descriptor.selector.hex() + encoded_args.hex()


def decode_result(descriptor: OperationDescriptor, data: Optional[str]) -> Any:
    """
    ABI-decode return data.

    Returns:
        None for no outputs, the single value for one output, a tuple otherwise
    """
    types = descriptor.output_types
    if not types:
        return None
    raw = hex_to_bytes(data or "0x")
    if not raw:
        raise RemoteFailure(
            f"{descriptor.name} returned no data; the address may not be a contract"
        )
    try:
        decoded = decode(types, raw)
    except DecodingError as exc:
        raise RemoteFailure(f"Cannot decode {descriptor.name} result: {exc}") from exc

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def normalize_value(value: Any) -> Any:
    """
    Make a decoded value JSON-safe without losing precision.

    Integers become decimal text, byte strings become 0x hex; applied to
    every element of nested sequences.
    """
    if isinstance(value, bool) or value is None or isinstance(value, (str, float)):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): normalize_value(v) for k, v in value.items()}
    return value


def decode_revert(data: Any, errors: Iterable[OperationDescriptor] = ()) -> Optional[str]:
    """
    Turn revert data into a readable diagnostic.

    Understands ``Error(string)``, ``Panic(uint256)`` and the custom errors
    declared in the interface description.
    """
    if not isinstance(data, str) or not data.startswith("0x") or len(data) < 10:
        return None
    try:
        raw = hex_to_bytes(data)
    except ValueError:
        return None

    selector, body = raw[:4], raw[4:]
    try:
        if selector == ERROR_STRING_SELECTOR:
            (reason,) = decode(["string"], body)
            return f"execution reverted: {reason}"
        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], body)
            return f"execution reverted: panic 0x{code:02x} ({PANIC_REASONS.get(code, 'unknown')})"
        for error in errors:
            if error.selector == selector:
                values = decode(error.input_types, body) if error.parameters else ()
                rendered = ", ".join(
                    f"{p.name or f'arg{i}'}={_render_scalar(v)}"
                    for i, (p, v) in enumerate(zip(error.parameters, values))
                )
                return f"execution reverted: {error.name}({rendered})"
    except DecodingError:
        return None
    return None


def _render_scalar(value: Any) -> str:
    normalized = normalize_value(value)
    if isinstance(normalized, str):
        return normalized
    return json.dumps(normalized)
