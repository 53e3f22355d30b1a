from __future__ import annotations

from ..pneuma.abi import OperationDescriptor
from .registry import MethodRegistry


def describe_operation(fn: OperationDescriptor) -> str:
    """One ``name(param: type, ...): effect`` line."""
    params = ", ".join(
        f"{p.name or f'arg{i}'}: {p.type_string}" for i, p in enumerate(fn.parameters)
    )
    effect = f"read ({fn.mutability})" if fn.is_read else f"write ({fn.mutability})"
    if fn.outputs:
        returns = [p.type_string for p in fn.outputs]
        effect += " -> " + (returns[0] if len(returns) == 1 else f"({', '.join(returns)})")
    return f"{fn.name}({params}): {effect}"


def generate_interface_summary(registry: MethodRegistry) -> str:
    """Interface listing in registry order; rebuild whenever the registry is rebuilt."""
    return "\n".join(describe_operation(fn) for fn in registry)
