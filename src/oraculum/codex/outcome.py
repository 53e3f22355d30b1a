from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..errors import OraculumError


@dataclass(frozen=True)
class Success:
    """
    Resolved invocation.

    Attributes:
        value: Normalized return payload (reads) or receipt summary (writes)
        operation: Lookup key of the invoked operation
        invocation_id: Identity of the invocation that produced this outcome
        is_write: Whether the write path (submit + confirm) was taken
    """
    value: Any
    operation: str = ""
    invocation_id: str = ""
    is_write: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    message: str
    kind: str = "RemoteFailure"
    operation: str = ""
    invocation_id: str = ""

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, exc: BaseException, operation: str = "", invocation_id: str = "") -> "Failure":
        kind = exc.kind if isinstance(exc, OraculumError) else "RemoteFailure"
        message = str(exc) or exc.__class__.__name__
        return cls(message=message, kind=kind, operation=operation, invocation_id=invocation_id)


ExecutionOutcome = Union[Success, Failure]
