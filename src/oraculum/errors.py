"""
Oraculum error taxonomy.

Every error carries a ``kind`` tag (used in ``Failure`` outcomes) and an
``exit_code`` (used by the CLI).
"""

from __future__ import annotations


class OraculumError(RuntimeError):
    kind: str = "OraculumError"
    exit_code: int = 1


class MalformedDescriptor(OraculumError):
    """The interface-description document failed structural validation."""

    kind = "MalformedDescriptor"
    exit_code = 3

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotInitialized(OraculumError):
    kind = "NotInitialized"
    exit_code = 4


class UnknownOperation(OraculumError):
    kind = "UnknownOperation"
    exit_code = 5


class AmbiguousOperation(OraculumError):
    kind = "AmbiguousOperation"
    exit_code = 5

    def __init__(self, name: str, candidates: list[str]) -> None:
        super().__init__(
            f"Operation {name!r} is overloaded; use one of: {', '.join(candidates)}"
        )
        self.name = name
        self.candidates = candidates


class EncodingFailure(OraculumError):
    kind = "EncodingFailure"
    exit_code = 6


class RemoteFailure(OraculumError):
    kind = "RemoteFailure"
    exit_code = 7


class FormattingFailure(OraculumError):
    kind = "FormattingFailure"
    exit_code = 8


def exit_code_for(kind: str) -> int:
    """CLI exit status for a Failure kind."""
    for cls in (
        MalformedDescriptor,
        NotInitialized,
        UnknownOperation,
        AmbiguousOperation,
        EncodingFailure,
        RemoteFailure,
        FormattingFailure,
    ):
        if cls.kind == kind:
            return cls.exit_code
    return OraculumError.exit_code
