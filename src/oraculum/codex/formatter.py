"""
Result Formatter - Renders an ExecutionOutcome for the operator.

Payloads are rendered as JSON so arrays, strings and scalars stay
distinguishable. Rendering never raises; a payload that cannot be rendered
comes back as a failure message.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from ..errors import FormattingFailure
from .outcome import ExecutionOutcome, Failure, Success


@dataclass(frozen=True)
class Message:
    ok: bool
    text: str
    kind: str = "success"


def _failure(message: str, kind: str) -> Message:
    return Message(ok=False, text=f"Error: {message}", kind=kind)


def format_outcome(outcome: ExecutionOutcome) -> Message:
    if isinstance(outcome, Failure):
        return _failure(outcome.message, outcome.kind)
    if not isinstance(outcome, Success):
        return _failure(f"unrecognized outcome {outcome!r}", FormattingFailure.kind)

    try:
        rendered = json.dumps(outcome.value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as exc:
        error = FormattingFailure(f"cannot render result of {outcome.operation or 'operation'}: {exc}")
        return _failure(str(error), error.kind)

    if outcome.is_write:
        return Message(ok=True, text=f"Transaction successful: {rendered}")
    return Message(ok=True, text=f"Fetched: {rendered}")
