__all__ = [
    # Errors
    "OraculumError",
    "MalformedDescriptor",
    "NotInitialized",
    "UnknownOperation",
    "AmbiguousOperation",
    "EncodingFailure",
    "RemoteFailure",
    "FormattingFailure",
    # Interface description
    "OperationDescriptor",
    "Parameter",
    "TypeTag",
    "parse_descriptor",
    "load_abi_document",
    # Session
    "MethodRegistry",
    "InputStore",
    "Dispatcher",
    "Session",
    "SessionConfig",
    # Outcomes
    "ExecutionOutcome",
    "Success",
    "Failure",
    "Message",
    "format_outcome",
    "generate_interface_summary",
    # Remote
    "RemoteHandle",
    "RpcClient",
    "Capability",
    "LocalKeyProvider",
]

import logging

from .errors import (
    AmbiguousOperation,
    EncodingFailure,
    FormattingFailure,
    MalformedDescriptor,
    NotInitialized,
    OraculumError,
    RemoteFailure,
    UnknownOperation,
)
from .pneuma.abi import OperationDescriptor, Parameter, TypeTag, load_abi_document, parse_descriptor
from .codex.registry import MethodRegistry
from .codex.inputs import InputStore
from .codex.outcome import ExecutionOutcome, Failure, Success
from .codex.formatter import Message, format_outcome
from .codex.summary import generate_interface_summary
from .pneuma.handle import RemoteHandle
from .pneuma.rpc import RpcClient
from .sigil.eth import Capability, LocalKeyProvider
from .dispatch import Dispatcher
from .session import Session, SessionConfig

logging.getLogger(__name__).addHandler(logging.NullHandler())
