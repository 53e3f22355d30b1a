"""
Session - One contract, one interface description, one live binding.

The session owns the registry, the Input State Store and the current
RemoteHandle. Binding a new capability always builds a new handle; the
previous one is invalidated but invocations already holding it are left
to finish on their own.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .codex.inputs import InputStore
from .codex.outcome import ExecutionOutcome
from .codex.registry import MethodRegistry
from .codex.summary import generate_interface_summary
from .dispatch import Dispatcher
from .pneuma.abi import load_abi_document
from .pneuma.handle import RemoteHandle
from .pneuma.rpc import RpcClient, get_chain_id, get_rpc_url
from .sigil.eth import Capability, CapabilityProvider, load_env
from .utils import is_hex_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """
    Immutable configuration of one session.

    Attributes:
        contract_address: 0x-prefixed contract address
        abi_document: Interface description (JSON text or decoded list)
        rpc_url: JSON-RPC endpoint
        chain_id: Chain ID for signing (queried from the node when None)
        gas_limit: Fixed gas limit (estimated per call when None)
        serialize_invocations: Allow only one invocation in flight
        confirm_timeout: Receipt wait limit in seconds (None: unbounded)
        poll_interval: Receipt polling interval in seconds
    """
    contract_address: str
    abi_document: Any
    rpc_url: str
    chain_id: Optional[int] = None
    gas_limit: Optional[int] = None
    serialize_invocations: bool = False
    confirm_timeout: Optional[float] = None
    poll_interval: float = 2.0

    def __post_init__(self) -> None:
        if not is_hex_address(self.contract_address):
            raise ValueError(f"Invalid contract address: {self.contract_address!r}")

    @classmethod
    def from_env(
        cls,
        contract_address: Optional[str] = None,
        abi_path: Optional[Path] = None,
        rpc_url: Optional[str] = None,
        **overrides: Any,
    ) -> "SessionConfig":
        """
        Build a config from explicit values, falling back to the environment
        (ORACULUM_CONTRACT, ORACULUM_ABI, ORACULUM_RPC_URL, CHAIN_ID) after
        loading ~/.oraculum/.env.
        """
        load_env()
        contract_address = contract_address or os.environ.get("ORACULUM_CONTRACT")
        if not contract_address:
            raise ValueError("No contract address. Pass --contract or set ORACULUM_CONTRACT.")
        if abi_path is None:
            env_abi = os.environ.get("ORACULUM_ABI")
            if not env_abi:
                raise ValueError("No ABI file. Pass --abi or set ORACULUM_ABI.")
            abi_path = Path(env_abi)
        overrides.setdefault("chain_id", get_chain_id())
        return cls(
            contract_address=contract_address,
            abi_document=load_abi_document(Path(abi_path).expanduser()),
            rpc_url=rpc_url or get_rpc_url(),
            **overrides,
        )


class Session:
    """
    Args:
        config: Session configuration
        rpc: JSON-RPC client (built from ``config.rpc_url`` when None)

    Raises:
        MalformedDescriptor: If the interface description is malformed
    """

    def __init__(self, config: SessionConfig, rpc: Optional[RpcClient] = None) -> None:
        self.config = config
        self.rpc = rpc or RpcClient(config.rpc_url)
        self.registry = MethodRegistry.from_document(config.abi_document)
        self.interface_summary = generate_interface_summary(self.registry)
        logger.debug("Generated interface:\n%s", self.interface_summary)
        self.inputs = InputStore()
        self.handle: Optional[RemoteHandle] = None
        self.outcomes: dict[str, ExecutionOutcome] = {}
        self._generation = 0
        self._dispatcher = Dispatcher(
            serialize=config.serialize_invocations,
            confirm_timeout=config.confirm_timeout,
            poll_interval=config.poll_interval,
        )

    # ---- binding ----

    def bind(self, capability: Capability) -> RemoteHandle:
        """Build a fresh handle for ``capability`` and retire the previous one."""
        previous = self.handle
        self._generation += 1
        self.handle = RemoteHandle(
            self.config.contract_address,
            self.registry,
            capability,
            self.rpc,
            chain_id=self.config.chain_id,
            gas_limit=self.config.gas_limit,
            generation=self._generation,
        )
        if previous is not None:
            previous.invalidate()
        logger.debug(
            "Bound %s as %s (handle #%d)",
            self.handle.address,
            capability.address or "read-only",
            self._generation,
        )
        return self.handle

    async def connect(self, provider: CapabilityProvider) -> RemoteHandle:
        """Ask the provider for an account, then bind its capability."""
        await provider.request_connection()
        return self.bind(provider.capability())

    def unbind(self) -> None:
        if self.handle is not None:
            self.handle.invalidate()
        self.handle = None

    def reinitialize(self, document: Any) -> MethodRegistry:
        """
        Rebuild the registry from a new interface description.

        On MalformedDescriptor the current registry, inputs and handle are
        left untouched.
        """
        registry = MethodRegistry.from_document(document)
        self.registry = registry
        self.interface_summary = generate_interface_summary(registry)
        self.inputs.clear()
        if self.handle is not None:
            self.bind(self.handle.capability)
        return registry

    # ---- inputs ----

    def set_slot(self, operation: str, index: int, value: str) -> None:
        descriptor = self.registry.get(operation)
        if not 0 <= index < len(descriptor.parameters):
            raise IndexError(
                f"{descriptor.signature} has {len(descriptor.parameters)} parameters; "
                f"slot {index} does not exist"
            )
        self.inputs.set_slot(self.registry.key_for(descriptor), index, value)

    def get_args(self, operation: str) -> list[str]:
        descriptor = self.registry.get(operation)
        return self.inputs.get_args(self.registry.key_for(descriptor), len(descriptor.parameters))

    # ---- invocation ----

    def _current_binding(self) -> tuple[MethodRegistry, Optional[RemoteHandle]]:
        return self.registry, self.handle

    async def invoke(self, operation: str, value: int = 0) -> ExecutionOutcome:
        """
        Invoke against the handle bound when the invocation starts running.

        With serialized invocations that is after any queued ones finish, so
        a rebind in the meantime is picked up. The outcome is also kept by
        invocation id.
        """
        outcome = await self._dispatcher.invoke(
            operation, self._current_binding, self.inputs, value=value
        )
        self.outcomes[outcome.invocation_id] = outcome
        return outcome
