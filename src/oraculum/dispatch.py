"""
Execution Dispatcher - Runs one operation against the bound remote handle.

Per invocation:

    Idle -> ArgsAssembled -> ReadPending             -> Resolved
                          -> WritePending -> Confirming -> Resolved

Every invocation resolves to exactly one ExecutionOutcome. Nothing is
retried; a failed invocation has to be started again by the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .codex.inputs import InputStore
from .codex.outcome import ExecutionOutcome, Failure, Success
from .codex.registry import MethodRegistry
from .errors import NotInitialized, OraculumError
from .pneuma.codec import normalize_value
from .pneuma.handle import RemoteHandle
from .utils import uuidv7

logger = logging.getLogger(__name__)

Binding = Callable[[], tuple[MethodRegistry, Optional[RemoteHandle]]]


class Dispatcher:
    """
    Args:
        serialize: Hold a lock for the whole invocation so only one is in
            flight at a time
        confirm_timeout: Seconds to wait for a receipt; None waits until the
            node answers or fails
        poll_interval: Receipt polling interval in seconds
    """

    def __init__(
        self,
        serialize: bool = False,
        confirm_timeout: Optional[float] = None,
        poll_interval: float = 2.0,
    ) -> None:
        self._lock = asyncio.Lock() if serialize else None
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval

    async def invoke(
        self,
        operation: str,
        binding: Binding,
        inputs: InputStore,
        value: int = 0,
    ) -> ExecutionOutcome:
        """
        Invoke ``operation`` with the arguments currently held in ``inputs``.

        Args:
            operation: Operation name or full signature
            binding: Returns the current (registry, handle); the handle is
                None when unbound. Called once the invocation may start.
            inputs: Input State Store to read argument text from
            value: Wei attached to payable operations

        Returns:
            Success or Failure; never raises for invocation errors
        """
        if self._lock is None:
            return await self._invoke(operation, binding, inputs, value)
        async with self._lock:
            return await self._invoke(operation, binding, inputs, value)

    async def _invoke(
        self,
        operation: str,
        binding: Binding,
        inputs: InputStore,
        value: int,
    ) -> ExecutionOutcome:
        invocation_id = str(uuidv7())
        registry, handle = binding()

        if handle is None:
            logger.warning("%s invoked without a bound contract", operation)
            return Failure.from_error(
                NotInitialized("Contract not initialized. Connect a wallet first."),
                operation=operation,
                invocation_id=invocation_id,
            )

        try:
            descriptor = registry.get(operation)
            key = registry.key_for(descriptor)
            args = inputs.get_args(key, len(descriptor.parameters))
            logger.debug("[%s] %s args assembled: %s", invocation_id, key, args)

            if descriptor.is_read:
                logger.debug("[%s] %s read pending", invocation_id, key)
                result = await handle.call(descriptor.signature, args)
            else:
                logger.debug("[%s] %s write pending", invocation_id, key)
                pending = await handle.submit(descriptor.signature, args, value=value)
                logger.debug("[%s] %s confirming %s", invocation_id, key, pending.tx_hash)
                result = await pending.wait(
                    timeout=self.confirm_timeout, poll_interval=self.poll_interval
                )
        except OraculumError as exc:
            logger.warning("%s failed: %s", operation, exc)
            return Failure.from_error(exc, operation=operation, invocation_id=invocation_id)
        except Exception as exc:
            logger.warning("%s failed: %s", operation, exc, exc_info=True)
            return Failure.from_error(exc, operation=operation, invocation_id=invocation_id)

        logger.debug("[%s] %s resolved", invocation_id, key)
        return Success(
            value=normalize_value(result),
            operation=key,
            invocation_id=invocation_id,
            is_write=descriptor.is_write,
        )
