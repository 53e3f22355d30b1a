"""
Remote Handle - One contract address bound to one capability.

Reads go through ``eth_call``. Writes are built, signed with the bound
capability and sent; the returned ``PendingTransaction`` is only done once
its receipt has been observed and reports success.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..codex.registry import MethodRegistry
from ..errors import EncodingFailure, NotInitialized, RemoteFailure
from ..sigil.eth import Capability
from ..utils import hex_to_int, to_checksum_address
from .abi import OperationDescriptor
from .codec import coerce_arguments, decode_result, decode_revert, encode_call
from .rpc import RpcClient, RpcError

logger = logging.getLogger(__name__)


class PendingTransaction:
    """A submitted write operation awaiting confirmation."""

    def __init__(self, handle: "RemoteHandle", descriptor: OperationDescriptor, tx_hash: str) -> None:
        self.handle = handle
        self.descriptor = descriptor
        self.tx_hash = tx_hash

    async def wait(self, timeout: Optional[float] = None, poll_interval: float = 2.0) -> dict[str, Any]:
        """
        Wait for inclusion.

        Returns:
            Receipt summary with transactionHash, blockNumber, gasUsed, status

        Raises:
            RemoteFailure: If the transaction reverted or the node fails
        """
        try:
            receipt = await self.handle.rpc.wait_for_receipt(
                self.tx_hash, timeout=timeout, poll_interval=poll_interval
            )
        except RpcError as exc:
            raise self.handle.translate(exc) from exc

        summary = {
            "transactionHash": receipt.get("transactionHash", self.tx_hash),
            "blockNumber": hex_to_int(receipt.get("blockNumber")),
            "gasUsed": hex_to_int(receipt.get("gasUsed")),
            "status": hex_to_int(receipt.get("status", "0x0")),
        }
        if summary["status"] != 1:
            raise RemoteFailure(
                f"Transaction {self.tx_hash} reverted "
                f"(block {summary['blockNumber']}, {self.descriptor.name})"
            )
        logger.debug("%s confirmed in block %s", self.tx_hash, summary["blockNumber"])
        return summary


class RemoteHandle:
    """
    Capability bound to (contract address, interface description, signer).

    A handle is never re-pointed: when the capability changes the owner
    builds a new one and invalidates this one.

    Args:
        address: 0x-prefixed contract address
        registry: Method registry built from the interface description
        capability: Signing or read-only capability
        rpc: JSON-RPC client
        chain_id: Chain ID for signing (queried when None)
        gas_limit: Fixed gas limit (estimated when None)
        generation: Bind counter of the owning session
    """

    def __init__(
        self,
        address: str,
        registry: MethodRegistry,
        capability: Capability,
        rpc: RpcClient,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
        generation: int = 0,
    ) -> None:
        self.address = to_checksum_address(address)
        self.registry = registry
        self.capability = capability
        self.rpc = rpc
        self.chain_id = chain_id
        self.gas_limit = gas_limit
        self.generation = generation
        self.stale = False

    def invalidate(self) -> None:
        self.stale = True

    def _check_live(self) -> None:
        if self.stale:
            raise NotInitialized(
                f"Remote handle #{self.generation} was replaced by a newer binding."
            )

    def translate(self, exc: RpcError) -> RemoteFailure:
        """Turn a node error into the most specific diagnostic available."""
        data = exc.data
        if isinstance(data, dict):
            data = data.get("data")
        reason = decode_revert(data, self.registry.errors)
        if reason:
            return RemoteFailure(reason)
        return RemoteFailure(str(exc))

    async def call(self, operation: str, args: Sequence[Any]) -> Any:
        """
        Query a read operation.

        Args:
            operation: Operation name or full signature
            args: Raw positional argument values

        Returns:
            Decoded return value
        """
        self._check_live()
        descriptor = self.registry.get(operation)
        calldata = encode_call(descriptor, coerce_arguments(descriptor, args))
        try:
            data = await self.rpc.eth_call(self.address, calldata, sender=self.capability.address)
        except RpcError as exc:
            raise self.translate(exc) from exc
        return decode_result(descriptor, data)

    async def submit(
        self,
        operation: str,
        args: Sequence[Any],
        value: int = 0,
    ) -> PendingTransaction:
        """
        Sign and send a write operation.

        Args:
            operation: Operation name or full signature
            args: Raw positional argument values
            value: Wei attached to the call (payable operations only)

        Returns:
            PendingTransaction for the confirmation step
        """
        self._check_live()
        if not self.capability.can_sign:
            raise NotInitialized("A signing capability is required for write operations.")

        descriptor = self.registry.get(operation)
        if value and not descriptor.is_payable:
            raise EncodingFailure(f"{descriptor.name} is not payable; it cannot receive {value} wei")
        if value < 0:
            raise EncodingFailure("Fee amount cannot be negative")

        calldata = encode_call(descriptor, coerce_arguments(descriptor, args))
        sender = self.capability.address

        try:
            if self.chain_id is None:
                self.chain_id = await self.rpc.get_chain_id()
            tx: dict[str, Any] = {
                "to": self.address,
                "data": calldata,
                "value": value,
                "nonce": await self.rpc.get_nonce(sender),
                "gasPrice": await self.rpc.get_gas_price(),
                "chainId": self.chain_id,
            }
            if self.gas_limit is not None:
                tx["gas"] = self.gas_limit
            else:
                tx["gas"] = await self.rpc.estimate_gas(
                    {"from": sender, "to": self.address, "data": calldata, "value": value}
                )
            raw_tx = self.capability.sign_transaction(tx)
            tx_hash = await self.rpc.send_raw_transaction(raw_tx)
        except RpcError as exc:
            raise self.translate(exc) from exc

        logger.debug("%s submitted as %s (nonce %s)", descriptor.signature, tx_hash, tx["nonce"])
        return PendingTransaction(self, descriptor, tx_hash)
