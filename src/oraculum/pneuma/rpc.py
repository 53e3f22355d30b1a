"""
JSON-RPC Client for Ethereum-compatible nodes.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Every request is an ``await`` point; nothing here blocks the event loop.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import os
import time
from typing import Any, Optional

import httpx

from ..errors import RemoteFailure
from ..utils import hex_to_int

logger = logging.getLogger(__name__)

# Default RPC endpoint (local development node)
DEFAULT_RPC_URL = "http://127.0.0.1:8545"


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("ORACULUM_RPC_URL", DEFAULT_RPC_URL)


def get_chain_id() -> Optional[int]:
    """Get the chain ID from environment, if pinned."""
    value = os.environ.get("CHAIN_ID")
    return int(value) if value else None


class RpcError(RemoteFailure):
    """Error object returned by the node."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


class RpcClient:
    """
    Async JSON-RPC client.

    Args:
        rpc_url: RPC endpoint URL
        timeout: Per-request HTTP timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url or get_rpc_url()
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            RemoteFailure: If the node cannot be reached
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc -> %s %s", method, params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RemoteFailure(f"RPC transport error ({method}): {exc}") from exc
        except ValueError as exc:
            raise RemoteFailure(f"RPC returned invalid JSON ({method})") from exc

        if "error" in data:
            error = data["error"] or {}
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message") or f"RPC error: {error}",
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(f"RPC error: {error}")

        logger.debug("rpc <- %s %r", method, data.get("result"))
        return data.get("result")

    async def eth_call(self, to: str, data: str, sender: Optional[str] = None) -> str:
        call: dict[str, Any] = {"to": to, "data": data}
        if sender:
            call["from"] = sender
        return await self.request("eth_call", [call, "latest"])

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        call = {k: (hex(v) if isinstance(v, int) else v) for k, v in tx.items()}
        return hex_to_int(await self.request("eth_estimateGas", [call]))

    async def get_nonce(self, address: str) -> int:
        return hex_to_int(await self.request("eth_getTransactionCount", [address, "pending"]))

    async def get_gas_price(self) -> int:
        return hex_to_int(await self.request("eth_gasPrice", []))

    async def get_chain_id(self) -> int:
        return hex_to_int(await self.request("eth_chainId", []))

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        return await self.request("eth_sendRawTransaction", [raw_tx])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait time in seconds; None waits until the
                node answers or fails
            poll_interval: Polling interval in seconds

        Raises:
            TimeoutError: If a timeout was given and expired
        """
        start = time.monotonic()
        while True:
            receipt = await self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if timeout is not None and time.monotonic() - start >= timeout:
                raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
            await asyncio.sleep(poll_interval)
