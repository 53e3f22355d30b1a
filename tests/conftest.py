"""
Shared fixtures: the engine ABI, a fake JSON-RPC node, and a funded dev key.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"
ENGINE_ABI_PATH = FIXTURES / "keccak_engine.abi.json"

CONTRACT = "0x5E554947137A0dC0c153D3BA6542e2d34E68CF06"

# Well-known development key (Hardhat / Anvil account #0)
DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

TX_HASH = "0x" + "ab" * 32


class FakeNode:
    """
    Minimal Ethereum JSON-RPC node for httpx.MockTransport.

    ``call_results`` maps a 4-byte selector (0x-prefixed hex) to either the
    hex return data or an error object; ``errors`` maps an RPC method to an
    error object returned for every request of that method.
    """

    def __init__(self) -> None:
        self.requests: list[tuple[str, list]] = []
        self.call_results: dict[str, Any] = {}
        self.errors: dict[str, dict[str, Any]] = {}
        self.receipt: Optional[dict[str, Any]] = {
            "transactionHash": TX_HASH,
            "blockNumber": "0x10",
            "gasUsed": "0x5208",
            "status": "0x1",
        }
        self.chain_id = 31337
        self.sent: list[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.entered: Optional[asyncio.Event] = None

    def methods(self) -> list[str]:
        return [method for method, _ in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.requests.append((method, params))

        def reply(**payload: Any) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], **payload})

        if method in self.errors:
            return reply(error=self.errors[method])

        if method == "eth_call":
            if self.gate is not None:
                self.entered.set()
                await self.gate.wait()
            result = self.call_results[params[0]["data"][:10]]
            if isinstance(result, dict):
                return reply(error=result)
            return reply(result=result)
        if method == "eth_chainId":
            return reply(result=hex(self.chain_id))
        if method == "eth_getTransactionCount":
            return reply(result="0x7")
        if method == "eth_gasPrice":
            return reply(result="0x3b9aca00")
        if method == "eth_estimateGas":
            return reply(result="0x7a120")
        if method == "eth_sendRawTransaction":
            self.sent.append(params[0])
            return reply(result=TX_HASH)
        if method == "eth_getTransactionReceipt":
            return reply(result=self.receipt)
        return reply(error={"code": -32601, "message": f"method {method} not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def engine_abi() -> list[dict[str, Any]]:
    return json.loads(ENGINE_ABI_PATH.read_text(encoding="utf-8"))


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()
