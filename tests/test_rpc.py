"""
Tests for the raw node JSON-RPC helpers, using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from registry_client.ledger import rpc


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_build_rpc_body_increments_id():
    first = rpc._build_rpc_body("eth_accounts")
    second = rpc._build_rpc_body("eth_chainId", ["x"])
    assert first["jsonrpc"] == "2.0"
    assert first["params"] == []
    assert second["params"] == ["x"]
    assert second["id"] == first["id"] + 1


def test_rpc_call_returns_result():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": ["0xabc"]})

    async def scenario():
        async with _client(handler) as client:
            return await rpc.rpc_call(client, "http://node:8545/", "eth_accounts")

    assert asyncio.run(scenario()) == ["0xabc"]
    assert captured["method"] == "eth_accounts"


def test_rpc_call_raises_on_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "method not found"}})

    async def scenario():
        async with _client(handler) as client:
            await rpc.rpc_call(client, "http://node:8545", "eth_accounts")

    with pytest.raises(RuntimeError, match="method not found"):
        asyncio.run(scenario())


def test_rpc_call_raises_on_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async def scenario():
        async with _client(handler) as client:
            await rpc.rpc_call(client, "http://node:8545", "eth_chainId")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(scenario())


def test_rpc_call_raises_without_result():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

    async def scenario():
        async with _client(handler) as client:
            await rpc.rpc_call(client, "http://node:8545", "eth_chainId")

    with pytest.raises(RuntimeError, match="no result"):
        asyncio.run(scenario())
