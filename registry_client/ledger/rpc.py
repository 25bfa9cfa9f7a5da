"""
Raw JSON-RPC helpers for node-level queries that sit outside the contract
(unlocked accounts). Contract calls go through web3_ledger.
"""

from __future__ import annotations

from typing import Any

import httpx

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _build_rpc_body(method: str, params: list[Any] | None = None) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": method,
        "params": params or [],
    }


async def rpc_call(
    client: httpx.AsyncClient,
    rpc_url: str,
    method: str,
    params: list[Any] | None = None,
) -> Any:
    """Perform one JSON-RPC call; raise on transport or RPC error."""
    resp = await client.post(rpc_url.rstrip("/"), json=_build_rpc_body(method, params))
    resp.raise_for_status()
    data = resp.json()
    if "error" in data:
        err = data["error"]
        raise RuntimeError(
            f"Node RPC error: {err.get('message', err)} (code={err.get('code')})"
        )
    if "result" not in data:
        raise RuntimeError("Node RPC returned no result")
    return data["result"]


async def fetch_accounts(rpc_url: str, timeout_sec: float = 30.0) -> list[str]:
    """Return the node's unlocked accounts (eth_accounts)."""
    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout_sec)) as client:
        result = await rpc_call(client, rpc_url, "eth_accounts")
    return [str(a) for a in result or []]
