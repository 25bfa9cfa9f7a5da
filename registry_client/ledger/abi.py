"""
Registry contract ABI (JSON form, as web3 expects).

Functions:
  registerUser(string,string), updateProfile(string,string)
  getUser(address) -> (address,string,string,uint256,bool)
  registerAsset(string,string), transferAsset(uint256,address)
  getAsset(uint256) -> (uint256,string,string,address,uint256)
  getAssetHistory(uint256) -> (uint256,address,address,uint256,string)[]
  getAssetsByOwner(address) -> uint256[]
  getTotalUsers() -> uint256, getTotalAssets() -> uint256
"""

from __future__ import annotations

from typing import Any


def _param(name: str, type_: str, **extra: Any) -> dict[str, Any]:
    return {"name": name, "type": type_, "internalType": type_, **extra}


def _function(
    name: str,
    inputs: list[dict[str, Any]],
    outputs: list[dict[str, Any]],
    *,
    view: bool,
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs,
        "outputs": outputs,
        "stateMutability": "view" if view else "nonpayable",
    }


_HISTORY_RECORD = _param(
    "",
    "tuple[]",
    components=[
        _param("assetId", "uint256"),
        _param("from", "address"),
        _param("to", "address"),
        _param("timestamp", "uint256"),
        _param("transactionType", "string"),
    ],
)

REGISTRY_ABI: list[dict[str, Any]] = [
    _function("registerUser", [_param("_name", "string"), _param("_email", "string")], [], view=False),
    _function("updateProfile", [_param("_name", "string"), _param("_email", "string")], [], view=False),
    _function(
        "getUser",
        [_param("_userAddress", "address")],
        [
            _param("", "address"),
            _param("", "string"),
            _param("", "string"),
            _param("", "uint256"),
            _param("", "bool"),
        ],
        view=True,
    ),
    _function("registerAsset", [_param("_name", "string"), _param("_description", "string")], [], view=False),
    _function("transferAsset", [_param("_assetId", "uint256"), _param("_to", "address")], [], view=False),
    _function(
        "getAsset",
        [_param("_assetId", "uint256")],
        [
            _param("", "uint256"),
            _param("", "string"),
            _param("", "string"),
            _param("", "address"),
            _param("", "uint256"),
        ],
        view=True,
    ),
    _function("getAssetHistory", [_param("_assetId", "uint256")], [_HISTORY_RECORD], view=True),
    _function("getAssetsByOwner", [_param("_owner", "address")], [_param("", "uint256[]")], view=True),
    _function("getTotalUsers", [], [_param("", "uint256")], view=True),
    _function("getTotalAssets", [], [_param("", "uint256")], view=True),
]
