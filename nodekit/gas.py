"""Gas price suggestions from public gas oracles."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import requests

GAS_NOW_URL = "https://beaconcha.in/api/v1/execution/gasnow"
GAS_ORACLE_URL = "https://api.etherscan.io/api?module=gastracker&action=gasoracle"

_TIMEOUT = 30
_MAX_UINT64 = 2**64 - 1
_DECIMAL_DIGITS = re.compile(r"[0-9]+")


@dataclass
class EtherchainGasFeeSuggestion:
    """Gas prices in wei with their expected inclusion times, and the ETH price in USD."""

    rapid_wei: int = 0
    rapid_time: str = ""
    fast_wei: int = 0
    fast_time: str = ""
    standard_wei: int = 0
    standard_time: str = ""
    slow_wei: int = 0
    slow_time: str = ""
    eth_usd: float = 0.0


@dataclass
class EtherscanGasFeeSuggestion:
    """Gas prices in gwei."""

    slow_gwei: float = 0.0
    standard_gwei: float = 0.0
    fast_gwei: float = 0.0


def _fetch(url: str) -> bytes:
    with requests.get(url, timeout=_TIMEOUT) as response:
        if response.status_code != 200:
            raise RuntimeError(f"request failed with code {response.status_code}")
        return response.content


def _object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object for {what}, got {type(value).__name__}")
    return value


def _uint64_number(obj: dict[str, Any], key: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} is not an unsigned integer: {value!r}")
    if not 0 <= value <= _MAX_UINT64:
        raise ValueError(f"field {key!r} is out of range: {value}")
    return value


def _float_number(obj: dict[str, Any], key: str) -> float:
    value = obj.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} is not a number: {value!r}")
    return float(value)


def _quoted_uint64(obj: dict[str, Any], key: str) -> int:
    if key not in obj:
        return 0
    value = obj[key]
    text = value if isinstance(value, str) else None
    if text is None and value is not None:
        raise ValueError(f"field {key!r} is not a string: {value!r}")
    text = text or ""
    if not _DECIMAL_DIGITS.fullmatch(text) or int(text) > _MAX_UINT64:
        raise ValueError(f"field {key!r} is not a valid unsigned integer: {text!r}")
    return int(text)


def get_etherchain_gas_prices() -> EtherchainGasFeeSuggestion:
    """Fetch gas price suggestions from the gas-now service.

    Raises RuntimeError on a non-200 response and ValueError on a malformed body.
    """
    body = _fetch(GAS_NOW_URL)
    try:
        payload = _object(json.loads(body), "response")
        data = _object(payload.get("data"), "data")
        rapid = _uint64_number(data, "rapid")
        fast = _uint64_number(data, "fast")
        standard = _uint64_number(data, "standard")
        slow = _uint64_number(data, "slow")
        price = _float_number(data, "priceUSD")
    except ValueError as exc:
        raise ValueError(f"error getting Etherchain Gas Now response: {exc}") from exc

    return EtherchainGasFeeSuggestion(
        rapid_wei=rapid,
        rapid_time="15 Seconds",
        fast_wei=fast,
        fast_time="1 Minute",
        standard_wei=standard,
        standard_time="3 Minutes",
        slow_wei=slow,
        slow_time=">10 Minutes",
        eth_usd=price,
    )


def get_etherscan_gas_prices() -> EtherscanGasFeeSuggestion:
    """Fetch gas price suggestions from the gas oracle.

    Raises RuntimeError on a non-200 response or a failed oracle status, and
    ValueError on a malformed body.
    """
    body = _fetch(GAS_ORACLE_URL)
    try:
        payload = _object(json.loads(body), "response")
        status = _quoted_uint64(payload, "status")
        message = payload.get("message") or ""
        if not isinstance(message, str):
            raise ValueError(f"field 'message' is not a string: {message!r}")
        result = _object(payload.get("result"), "result")
        safe = _quoted_uint64(result, "SafeGasPrice")
        propose = _quoted_uint64(result, "ProposeGasPrice")
        fast = _quoted_uint64(result, "FastGasPrice")
    except ValueError as exc:
        raise ValueError(f"error deserializing Etherscan gas oracle response: {exc}") from exc

    if status != 1:
        raise RuntimeError(f"error retrieving Etherscan gas oracle response: {message}")

    return EtherscanGasFeeSuggestion(
        slow_gwei=float(safe),
        standard_gwei=float(propose),
        fast_gwei=float(fast),
    )