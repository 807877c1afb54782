"""Conversions between wei, gwei and ETH amounts."""

from __future__ import annotations

import math
from decimal import Decimal

WEI_PER_ETH: float = 1e18
WEI_PER_GWEI: float = 1e9
GWEI_PER_ETH: float = WEI_PER_ETH / WEI_PER_GWEI

_WEI_PER_ETH_INT = 10**18
_WEI_PER_GWEI_INT = 10**9


def _scale_to_wei(amount: float, factor: int) -> int:
    if not math.isfinite(amount):
        raise ValueError(f"cannot convert non-finite amount {amount!r} to wei")
    # The shortest decimal form of the float is what gets scaled, truncated toward zero.
    return int(Decimal(repr(float(amount))) * factor)


def wei_to_eth(wei: int) -> float:
    """Convert an integer wei amount to a floating-point ETH amount."""
    return wei / _WEI_PER_ETH_INT


def eth_to_wei(eth: float) -> int:
    """Convert a floating-point ETH amount to an integer wei amount."""
    return _scale_to_wei(eth, _WEI_PER_ETH_INT)


def wei_to_gwei(wei: int) -> float:
    """Convert an integer wei amount to a floating-point gwei amount."""
    return wei / _WEI_PER_GWEI_INT


def gwei_to_wei(gwei: float) -> int:
    """Convert a floating-point gwei amount to an integer wei amount."""
    return _scale_to_wei(gwei, _WEI_PER_GWEI_INT)


def eth_to_gwei(eth: float) -> float:
    """Convert a floating-point ETH amount to a floating-point gwei amount."""
    return eth * GWEI_PER_ETH


def gwei_to_eth(gwei: float) -> float:
    """Convert a floating-point gwei amount to a floating-point ETH amount."""
    return gwei / GWEI_PER_ETH