"""Helpers for Ethereum node tools: hex, addresses, unit conversion, validation, gas prices, transactions and node files."""

__version__ = "0.1.0"