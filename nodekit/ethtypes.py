"""Transaction descriptions, quoted big integers and multicall helpers."""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Protocol, runtime_checkable

from nodekit.address import ADDRESS_LENGTH, Address
from nodekit.hexutil import decode_hex

_REVERT_PATTERN = re.compile(r"Reverted 0x(?P<message>[0-9a-fA-F]+).*")
_LEGACY_OCTAL = re.compile(r"[+-]?0[0-7_]+")


@dataclass
class SimulationResult:
    """Outcome of simulating a transaction."""

    is_simulated: bool = False
    estimated_gas_limit: int = 0
    safe_gas_limit: int = 0
    simulation_error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form."""
        return {
            "isSimulated": self.is_simulated,
            "estimatedGasLimit": self.estimated_gas_limit,
            "safeGasLimit": self.safe_gas_limit,
            "simulationError": self.simulation_error,
        }


def _parse_address(text: str) -> Address:
    raw = decode_hex(text)
    if len(raw) != ADDRESS_LENGTH:
        raise ValueError(f"invalid address {text!r}")
    return Address(raw)


@dataclass
class TransactionInfo:
    """A candidate transaction."""

    data: bytes = b""
    to: Address = field(default_factory=Address)
    value: int | None = None
    simulation_result: SimulationResult = field(default_factory=SimulationResult)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form; data is base64."""
        return {
            "data": base64.b64encode(self.data).decode("ascii"),
            "to": "0x" + self.to.value.hex(),
            "value": self.value,
            "simulationResult": self.simulation_result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransactionInfo:
        """Build from the JSON form; raises ValueError on malformed fields."""
        sim = data.get("simulationResult") or {}
        raw = data.get("data")
        value = data.get("value")
        if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
            raise ValueError(f"invalid value {value!r}")
        try:
            payload = base64.b64decode(raw, validate=True) if raw else b""
        except (ValueError, TypeError) as exc:
            raise ValueError(f"invalid data {raw!r}") from exc
        to = data.get("to")
        return cls(
            data=payload,
            to=_parse_address(to) if to else Address(),
            value=value,
            simulation_result=SimulationResult(
                is_simulated=bool(sim.get("isSimulated", False)),
                estimated_gas_limit=int(sim.get("estimatedGasLimit", 0)),
                safe_gas_limit=int(sim.get("safeGasLimit", 0)),
                simulation_error=str(sim.get("simulationError", "")),
            ),
        )


@dataclass
class TransactionSubmission:
    """A transaction ready for submission with its gas limit."""

    tx_info: TransactionInfo
    gas_limit: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form."""
        return {"txInfo": self.tx_info.to_dict(), "gasLimit": self.gas_limit}


@runtime_checkable
class Queryable(Protocol):
    """Something that adds its calls to a multicall before it runs."""

    def add_to_query(self, multicaller: Any) -> None: ...


def quote_big_int(value: int) -> str:
    """Serialize an integer as a quoted decimal JSON string."""
    return f'"{value}"'


def parse_quoted_big_int(text: str | bytes) -> int:
    """Parse an optionally quoted integer with an optional base prefix."""
    if isinstance(text, bytes):
        text = text.decode()
    stripped = text.strip('"')
    try:
        if _LEGACY_OCTAL.fullmatch(stripped):
            return int(stripped.replace("0", "0o", 1) if stripped[0] == "0" else stripped[0] + "0o" + stripped[2:], 0)
        return int(stripped, 0)
    except ValueError:
        raise ValueError(f"{stripped} is not a valid big integer") from None


def create_tx_submission_from_info(tx_info: TransactionInfo) -> TransactionSubmission:
    """Create a submission using the simulation's safe gas limit."""
    return TransactionSubmission(tx_info=tx_info, gas_limit=tx_info.simulation_result.safe_gas_limit)


def add_queryables_to_multicall(multicaller: Any, *args: Queryable) -> None:
    """Add each queryable's calls to the multicall."""
    for queryable in args:
        queryable.add_to_query(multicaller)


def _public_values(obj: Any) -> list[Any]:
    if is_dataclass(obj):
        return [getattr(obj, f.name) for f in fields(obj) if not f.name.startswith("_")]
    return [v for k, v in vars(obj).items() if not k.startswith("_")]


def query_all_fields(obj: Any, multicaller: Any) -> None:
    """Add every public queryable field, recursing into nested dataclasses."""
    for value in _public_values(obj):
        if isinstance(value, Queryable):
            value.add_to_query(multicaller)
        elif is_dataclass(value) and not isinstance(value, type):
            query_all_fields(value, multicaller)


def normalize_revert_message(error: BaseException | None) -> BaseException | None:
    """Turn a hex-encoded revert message into readable text, if present."""
    if error is None:
        return None
    match = _REVERT_PATTERN.search(str(error))
    if match is None:
        return error
    try:
        raw = bytes.fromhex(match.group("message"))
    except ValueError:
        return error
    return RuntimeError(f"reverted: {raw.decode('utf-8', errors='replace')}")