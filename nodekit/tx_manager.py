"""Transaction simulation, safe gas limits and waiting for inclusion."""

from __future__ import annotations

import math
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Protocol, Sequence

from nodekit.address import Address
from nodekit.ethtypes import SimulationResult, TransactionInfo, normalize_revert_message

GAS_LIMIT = 30_000_000
DEFAULT_SAFE_GAS_BUFFER = 0
DEFAULT_SAFE_GAS_MULTIPLIER = 1.5

_GAS_SIM_ERROR_PREFIX = "error estimating gas needed"
_TX_LOOKUP_ATTEMPTS = 30
_NOT_FOUND = "not found"


class TransactionError(RuntimeError):
    """Raised when a transaction fails or cannot be found."""


@dataclass
class CallMsg:
    """Parameters of a contract call or gas estimate."""

    from_address: Address = field(default_factory=Address)
    to: Address | None = None
    gas: int = 0
    gas_price: int | None = None
    gas_fee_cap: int | None = None
    gas_tip_cap: int | None = None
    value: int | None = None
    data: bytes = b""


@dataclass
class TransactOpts:
    """Options for signing and sending a transaction."""

    from_address: Address = field(default_factory=Address)
    nonce: int | None = None
    signer: Callable[[Address, Any], Any] | None = None
    value: int | None = None
    gas_price: int | None = None
    gas_fee_cap: int | None = None
    gas_tip_cap: int | None = None
    gas_limit: int = 0
    no_send: bool = False


class ExecutionClient(Protocol):
    """Operations an execution client offers.

    Methods raise on failure. Lookups of unknown items raise an exception
    whose text is exactly "not found".
    """

    def code_at(self, contract: Address, block_number: int | None) -> bytes: ...

    def call_contract(self, call: CallMsg, block_number: int | None) -> bytes: ...

    def header_by_hash(self, block_hash: bytes) -> Any: ...

    def header_by_number(self, number: int | None) -> Any: ...

    def pending_code_at(self, account: Address) -> bytes: ...

    def pending_nonce_at(self, account: Address) -> int: ...

    def suggest_gas_price(self) -> int: ...

    def suggest_gas_tip_cap(self) -> int: ...

    def estimate_gas(self, call: CallMsg) -> int: ...

    def send_transaction(self, tx: Any) -> None: ...

    def filter_logs(self, query: Any) -> list[Any]: ...

    def subscribe_filter_logs(self, query: Any, sink: Any) -> Any: ...

    def transaction_receipt(self, tx_hash: bytes) -> Any: ...

    def block_number(self) -> int: ...

    def balance_at(self, account: Address, block_number: int | None) -> int: ...

    def transaction_by_hash(self, tx_hash: bytes) -> tuple[Any, bool]: ...

    def nonce_at(self, account: Address, block_number: int | None) -> int: ...

    def sync_progress(self) -> Any: ...

    def chain_id(self) -> int: ...


def _hash_hex(tx_hash: bytes) -> str:
    return "0x" + bytes(tx_hash).hex()


def _is_not_found(error: BaseException) -> bool:
    return str(error) == _NOT_FOUND


class TransactionManager:
    """Simulates transactions, suggests safe gas limits and waits for inclusion.

    The safe gas limit is ``ceil(estimate * multiplier) + buffer``.
    """

    def __init__(
        self,
        client: ExecutionClient,
        safe_gas_buffer: int = DEFAULT_SAFE_GAS_BUFFER,
        safe_gas_multiplier: float = DEFAULT_SAFE_GAS_MULTIPLIER,
    ) -> None:
        if safe_gas_multiplier != 0 and safe_gas_multiplier < 1:
            raise ValueError("multiplier cannot be less than 1")
        self.client = client
        self.buffer = safe_gas_buffer
        self.multiplier = safe_gas_multiplier
        self.poll_interval = 1.0

    def get_safe_gas_limit(self, estimate: int) -> int:
        """Return the safe gas limit for an estimate; raise ValueError above the block limit."""
        if estimate > GAS_LIMIT:
            raise ValueError(
                f"estimated gas usage of {estimate} is greater than the block gas limit of {GAS_LIMIT}"
            )
        safe_limit = math.ceil(estimate * self.multiplier) + self.buffer
        if safe_limit > GAS_LIMIT:
            raise ValueError(
                f"safe gas limit of {safe_limit} is greater than the block gas limit of {GAS_LIMIT}"
            )
        return safe_limit

    def simulate_transaction(
        self,
        client: ExecutionClient,
        to: Address,
        opts: TransactOpts | None,
        data: bytes,
    ) -> SimulationResult:
        """Estimate the gas a transaction needs and a safe limit for it."""
        if opts is None:
            return SimulationResult()

        call = CallMsg(
            from_address=opts.from_address,
            to=to,
            gas_fee_cap=0,
            gas_tip_cap=0,
            value=opts.value,
            data=data,
        )
        try:
            gas_limit = client.estimate_gas(call)
        except Exception as exc:  # any estimation failure is reported, not raised
            return SimulationResult(
                is_simulated=True,
                simulation_error=f"{_GAS_SIM_ERROR_PREFIX}: {normalize_revert_message(exc)}",
            )

        try:
            safe_limit = self.get_safe_gas_limit(gas_limit)
        except ValueError as exc:
            return SimulationResult(
                is_simulated=True,
                simulation_error=f"error estimating gas limit: {exc}",
            )
        return SimulationResult(
            is_simulated=True,
            estimated_gas_limit=gas_limit,
            safe_gas_limit=safe_limit,
        )

    def create_transaction_info_raw(
        self, to: Address, data: bytes, opts: TransactOpts | None
    ) -> TransactionInfo:
        """Build a transaction description from raw data and simulate it."""
        result = self.simulate_transaction(self.client, to, opts, data)
        return TransactionInfo(
            data=data,
            to=to,
            value=opts.value if opts is not None else None,
            simulation_result=result,
        )

    def _wait_mined(self, tx_hash: bytes) -> Any:
        while True:
            try:
                return self.client.transaction_receipt(tx_hash)
            except Exception:
                time.sleep(self.poll_interval)

    def wait_for_transaction(self, tx: Any) -> Any:
        """Wait until a transaction is mined and return its receipt.

        Raises TransactionError if the receipt has status 0.
        """
        receipt = self._wait_mined(tx.hash)
        if receipt.status == 0:
            raise TransactionError(f"transaction {_hash_hex(tx.hash)} failed with status 0")
        return receipt

    def _wait_all(self, items: Sequence[Any], waiter: Callable[[Any], Any]) -> list[Any]:
        if not items:
            return []
        with ThreadPoolExecutor(max_workers=len(items)) as pool:
            futures = {pool.submit(waiter, item): index for index, item in enumerate(items)}
            receipts: list[Any] = [None] * len(items)
            for future in as_completed(futures):
                exc = future.exception()
                if exc is not None:
                    raise TransactionError(f"error waiting for transactions: {exc}") from exc
                receipts[futures[future]] = future.result()
        return receipts

    def wait_for_transactions(self, txs: Iterable[Any]) -> list[Any]:
        """Wait for several transactions in parallel; return receipts in order."""
        return self._wait_all(list(txs), self.wait_for_transaction)

    def _get_transaction_from_hash(self, tx_hash: bytes) -> Any:
        for _ in range(_TX_LOOKUP_ATTEMPTS):
            try:
                tx, _is_pending = self.client.transaction_by_hash(tx_hash)
            except Exception as exc:
                if _is_not_found(exc):
                    time.sleep(self.poll_interval)
                    continue
                raise
            return tx
        raise TransactionError("transaction not found after 30 seconds")

    def wait_for_transaction_by_hash(self, tx_hash: bytes) -> Any:
        """Look up a transaction by hash, then wait for it to be mined."""
        try:
            tx = self._get_transaction_from_hash(tx_hash)
        except Exception as exc:
            raise TransactionError(
                f"error getting transaction {_hash_hex(tx_hash)}: {exc}"
            ) from exc
        return self.wait_for_transaction(tx)

    def wait_for_transactions_by_hash(self, hashes: Iterable[bytes]) -> list[Any]:
        """Wait for several transactions, given by hash, in parallel."""
        return self._wait_all(list(hashes), self.wait_for_transaction_by_hash)