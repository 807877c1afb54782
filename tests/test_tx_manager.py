import threading
from types import SimpleNamespace

import pytest

from nodekit.address import Address
from nodekit.ethtypes import SimulationResult
from nodekit.tx_manager import (
    GAS_LIMIT,
    CallMsg,
    TransactionError,
    TransactionManager,
    TransactOpts,
)

TO = Address(b"\x22" * 20)
SENDER = Address(b"\x33" * 20)


class FakeClient:
    def __init__(self, gas=21000, gas_error=None, receipts=None, txs=None):
        self.gas = gas
        self.gas_error = gas_error
        self.calls = []
        self.receipts = receipts or {}
        self.txs = txs or {}
        self.receipt_calls = 0
        self.tx_calls = 0
        self.lock = threading.Lock()

    def estimate_gas(self, call):
        self.calls.append(call)
        if self.gas_error is not None:
            raise self.gas_error
        return self.gas

    def transaction_receipt(self, tx_hash):
        with self.lock:
            self.receipt_calls += 1
            queue = self.receipts[tx_hash]
            item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def transaction_by_hash(self, tx_hash):
        with self.lock:
            self.tx_calls += 1
            queue = self.txs[tx_hash]
            item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item, False


def make_manager(client, buffer=0, multiplier=1.0):
    manager = TransactionManager(client, buffer, multiplier)
    manager.poll_interval = 0
    return manager


def test_multiplier_below_one_rejected():
    with pytest.raises(ValueError, match="multiplier cannot be less than 1"):
        TransactionManager(FakeClient(), 0, 0.5)


def test_zero_multiplier_leaves_only_buffer():
    manager = TransactionManager(FakeClient(), 21, 0)
    assert manager.get_safe_gas_limit(500) == 21


def test_safe_gas_limit_identity_multiplier():
    manager = make_manager(FakeClient())
    assert manager.get_safe_gas_limit(123456) == 123456


def test_safe_gas_limit_with_buffer_and_multiplier():
    manager = make_manager(FakeClient(), buffer=7, multiplier=2)
    assert manager.get_safe_gas_limit(1000) == 2007


def test_safe_gas_limit_may_equal_block_limit():
    manager = make_manager(FakeClient(), multiplier=1.5)
    assert manager.get_safe_gas_limit(20_000_000) == GAS_LIMIT


def test_estimate_above_block_limit_raises():
    manager = make_manager(FakeClient())
    with pytest.raises(ValueError, match="greater than the block gas limit"):
        manager.get_safe_gas_limit(GAS_LIMIT + 1)


def test_safe_limit_above_block_limit_raises():
    manager = make_manager(FakeClient(), multiplier=1.5)
    with pytest.raises(ValueError, match="safe gas limit of"):
        manager.get_safe_gas_limit(20_000_001)


def test_simulate_without_opts():
    client = FakeClient()
    manager = make_manager(client)
    assert manager.simulate_transaction(client, TO, None, b"\x01") == SimulationResult()
    assert client.calls == []


def test_simulate_success_builds_call():
    client = FakeClient(gas=21000)
    manager = make_manager(client)
    opts = TransactOpts(from_address=SENDER, value=5)
    result = manager.simulate_transaction(client, TO, opts, b"\xab\xcd")
    assert result.is_simulated
    assert result.estimated_gas_limit == 21000
    assert result.safe_gas_limit == 21000
    assert result.simulation_error == ""
    assert client.calls == [
        CallMsg(from_address=SENDER, to=TO, gas_fee_cap=0, gas_tip_cap=0, value=5, data=b"\xab\xcd")
    ]


def test_simulate_revert_message_is_decoded():
    client = FakeClient(gas_error=RuntimeError("Reverted 0x" + b"boom".hex()))
    manager = make_manager(client)
    result = manager.simulate_transaction(client, TO, TransactOpts(), b"")
    assert result.is_simulated
    assert result.safe_gas_limit == 0
    assert result.simulation_error == "error estimating gas needed: reverted: boom"


def test_simulate_estimate_over_limit():
    client = FakeClient(gas=GAS_LIMIT + 1)
    manager = make_manager(client)
    result = manager.simulate_transaction(client, TO, TransactOpts(), b"")
    assert result.is_simulated
    assert result.estimated_gas_limit == 0
    assert result.simulation_error.startswith("error estimating gas limit: ")


def test_create_transaction_info_raw():
    client = FakeClient(gas=50000)
    manager = make_manager(client)
    info = manager.create_transaction_info_raw(TO, b"\x01\x02", TransactOpts(value=9))
    assert info.to == TO
    assert info.data == b"\x01\x02"
    assert info.value == 9
    assert info.simulation_result.estimated_gas_limit == 50000


def test_create_transaction_info_raw_without_opts():
    manager = make_manager(FakeClient())
    info = manager.create_transaction_info_raw(TO, b"", None)
    assert info.value is None
    assert info.simulation_result.is_simulated is False


def test_wait_for_transaction_retries_until_mined():
    tx_hash = b"\x11" * 32
    receipt = SimpleNamespace(status=1)
    client = FakeClient(receipts={tx_hash: [RuntimeError("not found"), RuntimeError("not found"), receipt]})
    manager = make_manager(client)
    assert manager.wait_for_transaction(SimpleNamespace(hash=tx_hash)) is receipt
    assert client.receipt_calls == 3


def test_wait_for_transaction_status_zero():
    tx_hash = b"\x11" * 32
    client = FakeClient(receipts={tx_hash: [SimpleNamespace(status=0)]})
    manager = make_manager(client)
    with pytest.raises(TransactionError, match="0x" + tx_hash.hex()):
        manager.wait_for_transaction(SimpleNamespace(hash=tx_hash))


def test_wait_for_transactions_keeps_order():
    first, second = b"\x01" * 32, b"\x02" * 32
    r1, r2 = SimpleNamespace(status=1), SimpleNamespace(status=1)
    client = FakeClient(receipts={first: [r1], second: [r2]})
    manager = make_manager(client)
    txs = [SimpleNamespace(hash=first), SimpleNamespace(hash=second)]
    assert manager.wait_for_transactions(txs) == [r1, r2]


def test_wait_for_transactions_reports_failure():
    good, bad = b"\x01" * 32, b"\x02" * 32
    client = FakeClient(receipts={good: [SimpleNamespace(status=1)], bad: [SimpleNamespace(status=0)]})
    manager = make_manager(client)
    with pytest.raises(TransactionError, match="error waiting for transactions"):
        manager.wait_for_transactions([SimpleNamespace(hash=good), SimpleNamespace(hash=bad)])


def test_wait_by_hash_retries_lookup():
    tx_hash = b"\x05" * 32
    tx = SimpleNamespace(hash=tx_hash)
    receipt = SimpleNamespace(status=1)
    client = FakeClient(
        receipts={tx_hash: [receipt]},
        txs={tx_hash: [RuntimeError("not found"), tx]},
    )
    manager = make_manager(client)
    assert manager.wait_for_transaction_by_hash(tx_hash) is receipt
    assert client.tx_calls == 2


def test_wait_by_hash_gives_up_after_thirty_attempts():
    tx_hash = b"\x06" * 32
    client = FakeClient(txs={tx_hash: [RuntimeError("not found")]})
    manager = make_manager(client)
    with pytest.raises(TransactionError, match="not found after 30 seconds"):
        manager.wait_for_transaction_by_hash(tx_hash)
    assert client.tx_calls == 30


def test_wait_by_hash_other_error_is_immediate():
    tx_hash = b"\x07" * 32
    client = FakeClient(txs={tx_hash: [RuntimeError("connection refused")]})
    manager = make_manager(client)
    with pytest.raises(TransactionError, match="connection refused"):
        manager.wait_for_transaction_by_hash(tx_hash)
    assert client.tx_calls == 1


def test_wait_for_transactions_by_hash():
    first, second = b"\x08" * 32, b"\x09" * 32
    r1, r2 = SimpleNamespace(status=1), SimpleNamespace(status=1)
    client = FakeClient(
        receipts={first: [r1], second: [r2]},
        txs={first: [SimpleNamespace(hash=first)], second: [SimpleNamespace(hash=second)]},
    )
    manager = make_manager(client)
    assert manager.wait_for_transactions_by_hash([first, second]) == [r1, r2]