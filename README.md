# nodekit

Small, dependency-light helpers for writing Ethereum node management tools in
Python.

## Modules

- `nodekit.hexutil` – `encode_hex_with_prefix`, `decode_hex`, `add_prefix` and
  `remove_prefix` for `0x`-prefixed hex, plus `encode_uinteger` /
  `decode_uinteger` (a 64-bit unsigned integer as a quoted decimal JSON string)
  and `encode_byte_array` / `decode_byte_array` (bytes as a JSON string of
  `0x`-prefixed hex).
- `nodekit.address` – the 20-byte `Address` type (its `hex()` gives the
  checksummed form), `is_hex_address`, the lenient `hex_to_address`, and
  `bytes_to_hash`, which fits bytes into a 32-byte hash.
- `nodekit.conversion` – `wei_to_eth`, `eth_to_wei`, `wei_to_gwei`,
  `gwei_to_wei`, `eth_to_gwei` and `gwei_to_eth`. Wei amounts are Python
  integers; conversions to wei truncate toward zero.
- `nodekit.mathutil` – `round_down` and `round_up` to a number of decimal places.
- `nodekit.misc` – `generate_random_password` (32 characters: 6 digits,
  6 symbols, 20 letters, none repeated) and `sleep_with_cancel`, which sleeps
  until a duration passes or a `threading.Event` is set.
- `nodekit.ethtypes` – the `SimulationResult`, `TransactionInfo` and
  `TransactionSubmission` dataclasses with their JSON-ready `to_dict` forms,
  `TransactionInfo.from_dict`, `quote_big_int` / `parse_quoted_big_int`,
  `create_tx_submission_from_info`, the `Queryable` protocol with
  `add_queryables_to_multicall` and `query_all_fields`, and
  `normalize_revert_message`, which turns a `Reverted 0x...` error into
  readable text.
- `nodekit.tx_manager` – the `ExecutionClient` protocol, `CallMsg`,
  `TransactOpts` and `TransactionManager`: safe gas limits
  (`ceil(estimate * multiplier) + buffer`, capped at the 30,000,000 block gas
  limit), transaction simulation through the client's `estimate_gas`, and
  waiting for one or several transactions to be mined, by transaction or by
  hash. A receipt with status 0 raises `TransactionError`.
- `nodekit.gas` – `get_etherchain_gas_prices` and `get_etherscan_gas_prices`,
  returning `EtherchainGasFeeSuggestion` and `EtherscanGasFeeSuggestion`.
- `nodekit.validation` – validators for text input that raise
  `ValidationError` (a `ValueError`): `validate_bool`, `validate_uint`,
  `validate_uint32`, `validate_big_int`, `validate_wei_amount`,
  `validate_eth_amount`, `validate_fraction`, `validate_percentage`, their
  positive variants, `validate_address`, `validate_hash`, `validate_pubkey`,
  `validate_byte_array`, `validate_tx_info`, `validate_node_password`,
  `validate_timezone_location`, `validate_duration` (e.g. `1h30m`, `-300ms`),
  `validate_time` (RFC 3339) and `validate_batch` for comma-separated lists.
- `nodekit.node_files` – `AddressManager` and `PasswordManager` for the node's
  address file and password file (the password file is written with mode 0600).

## Installing

```
pip install nodekit
```

For running the tests:

```
pip install "nodekit[test]"
pytest
```

## Examples

Unit conversion:

```python
from nodekit.conversion import eth_to_wei, wei_to_eth

wei = eth_to_wei(1.5)      # 1500000000000000000
eth = wei_to_eth(wei)      # 1.5
```

Validating input:

```python
from nodekit.validation import ValidationError, validate_fraction

try:
    validate_fraction("commission", "1.2")
except ValidationError as exc:
    print(exc)   # Invalid commission '1.2' - must be a number between 0 and 1
```

Safe gas limits and simulation:

```python
from nodekit.tx_manager import TransactionManager, TransactOpts

manager = TransactionManager(client, 0, 1.5)   # client implements ExecutionClient
manager.get_safe_gas_limit(100_000)            # 150000

info = manager.create_transaction_info_raw(to_address, b"", TransactOpts(value=0))
info.simulation_result.safe_gas_limit
```

The node's address file:

```python
from nodekit.address import hex_to_address
from nodekit.node_files import AddressManager

addresses = AddressManager("data/address")
addresses.set_and_save_address(hex_to_address("0x" + "11" * 20))
addresses.load_address()
```

## What it does not do

- It does not talk to a node on its own: `TransactionManager` works through any
  object you supply that implements the `ExecutionClient` protocol.
- It does not sign or send transactions; it simulates them and waits for them
  to be mined.
- It has no logging setup, no wallet or keystore handling, and no
  primary/fallback switching between clients.
- It installs no command-line program.