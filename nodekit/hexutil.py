"""Hex string helpers and the JSON forms of unsigned integers and byte arrays."""

from __future__ import annotations

import binascii
import json
import re

HEX_PREFIX = "0x"
_MAX_UINT64 = 2**64 - 1
_DECIMAL_DIGITS = re.compile(r"[0-9]+")


def encode_hex_with_prefix(value: bytes) -> str:
    """Encode bytes as a lower-case hex string with a 0x prefix."""
    return HEX_PREFIX + bytes(value).hex()


def decode_hex(value: str) -> bytes:
    """Decode a hex string into bytes, dropping one leading 0x if present.

    Raises ValueError on odd length or on a character that is not hex.
    """
    digits = remove_prefix(value)
    try:
        return binascii.unhexlify(digits)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid hex string {value!r}: {exc}") from exc


def add_prefix(value: str) -> str:
    """Return the string with a 0x prefix, adding one only if it is missing."""
    return value if value.startswith(HEX_PREFIX) else HEX_PREFIX + value


def remove_prefix(value: str) -> str:
    """Return the string with one leading 0x removed, if there is one."""
    return value.removeprefix(HEX_PREFIX)


def _parse_uint64(text: str) -> int:
    if not _DECIMAL_DIGITS.fullmatch(text):
        raise ValueError(f"invalid unsigned integer {text!r}")
    number = int(text)
    if number > _MAX_UINT64:
        raise ValueError(f"value {text!r} is out of range for a 64-bit unsigned integer")
    return number


def _load_json_string(text: str | bytes) -> str:
    decoded = json.loads(text)
    if not isinstance(decoded, str):
        raise ValueError(f"expected a JSON string, got {type(decoded).__name__}")
    return decoded


def encode_uinteger(value: int) -> str:
    """Serialize a 64-bit unsigned integer as a quoted decimal JSON string."""
    if not 0 <= value <= _MAX_UINT64:
        raise ValueError(f"value {value} is out of range for a 64-bit unsigned integer")
    return json.dumps(str(value))


def decode_uinteger(text: str | bytes) -> int:
    """Parse a quoted decimal JSON string into a 64-bit unsigned integer."""
    return _parse_uint64(_load_json_string(text))


def encode_byte_array(value: bytes) -> str:
    """Serialize bytes as a JSON string holding 0x-prefixed hex."""
    return json.dumps(encode_hex_with_prefix(value))


def decode_byte_array(text: str | bytes) -> bytes:
    """Parse a JSON string holding (optionally 0x-prefixed) hex into bytes."""
    return decode_hex(_load_json_string(text))