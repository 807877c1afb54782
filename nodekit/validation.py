"""Validation of text inputs into typed values."""

from __future__ import annotations

import binascii
import json
import math
import re
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from typing import Callable, TypeVar

from nodekit.address import Address, bytes_to_hash, hex_to_address, is_hex_address
from nodekit.ethtypes import TransactionInfo

MIN_PASSWORD_LENGTH = 12
PUBKEY_LENGTH = 48
HASH_HEX_LENGTH = 64

_MAX_UINT64 = 2**64 - 1
_MAX_UINT32 = 2**32 - 1

_UNSIGNED_DECIMAL = re.compile(r"[0-9]+")
_SIGNED_DECIMAL = re.compile(r"[+-]?[0-9]+")
_LEGACY_OCTAL = re.compile(r"0[0-7_]+")
_DECIMAL_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_FLOAT = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)
_TIMEZONE = re.compile(r"([a-zA-Z_]{2,}/)+[a-zA-Z_]{2,}")
_DURATION_PART = re.compile(r"([0-9]*)(\.([0-9]*))?([^0-9.]*)")
_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})"
)

_NANOSECOND = 1
_DURATION_UNITS = {
    "ns": _NANOSECOND,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

T = TypeVar("T")


class ValidationError(ValueError):
    """Raised when an input value is not valid."""


def _invalid(name: str, value: str, detail: str = "") -> ValidationError:
    return ValidationError(f"Invalid {name} '{value}'{detail}")


def _decode_hex(digits: str) -> bytes:
    try:
        return binascii.unhexlify(digits)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid hex string: {exc}") from exc


def _parse_float(value: str) -> float:
    if _SPECIAL_FLOAT.fullmatch(value):
        return float(value)
    if _HEX_FLOAT.fullmatch(value):
        try:
            result = float.fromhex(value)
        except OverflowError as exc:
            raise ValueError("value out of range") from exc
        return result
    if _DECIMAL_FLOAT.fullmatch(value):
        result = float(value)
        if math.isinf(result):
            raise ValueError("value out of range")
        return result
    raise ValueError("invalid syntax")


def _parse_int_base0(value: str) -> int:
    if not value or value != value.strip():
        raise ValueError("invalid syntax")
    sign = ""
    body = value
    if body[0] in "+-":
        sign, body = body[0], body[1:]
    if _LEGACY_OCTAL.fullmatch(body):
        return int(sign + "0o" + body[1:], 0)
    return int(sign + body, 0)


def validate_batch(name: str, value: str, validate: Callable[[str, str], T]) -> list[T]:
    """Validate each comma-separated element of ``value``."""
    results: list[T] = []
    for index, element in enumerate(value.split(",")):
        try:
            results.append(validate(name, element.strip()))
        except ValueError as exc:
            raise ValidationError(f"invalid element at index {index} in {name}: {exc}") from exc
    return results


def validate_big_int(name: str, value: str) -> int:
    """Parse an integer with an optional sign and base prefix (0x, 0o, 0b or a leading 0)."""
    try:
        return _parse_int_base0(value)
    except ValueError:
        raise _invalid(name, value) from None


def validate_bool(name: str, value: str) -> bool:
    """Parse 'true', 'yes', 'false' or 'no', ignoring case."""
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    raise _invalid(name, value, " - valid values are 'true', 'yes', 'false' and 'no'")


def _parse_unsigned(name: str, value: str, maximum: int) -> int:
    if not _UNSIGNED_DECIMAL.fullmatch(value) or int(value) > maximum:
        raise _invalid(name, value)
    return int(value)


def validate_uint(name: str, value: str) -> int:
    """Parse a decimal 64-bit unsigned integer."""
    return _parse_unsigned(name, value, _MAX_UINT64)


def validate_uint32(name: str, value: str) -> int:
    """Parse a decimal 32-bit unsigned integer."""
    return _parse_unsigned(name, value, _MAX_UINT32)


def validate_address(name: str, value: str) -> Address:
    """Parse a 40-digit hex address, optionally 0x-prefixed."""
    if not is_hex_address(value):
        raise _invalid(name, value)
    return hex_to_address(value)


def validate_wei_amount(name: str, value: str) -> int:
    """Parse a signed decimal wei amount."""
    if not _SIGNED_DECIMAL.fullmatch(value):
        raise _invalid(name, value)
    return int(value)


def validate_eth_amount(name: str, value: str) -> float:
    """Parse a floating-point ETH amount."""
    try:
        return _parse_float(value)
    except ValueError:
        raise _invalid(name, value) from None


def _bounded_float(name: str, value: str, upper: int) -> float:
    try:
        result = _parse_float(value)
    except ValueError:
        result = None
    if result is None or result < 0 or result > upper:
        raise _invalid(name, value, f" - must be a number between 0 and {upper}")
    return result


def validate_fraction(name: str, value: str) -> float:
    """Parse a number between 0 and 1."""
    return _bounded_float(name, value, 1)


def validate_percentage(name: str, value: str) -> float:
    """Parse a number between 0 and 100."""
    return _bounded_float(name, value, 100)


def validate_positive_uint(name: str, value: str) -> int:
    """Parse a 64-bit unsigned integer greater than zero."""
    result = validate_uint(name, value)
    if result == 0:
        raise _invalid(name, value, " - must be greater than 0")
    return result


def validate_positive_uint32(name: str, value: str) -> int:
    """Parse a 32-bit unsigned integer greater than zero."""
    result = validate_uint32(name, value)
    if result == 0:
        raise _invalid(name, value, " - must be greater than 0")
    return result


def validate_positive_wei_amount(name: str, value: str) -> int:
    """Parse a wei amount greater than zero."""
    result = validate_wei_amount(name, value)
    if result <= 0:
        raise _invalid(name, value, " - must be greater than 0")
    return result


def validate_positive_or_zero_wei_amount(name: str, value: str) -> int:
    """Parse a wei amount that is zero or more."""
    result = validate_wei_amount(name, value)
    if result < 0:
        raise _invalid(name, value, " - must be greater or equal to 0")
    return result


def validate_positive_eth_amount(name: str, value: str) -> float:
    """Parse an ETH amount greater than zero."""
    result = validate_eth_amount(name, value)
    if result <= 0:
        raise _invalid(name, value, " - must be greater than 0")
    return result


def validate_node_password(name: str, value: str) -> str:
    """Check that a node password is long enough."""
    if len(value.encode("utf-8")) < MIN_PASSWORD_LENGTH:
        raise _invalid(name, value, f" - must be at least {MIN_PASSWORD_LENGTH} characters long")
    return value


def validate_timezone_location(name: str, value: str) -> str:
    """Check that a timezone is in 'Region/City' form."""
    if not _TIMEZONE.fullmatch(value):
        raise _invalid(name, value, " - must be in the format 'Country/City'")
    return value


def validate_hash(name: str, value: str) -> bytes:
    """Parse a 32-byte hash given as 64 hex digits, optionally 0x-prefixed."""
    digits = value.removeprefix("0x")
    if len(digits) != HASH_HEX_LENGTH:
        raise ValidationError(f"Invalid {name} '{digits}': it must have 64 characters.")
    try:
        raw = _decode_hex(digits)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{digits}': {exc}") from exc
    return bytes_to_hash(raw)


def validate_tx_info(name: str, value: str) -> TransactionInfo:
    """Parse hex-encoded JSON describing a transaction."""
    digits = value.removeprefix("0x")
    try:
        raw = _decode_hex(digits)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{digits}': {exc}") from exc
    try:
        decoded = json.loads(raw)
        if decoded is None:
            return TransactionInfo()
        if not isinstance(decoded, dict):
            raise ValueError(f"expected a JSON object, got {type(decoded).__name__}")
        return TransactionInfo.from_dict(decoded)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValidationError(f"Deserializing {name} failed: {exc}") from exc


def validate_pubkey(name: str, value: str) -> bytes:
    """Parse a 48-byte validator public key given in hex, optionally 0x-prefixed."""
    try:
        raw = _decode_hex(value.removeprefix("0x"))
        if len(raw) != PUBKEY_LENGTH:
            raise ValueError(f"pubkey must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{value}': {exc}") from exc
    return raw


def validate_byte_array(name: str, value: str) -> bytes:
    """Parse a hex string, optionally 0x-prefixed, into bytes."""
    digits = value.removeprefix("0x")
    try:
        return _decode_hex(digits)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{digits}': {exc}") from exc


def _parse_duration_ns(text: str) -> int:
    rest = text
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return 0
    if not rest:
        raise ValueError(f'time: invalid duration "{text}"')

    total = Fraction(0)
    position = 0
    while position < len(rest):
        match = _DURATION_PART.match(rest, position)
        whole, has_dot, fraction, unit = match.group(1), match.group(2), match.group(3), match.group(4)
        if not whole and not fraction:
            raise ValueError(f'time: invalid duration "{text}"')
        if not unit:
            raise ValueError(f'time: missing unit in duration "{text}"')
        if unit not in _DURATION_UNITS:
            raise ValueError(f'time: unknown unit "{unit}" in duration "{text}"')
        scale = _DURATION_UNITS[unit]
        amount = Fraction(int(whole or "0"))
        if has_dot and fraction:
            amount += Fraction(int(fraction), 10 ** len(fraction))
        total += math.floor(amount * scale)
        if total > 2**63:
            raise ValueError(f'time: invalid duration "{text}"')
        position = match.end()

    nanoseconds = int(total)
    if not negative and nanoseconds > 2**63 - 1:
        raise ValueError(f'time: invalid duration "{text}"')
    return -nanoseconds if negative else nanoseconds


def validate_duration(name: str, value: str) -> timedelta:
    """Parse a duration such as '1h30m', '1.5s' or '-300ms'."""
    try:
        nanoseconds = _parse_duration_ns(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{value}': {exc}") from exc
    magnitude = timedelta(microseconds=abs(nanoseconds) // 1000)
    return -magnitude if nanoseconds < 0 else magnitude


def validate_time(name: str, value: str) -> datetime:
    """Parse an RFC 3339 timestamp into a timezone-aware datetime."""
    match = _RFC3339.fullmatch(value)
    try:
        if match is None:
            raise ValueError("timestamp is not in RFC 3339 format")
        year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
        fraction = match.group(7) or ""
        microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
        zone = match.group(8)
        if zone == "Z":
            tz = timezone.utc
        else:
            offset_hours, offset_minutes = int(zone[1:3]), int(zone[4:6])
            if offset_hours >= 24 or offset_minutes >= 60:
                raise ValueError("time zone offset out of range")
            offset = timedelta(hours=offset_hours, minutes=offset_minutes)
            tz = timezone(-offset if zone[0] == "-" else offset)
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} '{value}': {exc}") from exc