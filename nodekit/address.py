"""Execution layer addresses and hashes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from Crypto.Hash import keccak

ADDRESS_LENGTH = 20
HASH_LENGTH = 32

_HEX_PAIRS = re.compile(r"(?:[0-9a-fA-F]{2})*")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def _strip_0x(value: str) -> str:
    if len(value) >= 2 and value[0] == "0" and value[1] in "xX":
        return value[2:]
    return value


def _fit_right(data: bytes, length: int) -> bytes:
    """Keep the last ``length`` bytes, left-padding with zeros if shorter."""
    return bytes(data[-length:]).rjust(length, b"\x00")


@dataclass(frozen=True)
class Address:
    """A 20-byte account address."""

    value: bytes = bytes(ADDRESS_LENGTH)

    def __post_init__(self) -> None:
        if len(self.value) != ADDRESS_LENGTH:
            raise ValueError(
                f"an address must be {ADDRESS_LENGTH} bytes long, got {len(self.value)}"
            )
        object.__setattr__(self, "value", bytes(self.value))

    def hex(self) -> str:
        """Return the 0x-prefixed, mixed-case checksummed form of the address."""
        lower = self.value.hex()
        digest = keccak.new(digest_bits=256, data=lower.encode("ascii")).hexdigest()
        checksummed = "".join(
            char.upper() if char.isalpha() and int(nibble, 16) > 7 else char
            for char, nibble in zip(lower, digest)
        )
        return "0x" + checksummed

    def __str__(self) -> str:
        return self.hex()


def is_hex_address(value: str) -> bool:
    """Check whether a string is 40 hex digits, optionally 0x-prefixed."""
    digits = _strip_0x(value)
    return len(digits) == 2 * ADDRESS_LENGTH and bool(_HEX_DIGITS.fullmatch(digits))


def hex_to_address(value: str) -> Address:
    """Convert a hex string to an address, leniently.

    An odd number of digits is left-padded with a zero; decoding stops at the
    first invalid pair; long input keeps its last 20 bytes and short input is
    left-padded.
    """
    digits = _strip_0x(value)
    if len(digits) % 2:
        digits = "0" + digits
    valid = _HEX_PAIRS.match(digits).group()
    return Address(_fit_right(bytes.fromhex(valid), ADDRESS_LENGTH))


def bytes_to_hash(value: bytes) -> bytes:
    """Fit bytes into a 32-byte hash, keeping the last 32 bytes or left-padding."""
    return _fit_right(value, HASH_LENGTH)