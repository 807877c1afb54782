import pytest

from nodekit.address import Address, bytes_to_hash, hex_to_address, is_hex_address

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def test_checksum_from_lower_case_input():
    assert hex_to_address(CHECKSUMMED.lower()).hex() == CHECKSUMMED


def test_checksum_round_trip_and_str():
    address = hex_to_address(CHECKSUMMED)
    assert str(address) == address.hex()
    assert hex_to_address(address.hex()) == address


@pytest.mark.parametrize(
    "text, expected",
    [
        (CHECKSUMMED, True),
        (CHECKSUMMED[2:], True),
        ("0X" + CHECKSUMMED[2:], True),
        ("0x123", False),
        ("0x" + "g" * 40, False),
        ("0x" + "a" * 41, False),
        ("", False),
    ],
)
def test_is_hex_address(text, expected):
    assert is_hex_address(text) is expected


def test_hex_to_address_pads_short_input():
    assert hex_to_address("0x01").value == bytes(19) + b"\x01"
    assert hex_to_address("0x1") == hex_to_address("0x01")


def test_hex_to_address_keeps_last_twenty_bytes():
    data = bytes(range(25))
    assert hex_to_address(data.hex()).value == data[5:]


def test_hex_to_address_stops_at_invalid_pair():
    assert hex_to_address("0x0102zz03") == hex_to_address("0x0102")


def test_address_rejects_wrong_length():
    with pytest.raises(ValueError):
        Address(b"\x00" * 3)


def test_default_address_is_zero():
    assert Address().value == bytes(20)
    assert Address() == hex_to_address("0x")


def test_bytes_to_hash_pads_and_truncates():
    padded = bytes_to_hash(b"\x01")
    assert len(padded) == 32
    assert padded[-1:] == b"\x01"
    assert padded[:-1] == bytes(31)
    long_value = bytes(range(40))
    assert bytes_to_hash(long_value) == long_value[8:]