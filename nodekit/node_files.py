"""The node's address file and password file."""

from __future__ import annotations

import os
from pathlib import Path

from nodekit.address import Address, hex_to_address

ADDRESS_FILE_MODE = 0o664
PASSWORD_FILE_MODE = 0o600


def _write_file(path: Path, data: bytes, mode: int) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


class AddressManager:
    """Keeps the node address, cached in memory and saved in a file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._address: Address | None = None

    def load_address(self) -> Address | None:
        """Read the address from disk; return None if the file does not exist."""
        self._address = None
        try:
            os.stat(self.path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise OSError(f"error checking if address file exists: {exc}") from exc
        try:
            text = self.path.read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            raise OSError(f"error loading address file [{self.path}]: {exc}") from exc
        self._address = hex_to_address(text)
        return self._address

    def get_address(self) -> Address | None:
        """Return the cached address, or None if none is loaded."""
        return self._address

    def set_address(self, new_address: Address) -> None:
        """Set the address without saving it to disk."""
        self._address = new_address

    def set_and_save_address(self, new_address: Address) -> None:
        """Set the address and write it to disk in checksummed hex."""
        self._address = new_address
        try:
            _write_file(self.path, new_address.hex().encode("ascii"), ADDRESS_FILE_MODE)
        except OSError as exc:
            raise OSError(f"error writing address file [{self.path}] to disk: {exc}") from exc


class PasswordManager:
    """Reads, writes and deletes the node's password file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def get_password_from_disk(self) -> str | None:
        """Return the saved password, or None if the file does not exist."""
        try:
            os.stat(self.path)
        except FileNotFoundError:
            return None
        except OSError:
            pass
        try:
            return self.path.read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            raise OSError(f"error reading password file [{self.path}]: {exc}") from exc

    def save_password(self, password: str) -> None:
        """Write the password to disk, readable only by its owner."""
        try:
            _write_file(self.path, password.encode("utf-8"), PASSWORD_FILE_MODE)
        except OSError as exc:
            raise OSError(f"error saving password to [{self.path}]: {exc}") from exc

    def delete_password(self) -> None:
        """Remove the password file."""
        try:
            os.remove(self.path)
        except OSError as exc:
            raise OSError(f"error deleting password [{self.path}]: {exc}") from exc