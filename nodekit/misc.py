"""Password generation and cancellable sleeping."""

from __future__ import annotations

import secrets
import string
import threading
from datetime import timedelta

PASSWORD_LENGTH = 32
PASSWORD_DIGITS = 6
PASSWORD_SYMBOLS = 6

_SYMBOLS = "~!@#$%^&*()_+`-={}|[]\\:\"<>?,./"
_LETTERS = string.ascii_lowercase + string.ascii_uppercase


def generate_random_password() -> str:
    """Generate a random 32-character password with no repeated characters.

    It holds 6 digits, 6 symbols and 20 letters of mixed case.
    """
    rng = secrets.SystemRandom()
    letters = PASSWORD_LENGTH - PASSWORD_DIGITS - PASSWORD_SYMBOLS
    chars = (
        rng.sample(string.digits, PASSWORD_DIGITS)
        + rng.sample(_SYMBOLS, PASSWORD_SYMBOLS)
        + rng.sample(_LETTERS, letters)
    )
    rng.shuffle(chars)
    return "".join(chars)


def sleep_with_cancel(cancel_event: threading.Event, duration: float | timedelta) -> bool:
    """Sleep for ``duration`` unless ``cancel_event`` is set first.

    Returns True if the event was set, False if the full period elapsed.
    """
    seconds = duration.total_seconds() if isinstance(duration, timedelta) else duration
    return cancel_event.wait(max(seconds, 0))