"""Input gate for numeric text fields."""

import re

_WHOLE_NUMBER = re.compile(r"[0-9]+")


def accept_input(raw: str) -> bool:
    """Return True for an empty string or a plain non-negative integer literal."""
    return raw == "" or _WHOLE_NUMBER.fullmatch(raw) is not None
