"""Row-coercion helpers shared by the ledger and catalog parsers."""

from __future__ import annotations

from typing import Any, Optional

_TRUE_VALUES = frozenset({"true", "1", "yes", "t", "y"})
_FALSE_VALUES = frozenset({"false", "0", "no", "f", "n"})


def first_present(row: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key in ``keys`` that is present and not None.

    Lets parsers accept both snake_case and the camelCase keys used by the
    dashboard's JSON feeds (``book_id`` / ``bookId``).
    """
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def opt_str(row: dict[str, Any], *keys: str) -> Optional[str]:
    """Return a stripped string value, or ``None`` if missing or blank."""
    value = first_present(row, *keys)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def req_str(row: dict[str, Any], *keys: str) -> str:
    """Return a required string value; raise if missing or blank."""
    text = opt_str(row, *keys)
    if text is None:
        raise ValueError(f"Required field '{keys[0]}' is empty.")
    return text


def parse_bool(row: dict[str, Any], *keys: str, default: bool = False) -> bool:
    """Parse a boolean field.

    Accepts real booleans and ``true/1/yes/t/y`` / ``false/0/no/f/n``
    (case-insensitive). Missing → ``default``.

    Raises:
        ValueError: On an unrecognized value.
    """
    value = first_present(row, *keys)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Field '{keys[0]}' is not a boolean: {value!r}.")


def parse_opt_int(row: dict[str, Any], *keys: str) -> Optional[int]:
    """Parse an optional integer field (blank → ``None``).

    Raises:
        ValueError: If the value is not an integer.
    """
    value = first_present(row, *keys)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Field '{keys[0]}' is not an integer: {value!r}.")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"Field '{keys[0]}' is not an integer: {value!r}.") from None
