"""Narrowing helpers for parsed ``.releng.toml`` tables and ``gh --json`` output.

Both arrive as ``object``; these return a typed value or None, never raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(
        isinstance(key, str) for key in cast(dict[object, object], obj)
    )


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """String value with surrounding whitespace removed; blank counts as missing."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    # bool is an int subclass; an issue number of True is not a number
    value = table.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))
