"""Canonical text forms used for field-level comparison."""

from __future__ import annotations

import json
from typing import Any


class _Missing:
    """Marker for a value that is absent, as opposed to a present ``None``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def to_jsonable(value: Any) -> Any:
    """Convert models and containers to plain JSON-compatible values."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_jsonable(to_dict())
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def canonical_text(value: Any) -> str | None:
    """Return the canonical string form of a field value.

    Strings are used verbatim and absent values map to ``None``. Everything
    else is serialized as compact JSON in insertion key order, so a present
    ``None`` becomes ``"null"`` and stays distinct from an absent value.
    """
    if value is MISSING:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(
        to_jsonable(value),
        ensure_ascii=False,
        separators=(",", ":"),
    )
