"""Field-level diff of two recorded operations."""

from __future__ import annotations

from typing import Any, Iterable

from steppack.core.canonical import MISSING
from steppack.core.models import Operation
from steppack.core.types import DEFAULT_TRACKED_FIELDS
from steppack.diff.fields import FieldOverride, TrackedField, build_field_table
from steppack.diff.models import DiffEntry


class OperationDiffChecker:
    """Compare two operations over an ordered table of tracked fields."""

    def __init__(
        self,
        *overrides: FieldOverride,
        tracked_fields: Iterable[str] = DEFAULT_TRACKED_FIELDS,
    ) -> None:
        self._fields = build_field_table(tuple(tracked_fields), tuple(overrides))

    @property
    def fields(self) -> tuple[TrackedField, ...]:
        return self._fields

    def diff(
        self,
        a: Operation | None,
        b: Operation | None,
        exclude_tags: Iterable[str] | None = None,
    ) -> DiffEntry:
        """Return an entry for every tracked field whose values differ.

        A missing operation compares as if all of its fields were absent.
        """
        excluded = frozenset(tag.lower() for tag in exclude_tags or ())
        result: DiffEntry = {}
        for tracked in self._fields:
            value_a = _field_value(a, tracked.field, excluded)
            value_b = _field_value(b, tracked.field, excluded)
            field_diff = tracked.compare(value_a, value_b)
            if field_diff is not None:
                result[tracked.key] = field_diff
        return result


def _field_value(operation: Operation | None, name: str, excluded_tags: frozenset[str]) -> Any:
    if operation is None:
        return MISSING

    value = operation.field_value(name)
    if not excluded_tags:
        return value

    if name == "elementInfo":
        if value is not None and value.tagname.lower() in excluded_tags:
            return ""
        return value

    if name == "screenElements" and value is not MISSING:
        return [element for element in value if element.tagname.lower() not in excluded_tags]

    return value
