"""Field-level comparison primitives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from steppack.core.canonical import canonical_text
from steppack.core.types import OPERATION_FIELDS
from steppack.diff.exceptions import DiffConfigError
from steppack.diff.models import FieldDiff

FieldComparator = Callable[[Any, Any], "FieldDiff | None"]


def compare_by_text(a: Any, b: Any) -> FieldDiff | None:
    """Compare two field values through their canonical text forms."""
    text_a = canonical_text(a)
    text_b = canonical_text(b)
    if text_a == text_b:
        return None
    return FieldDiff(a=text_a, b=text_b)


def suppress_diff(a: Any, b: Any) -> FieldDiff | None:
    """Comparator that never reports a difference."""
    return None


@dataclass(frozen=True, slots=True)
class FieldOverride:
    """Replacement output key and/or comparator for one operation field."""

    field: str
    name: str | None = None
    comparator: FieldComparator | None = None

    def __post_init__(self) -> None:
        if self.field not in OPERATION_FIELDS:
            raise DiffConfigError(f"Unknown operation field: {self.field}")

    @classmethod
    def excluded(cls, field: str) -> "FieldOverride":
        return cls(field=field, comparator=suppress_diff)


@dataclass(frozen=True, slots=True)
class TrackedField:
    """One row of the tracked-field table."""

    field: str
    name: str | None = None
    comparator: FieldComparator | None = None

    @property
    def key(self) -> str:
        return self.name or self.field

    def compare(self, a: Any, b: Any) -> FieldDiff | None:
        comparator = self.comparator or compare_by_text
        return comparator(a, b)


def build_field_table(
    base_fields: tuple[str, ...],
    overrides: tuple[FieldOverride, ...] = (),
) -> tuple[TrackedField, ...]:
    """Build the ordered field table.

    Overrides for a base field replace it in place; overrides for other fields
    are appended in the order given. A later override for the same field wins.
    """
    unknown = [name for name in base_fields if name not in OPERATION_FIELDS]
    if unknown:
        raise DiffConfigError(f"Unknown tracked field(s): {', '.join(unknown)}")

    table: dict[str, TrackedField] = {name: TrackedField(field=name) for name in base_fields}
    for override in overrides:
        table[override.field] = TrackedField(
            field=override.field,
            name=override.name,
            comparator=override.comparator,
        )
    return tuple(table.values())
