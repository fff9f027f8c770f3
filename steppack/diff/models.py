"""Data models for test-result comparison output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SKIP = "skip"


@dataclass(frozen=True, slots=True)
class FieldDiff:
    """Canonical string forms of one differing field; ``None`` means absent."""

    a: str | None
    b: str | None

    @property
    def is_skip_pair(self) -> bool:
        return self.a == SKIP and self.b == SKIP

    def to_dict(self) -> dict[str, str | None]:
        return {"a": self.a, "b": self.b}


DiffEntry = dict[str, FieldDiff]


def diff_entry_to_dict(entry: DiffEntry) -> dict[str, dict[str, str | None]]:
    return {key: value.to_dict() for key, value in entry.items()}


@dataclass(slots=True)
class CompareOptions:
    """Exclusions applied to a comparison."""

    exclude_param_names: tuple[str, ...] = field(default_factory=tuple)
    exclude_tags_names: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.exclude_param_names = _normalize_names(self.exclude_param_names)
        self.exclude_tags_names = _normalize_names(self.exclude_tags_names)

    @classmethod
    def from_queries(
        cls,
        exclude_query: str | None = None,
        exclude_tags_query: str | None = None,
    ) -> "CompareOptions":
        return cls(
            exclude_param_names=parse_exclude_query(exclude_query),
            exclude_tags_names=parse_exclude_query(exclude_tags_query),
        )


@dataclass(slots=True)
class SessionDiffResult:
    """Aggregate comparison of two test results."""

    diffs: list[DiffEntry]
    is_same: bool
    has_invalid_screenshots: bool
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "diffs": [diff_entry_to_dict(entry) for entry in self.diffs],
            "isSame": self.is_same,
            "hasInvalidScreenshots": self.has_invalid_screenshots,
            "url": self.url,
        }


def parse_exclude_query(query: str | None) -> tuple[str, ...]:
    """Split a comma-separated exclusion query into names."""
    if not query:
        return ()
    return _normalize_names(query.split(","))


def _normalize_names(values: Any) -> tuple[str, ...]:
    if isinstance(values, str):
        values = (values,)
    normalized: list[str] = []
    for value in values or ():
        name = str(value).strip()
        if name and name not in normalized:
            normalized.append(name)
    return tuple(normalized)
