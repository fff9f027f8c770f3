"""CLI-friendly rendering for comparison results."""

from __future__ import annotations

from steppack.diff.models import DiffEntry, SessionDiffResult


def render_comparison_summary(result: SessionDiffResult) -> str:
    changed = sum(1 for entry in result.diffs if entry)
    return (
        f"positions={len(result.diffs)} with_diffs={changed} "
        f"same={str(result.is_same).lower()} "
        f"invalid_screenshots={str(result.has_invalid_screenshots).lower()} "
        f"url={result.url}"
    )


def render_diff_entries(diffs: list[DiffEntry], *, max_fields: int = 8) -> str:
    if not any(diffs):
        return "no differences detected"

    lines: list[str] = []
    for index, entry in enumerate(diffs, start=1):
        if not entry:
            continue
        lines.append(f"step {index}:")
        keys = list(entry.keys())
        for key in keys[:max_fields]:
            lines.append(f"  {key}: {_render_side(entry[key].a)} -> {_render_side(entry[key].b)}")
        if len(keys) > max_fields:
            lines.append(f"  ... {len(keys) - max_fields} additional field(s) omitted")
    return "\n".join(lines)


def _render_side(value: str | None) -> str:
    if value is None:
        return "<absent>"
    return value if value else '""'
