"""Diff subsystem: operation, screenshot, step and session comparison."""

from steppack.diff.checker import OperationDiffChecker
from steppack.diff.exceptions import (
    DiffConfigError,
    DiffError,
    DiffPackagingError,
    ImageComparisonError,
)
from steppack.diff.fields import (
    FieldComparator,
    FieldOverride,
    TrackedField,
    build_field_table,
    compare_by_text,
    suppress_diff,
)
from steppack.diff.formatting import render_comparison_summary, render_diff_entries
from steppack.diff.image import (
    ImageDifference,
    PNGImageComparison,
    compare_image_files,
    is_png_reference,
)
from steppack.diff.models import (
    SKIP,
    CompareOptions,
    DiffEntry,
    FieldDiff,
    SessionDiffResult,
    diff_entry_to_dict,
    parse_exclude_query,
)
from steppack.diff.session import (
    SessionDiffOrchestrator,
    has_difference,
    has_invalid_screenshot,
)
from steppack.diff.steps import StepComparator

__all__ = [
    "SKIP",
    "CompareOptions",
    "DiffConfigError",
    "DiffEntry",
    "DiffError",
    "DiffPackagingError",
    "FieldComparator",
    "FieldDiff",
    "FieldOverride",
    "ImageComparisonError",
    "ImageDifference",
    "OperationDiffChecker",
    "PNGImageComparison",
    "SessionDiffOrchestrator",
    "SessionDiffResult",
    "StepComparator",
    "TrackedField",
    "build_field_table",
    "compare_by_text",
    "compare_image_files",
    "diff_entry_to_dict",
    "has_difference",
    "has_invalid_screenshot",
    "is_png_reference",
    "parse_exclude_query",
    "render_comparison_summary",
    "render_diff_entries",
    "suppress_diff",
]
