"""Comparison of one aligned pair of test steps."""

from __future__ import annotations

import logging
from pathlib import Path
import re

from steppack.config import DiffSettings
from steppack.core.models import TestStep
from steppack.core.types import OPERATION_FIELDS
from steppack.diff.checker import OperationDiffChecker
from steppack.diff.fields import FieldOverride
from steppack.diff.image import PNGImageComparison, is_png_reference
from steppack.diff.models import SKIP, CompareOptions, DiffEntry, FieldDiff
from steppack.store.base import TestResultLookup
from steppack.store.exceptions import StoreError

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StepComparator:
    """Field and screenshot diff for a pair of test steps."""

    def __init__(self, lookup: TestResultLookup, settings: DiffSettings | None = None) -> None:
        self.lookup = lookup
        self.settings = settings or DiffSettings()

    def resolve_step(self, step_id: str | None) -> TestStep | None:
        """Look up a step, treating a failed lookup as an absent step."""
        if not step_id:
            return None
        try:
            return self.lookup.lookup_step_for_diff(step_id)
        except StoreError as error:
            logger.warning("step %s treated as absent: %s", step_id, error)
            return None

    def compare(
        self,
        step_id_a: str | None,
        step_id_b: str | None,
        output_dir: str | Path,
        options: CompareOptions | None = None,
        *,
        output_name: str | None = None,
    ) -> DiffEntry:
        step_a = self.resolve_step(step_id_a)
        step_b = self.resolve_step(step_id_b)
        return self.compare_steps(step_a, step_b, output_dir, options, output_name=output_name)

    def compare_steps(
        self,
        step_a: TestStep | None,
        step_b: TestStep | None,
        output_dir: str | Path,
        options: CompareOptions | None = None,
        *,
        output_name: str | None = None,
    ) -> DiffEntry:
        opts = options or CompareOptions()

        overrides = [
            FieldOverride.excluded(name)
            for name in opts.exclude_param_names
            if name in OPERATION_FIELDS
        ]
        checker = OperationDiffChecker(*overrides, tracked_fields=self.settings.tracked_fields)
        diff = checker.diff(
            step_a.operation if step_a is not None else None,
            step_b.operation if step_b is not None else None,
            opts.exclude_tags_names,
        )

        if self.settings.screenshot_param_names().intersection(opts.exclude_param_names):
            return diff

        ref_a = step_a.operation.image_file_url if step_a is not None else ""
        ref_b = step_b.operation.image_file_url if step_b is not None else ""

        if is_png_reference(ref_a) and is_png_reference(ref_b):
            name = output_name or _default_output_name(step_a, step_b)
            image_diff = self._compare_screenshots(ref_a, ref_b, Path(output_dir) / name)
        elif ref_a or ref_b:
            image_diff = FieldDiff(a=SKIP if ref_a else None, b=SKIP if ref_b else None)
        else:
            image_diff = None

        if image_diff is not None:
            diff[self.settings.image_key] = image_diff
        return diff

    def screenshot_path(self, reference: str) -> Path:
        return self.settings.screenshot_root / reference.lstrip("/")

    def _compare_screenshots(self, ref_a: str, ref_b: str, output_path: Path) -> FieldDiff | None:
        logger.info("compare image: %s - %s", ref_a, ref_b)

        comparison = PNGImageComparison()
        try:
            comparison.load(self.screenshot_path(ref_a), self.screenshot_path(ref_b))
        except OSError as error:
            logger.warning("screenshots not comparable (%s - %s): %s", ref_a, ref_b, error)
            return FieldDiff(a=SKIP, b=SKIP)

        if not comparison.has_difference():
            return None

        try:
            extracted = comparison.extract_difference(output_path)
        except OSError:
            logger.exception("failed to write screenshot diff: %s", output_path)
            return FieldDiff(a=ref_a, b=ref_b)

        if extracted is None:
            return None
        logger.info(
            "screenshot diff written: %s (%d changed pixels)",
            extracted.output_path,
            extracted.changed_pixels,
        )
        return FieldDiff(a=ref_a, b=ref_b)


def _default_output_name(step_a: TestStep | None, step_b: TestStep | None) -> str:
    id_a = step_a.id if step_a is not None else "none"
    id_b = step_b.id if step_b is not None else "none"
    return _UNSAFE_NAME_CHARS.sub("_", f"{id_a}_{id_b}") + ".png"
