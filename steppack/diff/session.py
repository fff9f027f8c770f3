"""Positional comparison of two test results and packaging of the evidence."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from steppack.config import DiffSettings
from steppack.diff.exceptions import DiffPackagingError
from steppack.diff.models import (
    SKIP,
    CompareOptions,
    DiffEntry,
    FieldDiff,
    SessionDiffResult,
    diff_entry_to_dict,
)
from steppack.diff.steps import StepComparator
from steppack.store.base import StaticDirectory, TestResultLookup, Workspace

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "diffs.json"
SCREENSHOT_DIR_NAME = "screenshots"


class SessionDiffOrchestrator:
    """Align two test results by position and compare every step pair."""

    def __init__(
        self,
        lookup: TestResultLookup,
        static_directory: StaticDirectory,
        workspace: Workspace,
        settings: DiffSettings | None = None,
    ) -> None:
        self.lookup = lookup
        self.static_directory = static_directory
        self.workspace = workspace
        self.settings = settings or DiffSettings()
        self.step_comparator = StepComparator(lookup, self.settings)

    async def compare_test_steps(
        self,
        step_id_a: str | None,
        step_id_b: str | None,
        output_dir: str | Path,
        options: CompareOptions | None = None,
        *,
        output_name: str | None = None,
    ) -> DiffEntry:
        return await asyncio.to_thread(
            self.step_comparator.compare,
            step_id_a,
            step_id_b,
            output_dir,
            options,
            output_name=output_name,
        )

    async def compare_test_results(
        self,
        result_id_a: str,
        result_id_b: str,
        options: CompareOptions | None = None,
    ) -> SessionDiffResult:
        """Compare two test results step by step.

        Steps are paired by their position in capture order; the shorter result
        is padded with absent steps. The diff manifest and screenshot diffs are
        zipped and hosted, and the archive URL is returned with the verdict.
        """
        opts = options or CompareOptions()

        step_ids_a, step_ids_b = await asyncio.gather(
            asyncio.to_thread(self.lookup.lookup_ordered_step_ids, result_id_a),
            asyncio.to_thread(self.lookup.lookup_ordered_step_ids, result_id_b),
        )
        length = max(len(step_ids_a), len(step_ids_b))
        logger.info(
            "comparing test results %s (%d steps) and %s (%d steps)",
            result_id_a,
            len(step_ids_a),
            result_id_b,
            len(step_ids_b),
        )

        work_dir = await asyncio.to_thread(self.workspace.create_work_dir)
        try:
            screenshot_dir = work_dir / SCREENSHOT_DIR_NAME
            screenshot_dir.mkdir(parents=True, exist_ok=True)

            diffs = list(
                await asyncio.gather(
                    *(
                        self._compare_position(
                            index,
                            _at(step_ids_a, index),
                            _at(step_ids_b, index),
                            screenshot_dir,
                            opts,
                        )
                        for index in range(length)
                    )
                )
            )
        except BaseException:
            self.workspace.remove(work_dir)
            raise

        is_same = not any(has_difference(diff, self.settings.image_key) for diff in diffs)
        has_invalid_screenshots = any(
            has_invalid_screenshot(diff, self.settings.image_key) for diff in diffs
        )

        url = await asyncio.to_thread(self._package, work_dir, diffs)

        return SessionDiffResult(
            diffs=diffs,
            is_same=is_same,
            has_invalid_screenshots=has_invalid_screenshots,
            url=url,
        )

    async def _compare_position(
        self,
        index: int,
        step_id_a: str | None,
        step_id_b: str | None,
        screenshot_dir: Path,
        options: CompareOptions,
    ) -> DiffEntry:
        # A failed position is reported as "could not be compared".
        try:
            return await self.compare_test_steps(
                step_id_a,
                step_id_b,
                screenshot_dir,
                options,
                output_name=f"step_{index + 1:04d}.png",
            )
        except Exception:
            logger.exception(
                "step comparison failed at position %d (%s - %s)",
                index + 1,
                step_id_a,
                step_id_b,
            )
            return {self.settings.image_key: FieldDiff(a=SKIP, b=SKIP)}

    def _package(self, work_dir: Path, diffs: list[DiffEntry]) -> str:
        try:
            manifest_path = work_dir / MANIFEST_FILE_NAME
            manifest_path.write_text(
                json.dumps([diff_entry_to_dict(diff) for diff in diffs], ensure_ascii=False),
                encoding="utf-8",
            )
            archive_path = self.workspace.archive(work_dir, delete_source=True)
            url = self.static_directory.host_file(archive_path, archive_path.name)
        except OSError as error:
            raise DiffPackagingError(f"failed to package diff output: {error}") from error
        finally:
            self.workspace.remove(work_dir)

        logger.info("diff archive hosted at %s", url)
        return url


def has_difference(diff: DiffEntry, image_key: str) -> bool:
    """True unless every entry is a double-skip screenshot marker."""
    return any(key != image_key or not value.is_skip_pair for key, value in diff.items())


def has_invalid_screenshot(diff: DiffEntry, image_key: str) -> bool:
    entry = diff.get(image_key)
    return entry is not None and entry.is_skip_pair


def _at(step_ids: list[str], index: int) -> str | None:
    return step_ids[index] if index < len(step_ids) else None
