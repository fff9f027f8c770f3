"""Stable public API surface for StepDiff.

This module is the supported import path for library users.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable

from steppack.config import DiffSettings, SettingsError
from steppack.core.models import ElementInfo, Operation, ScreenElement, TestResult, TestStep
from steppack.diff import (
    CompareOptions,
    DiffEntry,
    DiffError,
    DiffPackagingError,
    FieldDiff,
    FieldOverride,
    OperationDiffChecker,
    PNGImageComparison,
    SessionDiffOrchestrator,
    SessionDiffResult,
    compare_image_files,
    parse_exclude_query,
)
from steppack.store import (
    InMemoryTestResultStore,
    JsonTestResultStore,
    LocalStaticDirectory,
    StaticDirectory,
    TemporaryWorkspace,
    TestResultLookup,
    Workspace,
)

__version__ = "0.1.0"


def build_orchestrator(
    lookup: TestResultLookup,
    *,
    settings: DiffSettings | None = None,
    static_directory: StaticDirectory | None = None,
    workspace: Workspace | None = None,
) -> SessionDiffOrchestrator:
    """Wire an orchestrator with local hosting and temp workspaces by default."""
    cfg = settings or DiffSettings.from_env()
    return SessionDiffOrchestrator(
        lookup,
        static_directory or LocalStaticDirectory(cfg.static_dir, cfg.static_url),
        workspace or TemporaryWorkspace(),
        cfg,
    )


async def compare_test_results(
    lookup: TestResultLookup,
    result_id_a: str,
    result_id_b: str,
    *,
    exclude_param_names: Iterable[str] = (),
    exclude_tags_names: Iterable[str] = (),
    settings: DiffSettings | None = None,
    static_directory: StaticDirectory | None = None,
    workspace: Workspace | None = None,
) -> SessionDiffResult:
    orchestrator = build_orchestrator(
        lookup,
        settings=settings,
        static_directory=static_directory,
        workspace=workspace,
    )
    options = CompareOptions(
        exclude_param_names=tuple(exclude_param_names),
        exclude_tags_names=tuple(exclude_tags_names),
    )
    return await orchestrator.compare_test_results(result_id_a, result_id_b, options)


def compare_test_results_sync(
    lookup: TestResultLookup,
    result_id_a: str,
    result_id_b: str,
    **kwargs,
) -> SessionDiffResult:
    """Blocking wrapper around ``compare_test_results``."""
    return asyncio.run(compare_test_results(lookup, result_id_a, result_id_b, **kwargs))


async def compare_test_steps(
    lookup: TestResultLookup,
    step_id_a: str,
    step_id_b: str,
    output_dir: str | Path,
    *,
    exclude_param_names: Iterable[str] = (),
    exclude_tags_names: Iterable[str] = (),
    settings: DiffSettings | None = None,
) -> DiffEntry:
    orchestrator = build_orchestrator(lookup, settings=settings)
    options = CompareOptions(
        exclude_param_names=tuple(exclude_param_names),
        exclude_tags_names=tuple(exclude_tags_names),
    )
    return await orchestrator.compare_test_steps(step_id_a, step_id_b, output_dir, options)


__all__ = [
    "CompareOptions",
    "DiffEntry",
    "DiffError",
    "DiffPackagingError",
    "DiffSettings",
    "ElementInfo",
    "FieldDiff",
    "FieldOverride",
    "InMemoryTestResultStore",
    "JsonTestResultStore",
    "LocalStaticDirectory",
    "Operation",
    "OperationDiffChecker",
    "PNGImageComparison",
    "ScreenElement",
    "SessionDiffOrchestrator",
    "SessionDiffResult",
    "SettingsError",
    "TemporaryWorkspace",
    "TestResult",
    "TestStep",
    "__version__",
    "build_orchestrator",
    "compare_image_files",
    "compare_test_results",
    "compare_test_results_sync",
    "compare_test_steps",
    "parse_exclude_query",
]
