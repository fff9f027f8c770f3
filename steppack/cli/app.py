import asyncio
from dataclasses import dataclass, replace
from importlib.metadata import PackageNotFoundError, version as package_version
import json
import logging
from pathlib import Path
from typing import Any

import typer

from steppack.config import LOG_LEVEL_ENV_VAR, DiffSettings, SettingsError
from steppack.diff import (
    CompareOptions,
    DiffError,
    SessionDiffOrchestrator,
    diff_entry_to_dict,
    render_comparison_summary,
    render_diff_entries,
)
from steppack.store import (
    JsonTestResultStore,
    LocalStaticDirectory,
    StoreError,
    TemporaryWorkspace,
)

app = typer.Typer(help="StepDiff CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_cli_version() -> str:
    try:
        return package_version("stepdiff")
    except PackageNotFoundError:
        from steppack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show StepDiff version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        envvar=LOG_LEVEL_ENV_VAR,
        help="Logging level for engine diagnostics (default WARNING).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.stable_json = stable_json
    level = (log_level or "WARNING").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise typer.BadParameter(f"unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err)


def _fail(message: str, *, json_output: bool, error: BaseException, **context: Any) -> None:
    if json_output:
        _echo_json(
            {
                "status": "error",
                "exit_code": 1,
                "message": message,
                **context,
            }
        )
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1) from error


def _build_settings(
    screenshot_dir: Path | None,
    static_dir: Path | None,
    static_url: str | None,
) -> DiffSettings:
    settings = DiffSettings.from_env()
    overrides: dict[str, Any] = {}
    if screenshot_dir is not None:
        overrides["screenshot_root"] = screenshot_dir
    if static_dir is not None:
        overrides["static_dir"] = static_dir
    if static_url is not None:
        overrides["static_url"] = static_url
    return replace(settings, **overrides) if overrides else settings


def _build_orchestrator(results_dir: Path, settings: DiffSettings) -> SessionDiffOrchestrator:
    return SessionDiffOrchestrator(
        JsonTestResultStore(results_dir),
        LocalStaticDirectory(settings.static_dir, settings.static_url),
        TemporaryWorkspace(),
        settings,
    )


@app.command()
def compare(
    left: str = typer.Argument(..., help="Id of the left test result."),
    right: str = typer.Argument(..., help="Id of the right test result."),
    results_dir: Path = typer.Option(
        ...,
        "--results-dir",
        help="Directory holding <test-result-id>.json files.",
    ),
    exclude: str | None = typer.Option(
        None,
        "--exclude",
        help="Comma-separated operation fields to ignore (use 'screenshot' to skip images).",
    ),
    exclude_tags: str | None = typer.Option(
        None,
        "--exclude-tags",
        help="Comma-separated element tag names to ignore.",
    ),
    screenshot_dir: Path | None = typer.Option(
        None,
        "--screenshot-dir",
        help="Root directory screenshot references resolve against.",
    ),
    static_dir: Path | None = typer.Option(
        None,
        "--static-dir",
        help="Directory the diff archive is moved to.",
    ),
    static_url: str | None = typer.Option(
        None,
        "--static-url",
        help="URL prefix for the hosted diff archive.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable comparison output.",
    ),
    max_fields: int = typer.Option(
        8,
        "--max-fields",
        help="Maximum number of differing fields to print per step in text mode.",
    ),
) -> None:
    """Compare two recorded test results step by step."""
    try:
        settings = _build_settings(screenshot_dir, static_dir, static_url)
        options = CompareOptions.from_queries(exclude, exclude_tags)
        orchestrator = _build_orchestrator(results_dir, settings)
        result = asyncio.run(orchestrator.compare_test_results(left, right, options))
    except (DiffError, StoreError, SettingsError, OSError) as error:
        _fail(
            f"compare failed: {error}",
            json_output=json_output,
            error=error,
            left_id=left,
            right_id=right,
        )

    if json_output:
        _echo_json(
            {
                **result.to_dict(),
                "status": "ok",
                "exit_code": 0,
                "message": "comparison completed",
                "left_id": left,
                "right_id": right,
            }
        )
        return

    _echo(render_comparison_summary(result))
    _echo(render_diff_entries(result.diffs, max_fields=max(1, max_fields)))


@app.command(name="compare-steps")
def compare_steps(
    left: str = typer.Argument(..., help="Id of the left test step."),
    right: str = typer.Argument(..., help="Id of the right test step."),
    results_dir: Path = typer.Option(
        ...,
        "--results-dir",
        help="Directory holding <test-result-id>.json files.",
    ),
    out: Path = typer.Option(
        ...,
        "--out",
        help="Directory the screenshot diff image is written to.",
    ),
    exclude: str | None = typer.Option(
        None,
        "--exclude",
        help="Comma-separated operation fields to ignore (use 'screenshot' to skip images).",
    ),
    exclude_tags: str | None = typer.Option(
        None,
        "--exclude-tags",
        help="Comma-separated element tag names to ignore.",
    ),
    screenshot_dir: Path | None = typer.Option(
        None,
        "--screenshot-dir",
        help="Root directory screenshot references resolve against.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable comparison output.",
    ),
) -> None:
    """Compare two individual test steps."""
    try:
        settings = _build_settings(screenshot_dir, None, None)
        options = CompareOptions.from_queries(exclude, exclude_tags)
        orchestrator = _build_orchestrator(results_dir, settings)
        out.mkdir(parents=True, exist_ok=True)
        entry = asyncio.run(orchestrator.compare_test_steps(left, right, out, options))
    except (DiffError, StoreError, SettingsError, OSError) as error:
        _fail(
            f"compare-steps failed: {error}",
            json_output=json_output,
            error=error,
            left_id=left,
            right_id=right,
        )

    if json_output:
        _echo_json(
            {
                "diff": diff_entry_to_dict(entry),
                "status": "ok",
                "exit_code": 0,
                "message": "comparison completed",
                "left_id": left,
                "right_id": right,
            }
        )
        return

    _echo(render_diff_entries([entry]))


def main() -> None:
    app()
