"""Collaborator interfaces consumed by the diff engine."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from steppack.core.models import TestStep


@runtime_checkable
class TestResultLookup(Protocol):
    """Read access to recorded test results."""

    def lookup_ordered_step_ids(self, result_id: str) -> list[str]:
        """Step ids of a result ascending by capture timestamp; empty if unknown."""
        ...

    def lookup_step_for_diff(self, step_id: str) -> TestStep:
        """Return a step or raise ``StepNotFoundError``."""
        ...


@runtime_checkable
class Workspace(Protocol):
    """Scratch directories for diff output."""

    def create_work_dir(self) -> Path:
        ...

    def archive(self, dir_path: Path, *, delete_source: bool = True) -> Path:
        ...

    def remove(self, dir_path: Path) -> None:
        ...


@runtime_checkable
class StaticDirectory(Protocol):
    """Hosts files under public URLs."""

    def host_file(self, path: Path, name: str) -> str:
        ...
