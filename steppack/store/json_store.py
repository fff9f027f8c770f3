"""Test-result store backed by one JSON file per result."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import threading

from steppack.core.models import TestResult, TestStep
from steppack.store.exceptions import StepNotFoundError, StoreFormatError, TestResultNotFoundError
from steppack.store.memory import InMemoryTestResultStore

logger = logging.getLogger(__name__)

RESULT_FILE_SUFFIX = ".json"


def read_test_result(path: str | Path) -> TestResult:
    """Read a single test result file."""
    target = Path(path)
    try:
        raw = json.loads(target.read_text(encoding="utf-8"))
    except UnicodeDecodeError as error:
        raise StoreFormatError(f"Test result is not valid UTF-8 text: {target}") from error
    except json.JSONDecodeError as error:
        raise StoreFormatError(f"Test result is not valid JSON: {target} ({error})") from error

    if not isinstance(raw, dict):
        raise StoreFormatError(f"Test result must be a JSON object: {target}")
    try:
        return TestResult.from_dict(raw)
    except (KeyError, TypeError, AttributeError) as error:
        raise StoreFormatError(f"Test result has an invalid shape: {target} ({error})") from error


def write_test_result(result: TestResult, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return target


class JsonTestResultStore:
    """Read-only store over ``<results_dir>/<result-id>.json`` files.

    Files are parsed on first access. Step lookups scan every result file once
    and are answered from an index afterwards.
    """

    def __init__(self, results_dir: str | Path) -> None:
        self.results_dir = Path(results_dir)
        self._cache = InMemoryTestResultStore()
        self._loaded: set[str] = set()
        self._indexed = False
        self._lock = threading.Lock()

    def result_path(self, result_id: str) -> Path:
        return self.results_dir / f"{result_id}{RESULT_FILE_SUFFIX}"

    def get_test_result(self, result_id: str) -> TestResult:
        with self._lock:
            return self._load(result_id)

    def lookup_ordered_step_ids(self, result_id: str) -> list[str]:
        try:
            result = self.get_test_result(result_id)
        except TestResultNotFoundError:
            logger.warning("test result not found: %s", result_id)
            return []
        return result.ordered_step_ids()

    def lookup_step_for_diff(self, step_id: str) -> TestStep:
        with self._lock:
            try:
                return self._cache.lookup_step_for_diff(step_id)
            except StepNotFoundError:
                if self._indexed:
                    raise
            self._index_all()
            return self._cache.lookup_step_for_diff(step_id)

    def _load(self, result_id: str) -> TestResult:
        path = self.result_path(result_id)
        if result_id not in self._loaded:
            if not path.is_file():
                raise TestResultNotFoundError(f"test result not found: {result_id!r}")
            result = read_test_result(path)
            if result.id != result_id:
                raise StoreFormatError(
                    f"Test result id mismatch in {path}: expected {result_id!r}, got {result.id!r}"
                )
            self._cache.add(result)
            self._loaded.add(result_id)
        return self._cache.get(result_id)

    def _index_all(self) -> None:
        if not self.results_dir.is_dir():
            self._indexed = True
            return
        for path in sorted(self.results_dir.glob(f"*{RESULT_FILE_SUFFIX}")):
            self._load(path.stem)
        self._indexed = True
