"""In-memory test-result store."""

from __future__ import annotations

from typing import Iterable

from steppack.core.models import TestResult, TestStep
from steppack.store.exceptions import StepNotFoundError, TestResultNotFoundError


class InMemoryTestResultStore:
    """Test results held in memory, indexed by result and step id."""

    def __init__(self, results: Iterable[TestResult] = ()) -> None:
        self._results: dict[str, TestResult] = {}
        self._steps: dict[str, TestStep] = {}
        for result in results:
            self.add(result)

    def add(self, result: TestResult) -> None:
        self._results[result.id] = result
        for step in result.test_steps:
            self._steps[step.id] = step

    def get(self, result_id: str) -> TestResult:
        try:
            return self._results[result_id]
        except KeyError as error:
            raise TestResultNotFoundError(f"test result not found: {result_id!r}") from error

    def lookup_ordered_step_ids(self, result_id: str) -> list[str]:
        result = self._results.get(result_id)
        if result is None:
            return []
        return result.ordered_step_ids()

    def lookup_step_for_diff(self, step_id: str) -> TestStep:
        try:
            return self._steps[step_id]
        except KeyError as error:
            raise StepNotFoundError(f"test step not found: {step_id!r}") from error
