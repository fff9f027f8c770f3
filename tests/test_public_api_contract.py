import inspect
from pathlib import Path

import stepkit
from stepkit import (
    DiffSettings,
    InMemoryTestResultStore,
    LocalStaticDirectory,
    Operation,
    TemporaryWorkspace,
    TestResult,
    TestStep,
)


def test_public_api_exports_are_importable() -> None:
    for name in stepkit.__all__:
        assert hasattr(stepkit, name), name


def test_public_api_function_signatures() -> None:
    expected = {
        "compare_test_results": (
            "lookup",
            "result_id_a",
            "result_id_b",
            "exclude_param_names",
            "exclude_tags_names",
            "settings",
            "static_directory",
            "workspace",
        ),
        "compare_test_steps": (
            "lookup",
            "step_id_a",
            "step_id_b",
            "output_dir",
            "exclude_param_names",
            "exclude_tags_names",
            "settings",
        ),
    }
    for name, parameters in expected.items():
        function = getattr(stepkit, name)
        assert inspect.iscoroutinefunction(function)
        assert tuple(inspect.signature(function).parameters) == parameters


def _store() -> InMemoryTestResultStore:
    return InMemoryTestResultStore(
        [
            TestResult(id="a", test_steps=[TestStep(id="a1", operation=Operation(input="x"))]),
            TestResult(id="b", test_steps=[TestStep(id="b1", operation=Operation(input="y"))]),
        ]
    )


def test_compare_test_results_sync_round_trip(tmp_path: Path) -> None:
    result = stepkit.compare_test_results_sync(
        _store(),
        "a",
        "b",
        exclude_param_names=["input"],
        settings=DiffSettings(screenshot_root=tmp_path),
        static_directory=LocalStaticDirectory(tmp_path / "static", "/diffs"),
        workspace=TemporaryWorkspace(tmp_path / "work"),
    )

    assert result.to_dict()["diffs"] == [{}]
    assert result.to_dict()["isSame"] is True
    assert result.url.startswith("/diffs/compare_")
