import logging
from pathlib import Path

import pytest

from steppack.config import DiffSettings
from steppack.core.models import ElementInfo, Operation, TestResult, TestStep
from steppack.diff import SKIP, CompareOptions, FieldDiff, StepComparator
from steppack.store import InMemoryTestResultStore


def _step(step_id: str, *, image: str = "", **operation_fields) -> TestStep:
    return TestStep(
        id=step_id,
        operation=Operation(image_file_url=image, keyword_texts=[], **operation_fields),
    )


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    target = tmp_path / "out"
    target.mkdir()
    return target


def _comparator(public_dir: Path, *steps: TestStep, **settings) -> StepComparator:
    store = InMemoryTestResultStore([TestResult(id="result", test_steps=list(steps))])
    return StepComparator(store, DiffSettings(screenshot_root=public_dir, **settings))


def test_identical_screenshots_produce_no_image_entry(write_png, public_dir: Path, out_dir: Path) -> None:
    write_png("screenshots/a.png", root=public_dir)
    write_png("screenshots/b.png", root=public_dir)
    comparator = _comparator(
        public_dir,
        _step("s1", image="screenshots/a.png"),
        _step("s2", image="screenshots/b.png"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {}
    assert list(out_dir.iterdir()) == []


def test_different_screenshots_add_image_entry_and_diff_file(
    write_png, public_dir: Path, out_dir: Path
) -> None:
    write_png("screenshots/a.png", root=public_dir)
    write_png("screenshots/b.png", root=public_dir, pixel=(0, 0))
    comparator = _comparator(
        public_dir,
        _step("s1", image="screenshots/a.png"),
        _step("s2", image="/screenshots/b.png"),
    )

    diff = comparator.compare("s1", "s2", out_dir, output_name="step_0001.png")

    assert diff == {"screenshot": FieldDiff(a="screenshots/a.png", b="/screenshots/b.png")}
    assert (out_dir / "step_0001.png").is_file()


def test_default_output_name_uses_step_ids(write_png, public_dir: Path, out_dir: Path) -> None:
    write_png("a.png", root=public_dir)
    write_png("b.png", root=public_dir, pixel=(0, 0))
    comparator = _comparator(public_dir, _step("s/1", image="a.png"), _step("s2", image="b.png"))

    comparator.compare("s/1", "s2", out_dir)

    assert (out_dir / "s_1_s2.png").is_file()


def test_image_key_is_configurable(write_png, public_dir: Path, out_dir: Path) -> None:
    write_png("a.png", root=public_dir)
    write_png("b.png", root=public_dir, pixel=(0, 0))
    comparator = _comparator(
        public_dir,
        _step("s1", image="a.png"),
        _step("s2", image="b.png"),
        image_key="image",
    )

    assert set(comparator.compare("s1", "s2", out_dir)) == {"image"}


def test_non_png_references_are_skipped(public_dir: Path, out_dir: Path) -> None:
    comparator = _comparator(
        public_dir,
        _step("s1", image="screenshots/a.webp"),
        _step("s2", image="screenshots/b.png"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {"screenshot": FieldDiff(a=SKIP, b=SKIP)}


def test_one_sided_screenshot_reference(public_dir: Path, out_dir: Path) -> None:
    comparator = _comparator(
        public_dir,
        _step("s1", image="screenshots/a.png"),
        _step("s2"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {"screenshot": FieldDiff(a=SKIP, b=None)}
    assert comparator.compare("s2", "s1", out_dir) == {"screenshot": FieldDiff(a=None, b=SKIP)}


def test_missing_references_on_both_sides_add_no_image_entry(public_dir: Path, out_dir: Path) -> None:
    comparator = _comparator(public_dir, _step("s1"), _step("s2"))

    assert comparator.compare("s1", "s2", out_dir) == {}


def test_unreadable_screenshot_becomes_skip_pair(write_png, public_dir: Path, out_dir: Path) -> None:
    write_png("a.png", root=public_dir)
    comparator = _comparator(
        public_dir,
        _step("s1", image="a.png"),
        _step("s2", image="missing.png"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {"screenshot": FieldDiff(a=SKIP, b=SKIP)}


def test_malformed_screenshot_is_omitted(write_png, public_dir: Path, out_dir: Path) -> None:
    write_png("a.png", root=public_dir)
    (public_dir / "broken.png").write_bytes(b"broken")
    comparator = _comparator(
        public_dir,
        _step("s1", image="a.png"),
        _step("s2", image="broken.png"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {}


def test_unknown_step_is_treated_as_absent(public_dir: Path, out_dir: Path, caplog) -> None:
    comparator = _comparator(public_dir, _step("s1", input="x", image="a.png"))

    with caplog.at_level(logging.WARNING, logger="steppack.diff.steps"):
        diff = comparator.compare("s1", "nope", out_dir)

    assert "nope" in caplog.text
    assert diff["input"] == FieldDiff(a="x", b=None)
    assert diff["screenshot"] == FieldDiff(a=SKIP, b=None)


def test_both_steps_absent_produce_empty_diff(public_dir: Path, out_dir: Path) -> None:
    comparator = _comparator(public_dir)

    assert comparator.compare(None, "", out_dir) == {}


@pytest.mark.parametrize("excluded", ["screenshot", "image"])
def test_screenshot_exclusion_removes_image_entry(
    excluded: str, public_dir: Path, out_dir: Path
) -> None:
    comparator = _comparator(public_dir, _step("s1", image="a.webp"), _step("s2"))

    diff = comparator.compare("s1", "s2", out_dir, CompareOptions(exclude_param_names=(excluded,)))

    assert diff == {}


def test_param_and_tag_exclusions_are_forwarded(public_dir: Path, out_dir: Path) -> None:
    comparator = _comparator(
        public_dir,
        _step("s1", input="a", title="t1", element_info=ElementInfo(tagname="BUTTON", text="OK")),
        _step("s2", input="b", title="t2", element_info=ElementInfo(tagname="BUTTON", text="NG")),
    )
    options = CompareOptions(
        exclude_param_names=("input", "unknownField"),
        exclude_tags_names=("button",),
    )

    assert comparator.compare("s1", "s2", out_dir, options) == {"title": FieldDiff(a="t1", b="t2")}


def test_oversized_screenshot_is_omitted(
    write_png, write_oversized_png, public_dir: Path, out_dir: Path
) -> None:
    write_png("a.png", root=public_dir)
    write_oversized_png("huge.png", root=public_dir)
    comparator = _comparator(
        public_dir,
        _step("s1", input="x", image="a.png"),
        _step("s2", input="y", image="huge.png"),
    )

    assert comparator.compare("s1", "s2", out_dir) == {"input": FieldDiff(a="x", b="y")}
