from pathlib import Path
import zipfile

import pytest

from steppack.store import LocalStaticDirectory, TemporaryWorkspace


def test_work_dirs_are_unique(tmp_path: Path) -> None:
    workspace = TemporaryWorkspace(tmp_path)

    first = workspace.create_work_dir()
    second = workspace.create_work_dir()

    assert first != second
    assert first.is_dir() and second.is_dir()
    assert first.name.startswith("compare_")


def test_archive_zips_directory_and_deletes_source(tmp_path: Path) -> None:
    workspace = TemporaryWorkspace(tmp_path)
    work_dir = workspace.create_work_dir()
    (work_dir / "screenshots").mkdir()
    (work_dir / "screenshots" / "step_0001.png").write_bytes(b"png")
    (work_dir / "diffs.json").write_text("[]", encoding="utf-8")

    archive = workspace.archive(work_dir)

    assert archive.name == f"{work_dir.name}.zip"
    assert not work_dir.exists()
    with zipfile.ZipFile(archive) as bundle:
        names = set(bundle.namelist())
    assert f"{work_dir.name}/diffs.json" in names
    assert f"{work_dir.name}/screenshots/step_0001.png" in names


def test_archive_can_keep_source(tmp_path: Path) -> None:
    workspace = TemporaryWorkspace(tmp_path)
    work_dir = workspace.create_work_dir()
    (work_dir / "diffs.json").write_text("[]", encoding="utf-8")

    workspace.archive(work_dir, delete_source=False)

    assert (work_dir / "diffs.json").is_file()


def test_remove_cleans_up_container(tmp_path: Path) -> None:
    workspace = TemporaryWorkspace(tmp_path)
    work_dir = workspace.create_work_dir()

    workspace.remove(work_dir)

    assert list(tmp_path.iterdir()) == []


def test_static_directory_moves_file_and_builds_url(tmp_path: Path) -> None:
    source = tmp_path / "compare_20260101_000000.zip"
    source.write_bytes(b"zip")
    static = LocalStaticDirectory(tmp_path / "public" / "diffs", "http://localhost:3002/diffs/")

    url = static.host_file(source, source.name)

    assert url == "http://localhost:3002/diffs/compare_20260101_000000.zip"
    assert not source.exists()
    assert (tmp_path / "public" / "diffs" / source.name).read_bytes() == b"zip"


def test_archives_created_in_the_same_second_have_distinct_names(tmp_path: Path) -> None:
    workspace = TemporaryWorkspace(tmp_path)

    first = workspace.archive(workspace.create_work_dir())
    second = workspace.archive(workspace.create_work_dir())

    assert first.name != second.name


def test_static_directory_refuses_to_overwrite(tmp_path: Path) -> None:
    static = LocalStaticDirectory(tmp_path / "public", "/diffs")
    first = tmp_path / "bundle.zip"
    first.write_bytes(b"first")
    static.host_file(first, first.name)
    second = tmp_path / "bundle.zip"
    second.write_bytes(b"second")

    with pytest.raises(FileExistsError):
        static.host_file(second, second.name)

    assert (tmp_path / "public" / "bundle.zip").read_bytes() == b"first"
