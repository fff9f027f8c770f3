"""Temporary working directories and zip archives for diff output."""

from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
import shutil
import tempfile
import zipfile

logger = logging.getLogger(__name__)

WORK_DIR_PREFIX = "stepkit-"
ARCHIVE_SUFFIX = ".zip"


class TemporaryWorkspace:
    """Creates ``<tmp>/stepkit-XXXX/compare_<YYYYMMDD_HHMMSS>_XXXX`` working directories."""

    def __init__(self, base_dir: str | Path | None = None, *, name_prefix: str = "compare") -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.name_prefix = name_prefix

    def create_work_dir(self) -> Path:
        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        container = Path(
            tempfile.mkdtemp(
                prefix=WORK_DIR_PREFIX,
                dir=str(self.base_dir) if self.base_dir is not None else None,
            )
        )
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        # Archive names must stay unique within the same second.
        suffix = container.name.removeprefix(WORK_DIR_PREFIX)
        work_dir = container / f"{self.name_prefix}_{stamp}_{suffix}"
        work_dir.mkdir()
        return work_dir

    def archive(self, dir_path: Path, *, delete_source: bool = True) -> Path:
        """Zip ``dir_path`` into a sibling ``<name>.zip`` rooted at the directory name."""
        source = Path(dir_path)
        archive_path = source.with_name(f"{source.name}{ARCHIVE_SUFFIX}")
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as bundle:
            for file_path in sorted(source.rglob("*")):
                arcname = Path(source.name) / file_path.relative_to(source)
                bundle.write(file_path, arcname.as_posix())
        if delete_source:
            shutil.rmtree(source)
        return archive_path

    def remove(self, dir_path: Path) -> None:
        target = Path(dir_path)
        container = target.parent
        shutil.rmtree(target, ignore_errors=True)
        if container.name.startswith(WORK_DIR_PREFIX):
            shutil.rmtree(container, ignore_errors=True)
