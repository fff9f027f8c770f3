"""Local static directory that hosts diff archives."""

from __future__ import annotations

import logging
from pathlib import Path
import shutil
from urllib.parse import quote

logger = logging.getLogger(__name__)


class LocalStaticDirectory:
    """Moves files into ``root`` and serves them under ``base_url``."""

    def __init__(self, root: str | Path, base_url: str = "") -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def host_file(self, path: Path, name: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        destination = self.root / name
        if destination.exists():
            raise FileExistsError(f"refusing to overwrite hosted file: {destination}")
        shutil.move(str(path), str(destination))
        logger.info("hosted %s at %s", name, destination)
        return self.file_url(name)

    def file_url(self, name: str) -> str:
        return f"{self.base_url}/{quote(name)}"
