"""Environment-driven settings for the diff engine and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import Mapping

from steppack.core.types import DEFAULT_TRACKED_FIELDS, OPERATION_FIELDS

SCREENSHOT_DIR_ENV_VAR = "STEPKIT_SCREENSHOT_DIR"
STATIC_DIR_ENV_VAR = "STEPKIT_STATIC_DIR"
STATIC_URL_ENV_VAR = "STEPKIT_STATIC_URL"
IMAGE_KEY_ENV_VAR = "STEPKIT_IMAGE_KEY"
TRACKED_FIELDS_ENV_VAR = "STEPKIT_TRACKED_FIELDS"
LOG_LEVEL_ENV_VAR = "STEPKIT_LOG_LEVEL"

DEFAULT_IMAGE_KEY = "screenshot"
SCREENSHOT_PARAM_ALIASES: tuple[str, ...] = ("screenshot", "image")


class SettingsError(ValueError):
    """Raised when settings are invalid."""


@dataclass(slots=True)
class DiffSettings:
    """Settings shared by the step comparator and the session orchestrator."""

    screenshot_root: Path = Path("public")
    static_dir: Path = Path("public/diffs")
    static_url: str = "/diffs"
    image_key: str = DEFAULT_IMAGE_KEY
    tracked_fields: tuple[str, ...] = field(default_factory=lambda: DEFAULT_TRACKED_FIELDS)
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.screenshot_root = Path(self.screenshot_root)
        self.static_dir = Path(self.static_dir)
        self.image_key = self.image_key.strip()
        if not self.image_key:
            raise SettingsError("image_key must be a non-empty string")
        if self.image_key in OPERATION_FIELDS:
            raise SettingsError(f"image_key collides with an operation field: {self.image_key}")

        self.tracked_fields = tuple(self.tracked_fields)
        unknown = [name for name in self.tracked_fields if name not in OPERATION_FIELDS]
        if unknown:
            raise SettingsError(f"Unknown tracked field(s): {', '.join(unknown)}")

        self.log_level = self.log_level.strip().upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise SettingsError(f"Unknown log level: {self.log_level}")

    def screenshot_param_names(self) -> frozenset[str]:
        """Exclusion names that turn off screenshot comparison."""
        return frozenset((*SCREENSHOT_PARAM_ALIASES, self.image_key))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DiffSettings":
        env = os.environ if environ is None else environ
        defaults = cls()

        tracked = _split_names(env.get(TRACKED_FIELDS_ENV_VAR))
        return cls(
            screenshot_root=Path(env.get(SCREENSHOT_DIR_ENV_VAR) or defaults.screenshot_root),
            static_dir=Path(env.get(STATIC_DIR_ENV_VAR) or defaults.static_dir),
            static_url=env.get(STATIC_URL_ENV_VAR) or defaults.static_url,
            image_key=env.get(IMAGE_KEY_ENV_VAR) or defaults.image_key,
            tracked_fields=tracked or defaults.tracked_fields,
            log_level=env.get(LOG_LEVEL_ENV_VAR) or defaults.log_level,
        )


def _split_names(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(name.strip() for name in raw.split(",") if name.strip())
