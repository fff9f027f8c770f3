"""Byte- and pixel-level comparison of PNG screenshots."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
import io
import logging
from pathlib import Path

from PIL import Image, ImageChops, UnidentifiedImageError

from steppack.diff.exceptions import ImageComparisonError

logger = logging.getLogger(__name__)

PNG_EXTENSION = ".png"

_DIFF_COLOR = (255, 0, 0)
_FADE_ALPHA = 0.1
_PAD_COLOR = (0, 0, 0, 0)


@dataclass(frozen=True, slots=True)
class ImageDifference:
    """Summary of a rendered pixel diff."""

    output_path: str
    width: int
    height: int
    changed_pixels: int
    dimensions_match: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "output_path": self.output_path,
            "width": self.width,
            "height": self.height,
            "changed_pixels": self.changed_pixels,
            "dimensions_match": self.dimensions_match,
        }


def is_png_reference(reference: str | None) -> bool:
    return bool(reference) and reference.endswith(PNG_EXTENSION)


class PNGImageComparison:
    """Compare two PNG files.

    Call ``load`` first, then ``has_difference``; ``extract_difference`` renders
    the pixel diff when the bytes differ.
    """

    def __init__(self) -> None:
        self._base: bytes | None = None
        self._target: bytes | None = None

    def load(self, base_path: str | Path, target_path: str | Path) -> "PNGImageComparison":
        self._base = _read_image_bytes(base_path)
        self._target = _read_image_bytes(target_path)
        return self

    def has_difference(self) -> bool:
        if self._base is None or self._target is None:
            raise ImageComparisonError("images must be loaded before comparison")
        return self._base != self._target

    def extract_difference(self, output_path: str | Path) -> ImageDifference | None:
        """Write a visualization of differing pixels to ``output_path``.

        Every pixel with any channel delta is drawn in red over a faded
        grayscale copy of the base image. Images of different sizes are padded
        to the larger size, so the non-overlapping area counts as changed.
        Returns ``None`` if the images were not loaded or cannot be decoded.
        """
        if self._base is None or self._target is None:
            logger.error("extract_difference called before images were loaded")
            return None

        try:
            base = _decode_rgba(self._base)
            target = _decode_rgba(self._target)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
            logger.exception("failed to decode screenshot for pixel diff")
            return None

        dimensions_match = base.size == target.size
        overlap = (min(base.width, target.width), min(base.height, target.height))
        if not dimensions_match:
            logger.warning(
                "screenshot dimensions differ: %sx%s vs %sx%s",
                base.width,
                base.height,
                target.width,
                target.height,
            )
            size = (max(base.width, target.width), max(base.height, target.height))
            base = _pad(base, size)
            target = _pad(target, size)

        mask = _difference_mask(base, target)
        if not dimensions_match:
            outside = Image.new("L", base.size, 255)
            outside.paste(0, (0, 0, overlap[0], overlap[1]))
            mask = ImageChops.lighter(mask, outside)
        visualization = _render_visualization(base, mask)

        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        visualization.save(output, format="PNG")

        return ImageDifference(
            output_path=str(output),
            width=base.width,
            height=base.height,
            changed_pixels=mask.histogram()[255],
            dimensions_match=dimensions_match,
        )


def compare_image_files(
    base_path: str | Path,
    target_path: str | Path,
    output_path: str | Path,
) -> ImageDifference | None:
    """Load two PNG files and render their diff if the bytes differ."""
    comparison = PNGImageComparison().load(base_path, target_path)
    if not comparison.has_difference():
        return None
    return comparison.extract_difference(output_path)


def _read_image_bytes(path: str | Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError:
        logger.error("unreadable screenshot file: %s", path)
        raise


def _decode_rgba(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as image:
        return image.convert("RGBA")


def _pad(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    if image.size == size:
        return image
    padded = Image.new("RGBA", size, _PAD_COLOR)
    padded.paste(image, (0, 0))
    return padded


def _difference_mask(base: Image.Image, target: Image.Image) -> Image.Image:
    delta = ImageChops.difference(base, target)
    bands = [band.point(lambda value: 255 if value else 0) for band in delta.split()]
    return reduce(ImageChops.lighter, bands)


def _render_visualization(base: Image.Image, mask: Image.Image) -> Image.Image:
    gray = base.convert("L").convert("RGB")
    white = Image.new("RGB", base.size, (255, 255, 255))
    canvas = Image.blend(white, gray, _FADE_ALPHA)
    canvas.paste(Image.new("RGB", base.size, _DIFF_COLOR), (0, 0), mask)
    return canvas
