"""Type definitions for recorded operation fields."""

from typing import Literal

OperationFieldName = Literal[
    "input",
    "type",
    "elementInfo",
    "title",
    "url",
    "imageFileUrl",
    "timestamp",
    "inputElements",
    "windowHandle",
    "keywordTexts",
    "screenElements",
    "scrollPosition",
    "clientSize",
]

OPERATION_FIELDS: tuple[str, ...] = (
    "input",
    "type",
    "elementInfo",
    "title",
    "url",
    "imageFileUrl",
    "timestamp",
    "inputElements",
    "windowHandle",
    "keywordTexts",
    "screenElements",
    "scrollPosition",
    "clientSize",
)

DEFAULT_TRACKED_FIELDS: tuple[str, ...] = (
    "input",
    "type",
    "elementInfo",
    "title",
    "url",
    "windowHandle",
    "keywordTexts",
    "screenElements",
)
