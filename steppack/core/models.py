"""Core data models for recorded test results and steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from steppack.core.canonical import MISSING


@dataclass(slots=True)
class ElementInfo:
    """Descriptor of a DOM element captured with an operation."""

    tagname: str
    xpath: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    text: str | None = None
    value: Any = None
    checked: bool | None = None
    bounding_rect: dict[str, float] | None = None
    owned_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "tagname": self.tagname,
            "text": self.text,
            "xpath": self.xpath,
            "value": self.value,
            "checked": self.checked,
            "attributes": self.attributes,
        }
        if self.bounding_rect is not None:
            payload["boundingRect"] = dict(self.bounding_rect)
        if self.owned_text is not None:
            payload["ownedText"] = self.owned_text
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ElementInfo":
        return cls(
            tagname=_text(raw.get("tagname")),
            xpath=_text(raw.get("xpath")),
            attributes=dict(raw.get("attributes") or {}),
            text=raw.get("text"),
            value=raw.get("value"),
            checked=raw.get("checked"),
            bounding_rect=_optional_dict(raw.get("boundingRect")),
            owned_text=raw.get("ownedText"),
        )


@dataclass(slots=True)
class ScreenElement:
    """Element visible on screen when an operation was captured."""

    tagname: str
    owned_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"tagname": self.tagname, "ownedText": self.owned_text}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ScreenElement":
        return cls(tagname=_text(raw.get("tagname")), owned_text=raw.get("ownedText"))


@dataclass(slots=True)
class Operation:
    """Snapshot of one recorded UI action."""

    input: str = ""
    type: str = ""
    element_info: ElementInfo | None = None
    title: str = ""
    url: str = ""
    image_file_url: str = ""
    timestamp: str = ""
    input_elements: list[ElementInfo] = field(default_factory=list)
    window_handle: str = ""
    keyword_texts: list[str] | None = None
    screen_elements: list[ScreenElement] | None = None
    scroll_position: dict[str, float] | None = None
    client_size: dict[str, float] | None = None

    def field_value(self, name: str) -> Any:
        """Return the value stored under a wire field name.

        Optional fields that were never captured return ``MISSING``.
        """
        attribute = _FIELD_ATTRIBUTES[name]
        value = getattr(self, attribute)
        if value is None and name in _OPTIONAL_FIELDS:
            return MISSING
        return value

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "input": self.input,
            "type": self.type,
            "elementInfo": self.element_info.to_dict() if self.element_info is not None else None,
            "title": self.title,
            "url": self.url,
            "imageFileUrl": self.image_file_url,
            "timestamp": self.timestamp,
            "inputElements": [element.to_dict() for element in self.input_elements],
            "windowHandle": self.window_handle,
        }
        if self.keyword_texts is not None:
            payload["keywordTexts"] = list(self.keyword_texts)
        if self.screen_elements is not None:
            payload["screenElements"] = [element.to_dict() for element in self.screen_elements]
        if self.scroll_position is not None:
            payload["scrollPosition"] = dict(self.scroll_position)
        if self.client_size is not None:
            payload["clientSize"] = dict(self.client_size)
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Operation":
        element_info = raw.get("elementInfo")
        keyword_texts = raw.get("keywordTexts")
        screen_elements = raw.get("screenElements")
        return cls(
            input=_text(raw.get("input")),
            type=_text(raw.get("type")),
            element_info=ElementInfo.from_dict(element_info) if isinstance(element_info, dict) else None,
            title=_text(raw.get("title")),
            url=_text(raw.get("url")),
            image_file_url=_text(raw.get("imageFileUrl")),
            timestamp=_text(raw.get("timestamp")),
            input_elements=[ElementInfo.from_dict(item) for item in raw.get("inputElements") or []],
            window_handle=_text(raw.get("windowHandle")),
            keyword_texts=[str(text) for text in keyword_texts] if keyword_texts is not None else None,
            screen_elements=(
                [ScreenElement.from_dict(item) for item in screen_elements]
                if screen_elements is not None
                else None
            ),
            scroll_position=_optional_dict(raw.get("scrollPosition")),
            client_size=_optional_dict(raw.get("clientSize")),
        )


@dataclass(slots=True)
class TestStep:
    """A recorded operation plus its annotations."""

    __test__ = False

    id: str
    operation: Operation
    intention: str | None = None
    notices: list[str] = field(default_factory=list)
    bugs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "operation": self.operation.to_dict(),
            "intention": self.intention,
            "notices": list(self.notices),
            "bugs": list(self.bugs),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TestStep":
        return cls(
            id=str(raw["id"]),
            operation=Operation.from_dict(dict(raw.get("operation") or {})),
            intention=raw.get("intention"),
            notices=[str(notice) for notice in raw.get("notices") or []],
            bugs=[str(bug) for bug in raw.get("bugs") or []],
        )


@dataclass(slots=True)
class TestResult:
    """A recorded session: test steps in capture order."""

    __test__ = False

    id: str
    name: str | None = None
    test_steps: list[TestStep] = field(default_factory=list)

    def ordered_step_ids(self) -> list[str]:
        """Step ids ascending by capture timestamp."""
        ordered = sorted(self.test_steps, key=lambda step: _timestamp_sort_key(step.operation.timestamp))
        return [step.id for step in ordered]

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "testSteps": [step.to_dict() for step in self.test_steps],
        }
        if self.name is not None:
            payload["name"] = self.name
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TestResult":
        return cls(
            id=str(raw["id"]),
            name=raw.get("name"),
            test_steps=[TestStep.from_dict(step) for step in raw.get("testSteps", [])],
        )


_FIELD_ATTRIBUTES: dict[str, str] = {
    "input": "input",
    "type": "type",
    "elementInfo": "element_info",
    "title": "title",
    "url": "url",
    "imageFileUrl": "image_file_url",
    "timestamp": "timestamp",
    "inputElements": "input_elements",
    "windowHandle": "window_handle",
    "keywordTexts": "keyword_texts",
    "screenElements": "screen_elements",
    "scrollPosition": "scroll_position",
    "clientSize": "client_size",
}

_OPTIONAL_FIELDS = frozenset({"keywordTexts", "screenElements", "scrollPosition", "clientSize"})


def _timestamp_sort_key(timestamp: str) -> tuple[int, float, str]:
    try:
        return (0, float(timestamp), "")
    except ValueError:
        return (1, 0.0, timestamp)


def _optional_dict(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        return None
    return dict(value)


def _text(value: Any) -> str:
    """Wire strings; ``null`` reads as empty."""
    if value is None:
        return ""
    return str(value)
