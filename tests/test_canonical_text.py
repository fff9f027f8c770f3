import json

from steppack.core.canonical import MISSING, canonical_text, to_jsonable
from steppack.core.models import ElementInfo, ScreenElement


def test_strings_are_used_verbatim() -> None:
    assert canonical_text("") == ""
    assert canonical_text("a\r\nb") == "a\r\nb"
    assert canonical_text("null") == "null"


def test_missing_is_distinct_from_null_and_empty_string() -> None:
    assert canonical_text(MISSING) is None
    assert canonical_text(None) == "null"
    assert canonical_text("") == ""


def test_containers_serialize_as_compact_json_in_insertion_order() -> None:
    assert canonical_text([]) == "[]"
    assert canonical_text(["aaa", "bbb"]) == '["aaa","bbb"]'
    assert canonical_text({"b": 1, "a": 2}) == '{"b":1,"a":2}'
    assert canonical_text({"text": "ボタン"}) == '{"text":"ボタン"}'


def test_models_serialize_through_to_dict() -> None:
    element = ElementInfo(tagname="BUTTON", xpath="/html/body/button", text="OK")

    assert json.loads(canonical_text(element)) == element.to_dict()
    assert to_jsonable([ScreenElement(tagname="INPUT", owned_text="aaaa")]) == [
        {"tagname": "INPUT", "ownedText": "aaaa"}
    ]


def test_canonical_text_is_idempotent_for_serialized_values() -> None:
    values = [
        "plain",
        ["x", "y"],
        {"nested": {"list": [1, 2.5, True, None]}},
        ElementInfo(tagname="a", attributes={"href": "/"}),
    ]

    for value in values:
        once = canonical_text(value)
        assert canonical_text(once) == once
        assert canonical_text(value) == once
