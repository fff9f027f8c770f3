"""Core models and canonical primitives for recorded sessions."""

from steppack.core.canonical import MISSING, canonical_text, to_jsonable
from steppack.core.models import ElementInfo, Operation, ScreenElement, TestResult, TestStep
from steppack.core.types import DEFAULT_TRACKED_FIELDS, OPERATION_FIELDS, OperationFieldName

__all__ = [
    "DEFAULT_TRACKED_FIELDS",
    "ElementInfo",
    "MISSING",
    "OPERATION_FIELDS",
    "Operation",
    "OperationFieldName",
    "ScreenElement",
    "TestResult",
    "TestStep",
    "canonical_text",
    "to_jsonable",
]
