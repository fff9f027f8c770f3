"""Collaborators for reading recorded sessions and hosting diff output."""

from steppack.store.base import StaticDirectory, TestResultLookup, Workspace
from steppack.store.exceptions import (
    StepNotFoundError,
    StoreError,
    StoreFormatError,
    TestResultNotFoundError,
)
from steppack.store.json_store import JsonTestResultStore, read_test_result, write_test_result
from steppack.store.memory import InMemoryTestResultStore
from steppack.store.static import LocalStaticDirectory
from steppack.store.workspace import TemporaryWorkspace

__all__ = [
    "InMemoryTestResultStore",
    "JsonTestResultStore",
    "LocalStaticDirectory",
    "StaticDirectory",
    "StepNotFoundError",
    "StoreError",
    "StoreFormatError",
    "TemporaryWorkspace",
    "TestResultLookup",
    "TestResultNotFoundError",
    "Workspace",
    "read_test_result",
    "write_test_result",
]
