"""Store subsystem exceptions."""


class StoreError(Exception):
    """Base class for store errors."""


class StepNotFoundError(StoreError):
    """No test step exists for the requested id."""


class TestResultNotFoundError(StoreError):
    """No test result exists for the requested id."""

    __test__ = False


class StoreFormatError(StoreError):
    """A stored test result could not be parsed."""
