"""Diff subsystem exceptions."""


class DiffError(Exception):
    """Base class for diff errors."""


class DiffConfigError(DiffError):
    """Invalid comparison configuration."""


class ImageComparisonError(DiffError):
    """Image comparison used before both images were loaded."""


class DiffPackagingError(DiffError):
    """Writing, archiving or hosting the diff evidence failed."""
