"""StepDiff internals: recorded-session models, diff engine, and collaborators."""

__version__ = "0.1.0"
