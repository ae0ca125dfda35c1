"""Runtime performance governance: budget evaluation and adaptive device profiles."""

__version__ = "0.1.0"
