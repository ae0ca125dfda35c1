"""Structured errors for budget and measurement handling."""

from __future__ import annotations
from typing import Any


class PerfGovError(Exception):
    """Base class for performance governance issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class BudgetValidationError(PerfGovError):
    """Raised when a budget threshold is missing, unknown or not a positive number."""


class PerformanceDataError(PerfGovError):
    """Raised when a measurement snapshot cannot be parsed."""
