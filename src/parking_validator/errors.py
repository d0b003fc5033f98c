# src/parking_validator/errors.py
"""
Fatal errors for a validation run.

Issues, fixes and recommendations found while processing are plain data
on the results. Only the conditions below abort a run.
"""

from __future__ import annotations

from typing import List, Optional


class ValidatorError(Exception):
    """Base class for every error that aborts a validation run."""

    exit_code = 1


class IoError(ValidatorError):
    """Dataset, backup or report file is missing, unreadable or unwritable."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ParseError(ValidatorError):
    """Dataset bytes are not valid JSON."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class SchemaError(ValidatorError):
    """Required top-level shape is missing (``locations`` list, ``statistics`` object)."""

    def __init__(self, problems: List[str]):
        super().__init__(
            "Data structure validation failed:\n" + "\n".join(problems)
        )
        self.problems = list(problems)


class ProcessingTimeoutError(ValidatorError):
    """Processing ran past the configured time budget."""

    def __init__(self, elapsed_ms: float, limit_ms: int):
        super().__init__(
            f"Processing timeout exceeded: {elapsed_ms:.0f}ms > {limit_ms}ms"
        )
        self.elapsed_ms = elapsed_ms
        self.limit_ms = limit_ms
