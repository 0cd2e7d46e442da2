"""Custom exceptions for ionipy."""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for chemistry-related errors."""
    pass


class PatternError(ChemError):
    """SMARTS pattern could not be compiled."""

    def __init__(self, message: str, smarts: str | None = None):
        self.message = message
        self.smarts = smarts

        if smarts is not None:
            super().__init__(f"{message}: {smarts!r}")
        else:
            super().__init__(message)


class CatalogError(ChemError):
    """Acid/base catalog could not be built."""

    def __init__(self, message: str, source: str | None = None, line: int | None = None):
        self.message = message
        self.source = source
        self.line = line

        if source is not None and line is not None:
            super().__init__(f"{message} ({source}, line {line})")
        elif source is not None:
            super().__init__(f"{message} ({source})")
        else:
            super().__init__(message)
