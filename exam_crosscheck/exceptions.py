"""
Exception hierarchy for the cross-check package.

Reconciliation itself never raises: disagreements are data (ledger entries),
not errors.  These exceptions cover the edges around it, where a bad
environment variable or an unreadable input file should fail loudly.
"""

from __future__ import annotations


class CrossCheckError(Exception):
    """Base exception for all cross-check failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(CrossCheckError):
    """An environment setting could not be parsed or is out of range."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("CONFIG_INVALID", message, details)


class ExtractionLoadError(CrossCheckError):
    """A provider extraction file is unreadable or not a JSON object."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("EXTRACTION_LOAD_FAILED", message, details)
