"""Exception hierarchy for manifest reading, inspection and graph construction."""

from __future__ import annotations


class ScannerError(Exception):
    """Base class for every error raised by wcm-scanner."""
    pass


class ConfigurationError(ScannerError, ValueError):
    """Raised for invalid configuration, before any I/O happens."""
    pass


class NotFoundError(ScannerError, FileNotFoundError):
    """Raised when a manifest, dependency folder or source file is missing."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ParseError(ScannerError, ValueError):
    """Raised for malformed manifest JSON or undecodable markup."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class UnresolvedVersionError(ScannerError):
    """Raised in strict mode when a manifest has no recognized version field."""
    pass


class GraphStateError(ScannerError, RuntimeError):
    """Raised when a graph builder phase is invoked out of order."""
    pass
