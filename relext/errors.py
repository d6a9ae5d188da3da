"""Exceptions raised or delivered by the extraction client.

Only :class:`UsageError` is ever raised out of :func:`relext.extract`.
Every other failure is handed to the completion callback.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for all errors produced by this package."""


class UsageError(ExtractionError, TypeError):
    """The call itself was malformed (argument count, types, or missing text)."""


class ConfigurationError(ExtractionError):
    """No usable service credentials could be found."""


class ProtocolError(ExtractionError):
    """The service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str | None = None):
        self.status_code = status_code
        self.reason = reason or str(status_code)
        super().__init__(f"Received {self.reason} from server")


class DocumentParseError(ExtractionError):
    """The service returned a document that could not be parsed."""


class DocumentIntegrityError(DocumentParseError):
    """The document references an entity or mention id it never defines."""
