"""Error types raised by the reporter.

Only :class:`ConfigurationError` is allowed to escape to callers. The
others mark the single operation they occurred in as failed and are
reported through logging.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for reporter errors."""


class ConfigurationError(ReportError):
    """The reporter cannot start with the given configuration."""


class TransportError(ReportError):
    """A delivery failed before a complete response was received."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class ResponseParseError(ReportError):
    """A sent body or a response body is not a JSON object."""


class EventHandlingError(ReportError):
    """Filtering, serializing or dispatching a single event failed."""
