"""Exception types raised by the retrieval pipeline and the CLI helpers."""

from __future__ import annotations


class SedaError(Exception):
    """Base exception for all seda errors."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidReference(SedaError):
    """Raised when a reference string is not a supported repository URL."""


class RemoteUnreachable(SedaError):
    """Raised when the remote ref listing cannot be obtained."""


class MalformedRefLine(SedaError):
    """Raised when a line of the remote ref listing cannot be decomposed."""

    def __init__(self, line: str):
        super().__init__(f"Malformed ref line: {line!r}")
        self.line = line


class NoDefaultBranch(SedaError):
    """Raised when the remote does not advertise a HEAD ref."""


class RefNotFound(SedaError):
    """Raised when a selector matches no branch, tag or commit."""

    def __init__(self, selector: str):
        super().__init__(f"Could not find ref: {selector}")
        self.selector = selector


class DownloadFailed(SedaError):
    """Raised when the archive download fails.

    ``status_code`` is None when the failure happened below HTTP
    (connection reset, disk full, ...).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RedirectWithoutLocation(SedaError):
    """Raised on a 3xx response that carries no Location header."""


class TooManyRedirects(SedaError):
    """Raised when a redirect chain exceeds the configured hop limit."""


class DownloadTimeout(SedaError):
    """Raised when the archive server does not respond in time."""


class ExtractionFailed(SedaError):
    """Raised on a corrupt or unreadable archive."""


class DestinationNotEmpty(SedaError):
    """Raised when extracting into a non-empty directory without force."""


class CloneFailed(SedaError):
    """Raised when ``git clone`` fails for every URL form tried."""


class EditorLaunchFailed(SedaError):
    """Raised when the configured editor command cannot be started."""
