"""Error taxonomy for the terminology connector."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for every error raised by the connector."""


class ProviderMisconfigured(ProviderError):
    """Credentials, descriptor or session state are missing or invalid."""


class InvalidArgument(ProviderError, ValueError):
    """A caller supplied argument failed validation before any network call."""


class RepositoryUnavailable(ProviderError):
    """The repository could not be reached or answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(ProviderError):
    """The repository answered with a body that is not well-formed XML."""


class UnsupportedLogoStyle(ProviderError, ValueError):
    """The requested logo style is not one the connector ships."""


class LookupCancelled(ProviderError):
    """The caller cancelled the lookup before it completed."""
