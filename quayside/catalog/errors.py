"""Registry catalog API errors."""

from __future__ import annotations


class RegistryAPIError(RuntimeError):
    """Raised when a registry returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, url: str) -> RegistryAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"Registry API HTTP {status_code} for {url}", status_code=status_code)


class RegistryResponseShapeError(RuntimeError):
    """Raised when a registry response body cannot be decoded."""

    @classmethod
    def invalid(cls, url: str, detail: str) -> RegistryResponseShapeError:
        """Return an error describing the undecodable response."""
        return cls(f"Unexpected registry response from {url}: {detail}")
