"""Errors raised by registry state management."""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for registry state errors."""


class RegistryNotFoundError(RegistryError):
    """Raised when no registry is known for a hostname."""

    def __init__(self, hostname: str) -> None:
        """Record the missing hostname."""
        self.hostname = hostname
        super().__init__(f"Registry not found: {hostname}")


class ReservedNamespaceError(RegistryError):
    """Raised when a named namespace would shadow the global namespace."""

    def __init__(self, hostname: str, name: str) -> None:
        """Record the registry and the rejected namespace name."""
        self.hostname = hostname
        self.name = name
        super().__init__(
            f"Namespace name {name!r} is reserved for the global namespace of "
            f"{hostname}"
        )


class ConcurrentWriteError(RegistryError):
    """Raised when a create conflicts but no winning row can be found."""

    def __init__(self, table: str) -> None:
        """Include the table name for diagnostics."""
        self.table = table
        super().__init__(f"expected existing {table} row after unique conflict")


class GlobalNamespaceMissingError(RegistryError):
    """Raised when a registry row exists without its global namespace."""

    def __init__(self, hostname: str) -> None:
        """Record the registry whose global namespace is missing."""
        self.hostname = hostname
        super().__init__(f"Registry {hostname} has no global namespace")
