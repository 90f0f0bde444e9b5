"""Configuration for registry catalog synchronisation.

Usage
-----
Create a configuration with defaults:

>>> config = CatalogSyncConfig()
>>> config.page_size
100

Or load from environment variables:

>>> import os
>>> os.environ["QUAYSIDE_CATALOG_PAGE_SIZE"] = "50"
>>> CatalogSyncConfig.from_env().page_size
50

"""

from __future__ import annotations

import dataclasses as dc
import os

_SCHEMES = frozenset({"http", "https"})


@dc.dataclass(frozen=True, slots=True)
class CatalogSyncConfig:
    """Settings for talking to a registry's v2 catalog API.

    Attributes
    ----------
    scheme
        URL scheme used to reach registries, ``https`` unless a registry is
        served over plain HTTP.
    username, password
        Optional basic-auth credentials sent with every request.
    page_size
        ``n`` parameter for ``/v2/_catalog`` pagination.
    timeout_s
        HTTP timeout in seconds.

    """

    scheme: str = "https"
    username: str | None = None
    password: str | None = None
    page_size: int = 100
    timeout_s: float = 20.0
    user_agent: str = "quayside/0.1"

    @property
    def auth(self) -> tuple[str, str] | None:
        """Return basic-auth credentials when a username is configured."""
        if self.username is None:
            return None
        return (self.username, self.password or "")

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> CatalogSyncConfig:
        """Create configuration from ``QUAYSIDE_*`` environment variables.

        Raises
        ------
        ValueError
            If the scheme is not ``http`` or ``https``, or a numeric setting
            is not a positive integer.

        """
        scheme = os.environ.get("QUAYSIDE_REGISTRY_SCHEME", "").strip().lower()
        scheme = scheme or "https"
        if scheme not in _SCHEMES:
            msg = f"QUAYSIDE_REGISTRY_SCHEME must be http or https, got: {scheme!r}"
            raise ValueError(msg)

        username = os.environ.get("QUAYSIDE_REGISTRY_USERNAME", "").strip() or None
        password = os.environ.get("QUAYSIDE_REGISTRY_PASSWORD") or None

        return cls(
            scheme=scheme,
            username=username,
            password=password,
            page_size=cls._parse_positive_int("QUAYSIDE_CATALOG_PAGE_SIZE", 100),
            timeout_s=float(
                cls._parse_positive_int("QUAYSIDE_CATALOG_TIMEOUT_S", 20)
            ),
        )
