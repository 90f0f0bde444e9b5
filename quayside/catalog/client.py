"""HTTP client for the registry v2 catalog API."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from .errors import RegistryAPIError, RegistryResponseShapeError

if typ.TYPE_CHECKING:
    from .config import CatalogSyncConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_NOT_FOUND = 404


class RepositoryDescriptor(msgspec.Struct, frozen=True):
    """Repository name plus every tag that currently exists upstream.

    This is the body of ``GET /v2/<name>/tags/list``; registries answer
    ``"tags": null`` for repositories whose tags were all deleted.
    """

    name: str
    tags: list[str] | None = None

    @property
    def tag_names(self) -> list[str]:
        """Return the tag list, treating ``null`` as empty."""
        return self.tags or []


class _CatalogPage(msgspec.Struct, frozen=True):
    repositories: list[str] | None = None


class RegistryCatalogClient:
    """List repositories and tags exposed by one registry host."""

    def __init__(
        self,
        hostname: str,
        config: CatalogSyncConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client for ``hostname``."""
        self._base_url = httpx.URL(f"{config.scheme}://{hostname}")
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            auth=config.auth,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def iter_repositories(self) -> typ.AsyncIterator[str]:
        """Yield every repository name, following ``Link`` pagination."""
        url: httpx.URL | None = self._base_url.join("/v2/_catalog").copy_merge_params(
            {"n": self._config.page_size}
        )
        while url is not None:
            response = await self._get(url)
            page = self._decode(response, _CatalogPage)
            for name in page.repositories or ():
                yield name

            next_link = response.links.get("next", {}).get("url")
            url = response.url.join(next_link) if next_link else None

    async def list_tags(self, repository: str) -> RepositoryDescriptor:
        """Return the tags of ``repository``; unknown repositories have none."""
        url = self._base_url.join(f"/v2/{repository}/tags/list")
        response = await self._get(url, allow_not_found=True)
        if response.status_code == _HTTP_NOT_FOUND:
            return RepositoryDescriptor(name=repository, tags=[])
        return self._decode(response, RepositoryDescriptor)

    async def _get(
        self, url: httpx.URL, *, allow_not_found: bool = False
    ) -> httpx.Response:
        response = await self._client.get(url)
        if allow_not_found and response.status_code == _HTTP_NOT_FOUND:
            return response
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise RegistryAPIError.http_error(response.status_code, str(url))
        return response

    @staticmethod
    def _decode[StructT: msgspec.Struct](
        response: httpx.Response, struct: type[StructT]
    ) -> StructT:
        try:
            return msgspec.json.decode(response.content, type=struct)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise RegistryResponseShapeError.invalid(str(response.url), str(exc)) from exc
