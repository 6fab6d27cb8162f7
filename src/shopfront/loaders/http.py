"""HTTP loaders for each resource kind."""

from __future__ import annotations

from typing import Any

import httpx

from shopfront.loaders.base import Fetched, ResourceLoader
from shopfront.types import ResourceKind


class LoadError(RuntimeError):
    """The server answered, but not with a usable resource."""


class _HttpLoader:
    """Shared GET-and-check logic over an ``httpx.AsyncClient``."""

    accept = "*/*"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _get(self, url: str) -> httpx.Response:
        response = await self._client.get(url, headers={"Accept": self.accept})
        if not response.is_success:
            raise LoadError(f"HTTP {response.status_code}: {response.reason_phrase}")
        return response

    async def attempt_load(self, url: str) -> Fetched:
        response = await self._get(url)
        return Fetched(data=self._decode(response), size=len(response.content))

    def _decode(self, response: httpx.Response) -> Any:
        return response.content


class ImageLoader(_HttpLoader):
    """Fetch image bytes; anything that is not ``image/*`` is an error."""

    accept = "image/avif,image/webp,image/*,*/*;q=0.8"

    def _decode(self, response: httpx.Response) -> bytes:
        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise LoadError(f"Expected an image, got {content_type or 'no content type'}")
        return response.content


class ScriptLoader(_HttpLoader):
    accept = "application/javascript, text/javascript, */*;q=0.1"

    def _decode(self, response: httpx.Response) -> str:
        return response.text


class StyleLoader(_HttpLoader):
    accept = "text/css, */*;q=0.1"

    def _decode(self, response: httpx.Response) -> str:
        return response.text


class DataLoader(_HttpLoader):
    """Fetch and decode a JSON document."""

    accept = "application/json"

    def _decode(self, response: httpx.Response) -> Any:
        return response.json()


_LOADER_TYPES: dict[ResourceKind, type[_HttpLoader]] = {
    ResourceKind.IMAGE: ImageLoader,
    ResourceKind.SCRIPT: ScriptLoader,
    ResourceKind.STYLE: StyleLoader,
    ResourceKind.DATA: DataLoader,
}


def build_http_loaders(client: httpx.AsyncClient) -> dict[ResourceKind, ResourceLoader]:
    """One loader per resource kind, all sharing ``client``."""
    return {kind: loader_type(client) for kind, loader_type in _LOADER_TYPES.items()}
