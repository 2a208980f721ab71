"""File storage behind an HTTP object store."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from caseflow.adapters.http_resilience import ResilientClient
from caseflow.domain.errors import StorageReleaseError

if TYPE_CHECKING:
    from collections.abc import Callable

    from caseflow.config import HttpFileStorageConfig, ResilienceConfig

log = getLogger(__name__)


class HttpFileStorage:
    """Releases files with ``DELETE {base_url}/{file_ref}``.

    A 404 means the object is already gone and counts as released.
    """

    def __init__(
        self,
        *,
        config: HttpFileStorageConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    def release(self, file_ref: str) -> None:
        coroutine = self._release_async(file_ref)
        try:
            asyncio.run(coroutine)
        except RuntimeError as exc:
            # asyncio.run refuses to start inside a running event loop
            coroutine.close()
            raise StorageReleaseError(file_ref, str(exc)) from exc

    async def _release_async(self, file_ref: str) -> None:
        url = f"{self._config.base_url}/{quote(file_ref.lstrip('/'), safe='/')}"
        async with self._client_factory(self._config.resilience) as client:
            try:
                response = await client.delete(url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise StorageReleaseError(file_ref, str(exc)) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("File %s already gone from %s", file_ref, self._config.base_url)
            return
        if response.is_error:
            raise StorageReleaseError(
                file_ref, f"storage responded {response.status_code} {response.reason_phrase}"
            )
