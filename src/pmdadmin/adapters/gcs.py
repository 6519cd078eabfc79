"""Object storage adapter for the Cloud Storage JSON API (media uploads)."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from pmdadmin.adapters.http_resilience import ResilientClient
from pmdadmin.domain.errors import BlobStoreError

if TYPE_CHECKING:
    from collections.abc import Callable

    from pmdadmin.config.blob import BlobStoreConfig
    from pmdadmin.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class GcsBlobStore:
    config: BlobStoreConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def put_object(self, path: str, data: bytes, content_type: str) -> str:
        base = self.config.base_url.rstrip("/")
        upload_url = f"{base}/upload/storage/v1/b/{self.config.bucket}/o"
        params = httpx.QueryParams({"uploadType": "media", "name": path})
        headers = {
            "Authorization": f"Bearer {self.config.access_token}",
            "Content-Type": content_type,
        }
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.post(
                    upload_url, params=params, content=data, headers=headers
                )
        except httpx.HTTPError as exc:
            raise BlobStoreError(f"Upload of {path} failed: {exc}") from exc

        if not response.is_success:
            raise BlobStoreError(
                f"Upload of {path} failed: HTTP {response.status_code} {response.text[:200]}"
            )
        url = self.config.public_url(path)
        log.debug(f"Uploaded {len(data)} bytes to {url}")
        return url
