"""HTTP client for the spreadsheet-script catalog deployments."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from pmdadmin.adapters.http_resilience import ResilientClient
from pmdadmin.domain.errors import CatalogUnavailableError, CatalogWriteError
from pmdadmin.domain.ports import CatalogWriteResult
from pmdadmin.domain.uploads import DEFAULT_UPLOADER

from .schema import WriteResponse, unwrap_listing

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from pmdadmin.config.catalog import CatalogConfig
    from pmdadmin.config.http_resilience import ResilienceConfig
    from pmdadmin.domain.ports import CatalogUpload

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class AppsScriptCatalog:
    """Listing, upload and delete against one script deployment.

    The script authenticates with a shared token that it accepts either as a
    query parameter or inside the JSON body; writes send both.
    """

    config: CatalogConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def fetch_records(self) -> Sequence[Mapping[str, object]]:
        params = self._params(self.config.get_action)
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.get(self.config.url, params=params)
        except httpx.HTTPError as exc:
            msg = f"{self.config.name} catalog request failed: {exc}"
            raise CatalogUnavailableError(msg) from exc

        if not response.is_success:
            raise CatalogUnavailableError(
                f"{self.config.name} catalog returned HTTP {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogUnavailableError(
                f"{self.config.name} catalog returned a non-JSON body"
            ) from exc

        if isinstance(payload, dict) and "error" in payload:
            log.warning(f"{self.config.name} catalog reported an error: {payload['error']}")
        records = unwrap_listing(payload)
        log.debug(f"Fetched {len(records)} {self.config.name} catalog record(s)")
        return records

    async def upload(self, upload: CatalogUpload) -> CatalogWriteResult:
        body: dict[str, object] = {
            "title": upload.title,
            "category": upload.category,
            "description": upload.description,
            "userEmail": upload.uploaded_by or DEFAULT_UPLOADER,
        }
        if upload.external_url is not None:
            body["externalUrl"] = upload.external_url
        else:
            body["fileBase64"] = upload.file_base64
            body["mimeType"] = upload.mime_type or "application/pdf"
        return await self._write("upload", body, lenient=False)

    async def delete(
        self,
        title: str,
        *,
        file_id: str | None = None,
        uploaded_by: str | None = None,
    ) -> CatalogWriteResult:
        body: dict[str, object] = {"title": title, "userEmail": uploaded_by or DEFAULT_UPLOADER}
        if file_id:
            body["fileId"] = file_id
        return await self._write("delete", body, lenient=True)

    async def _write(
        self, action: str, body: dict[str, object], *, lenient: bool
    ) -> CatalogWriteResult:
        # writes are never served from or stored in the listing cache
        resilience = replace(self.config.resilience, cache=None)
        payload = {"action": action, "token": self.config.token, **body}
        try:
            async with self.client_factory(resilience) as client:
                response = await client.post(
                    self.config.url, params=self._params(action), json=payload
                )
        except httpx.HTTPError as exc:
            raise CatalogWriteError(f"Failed to {action}: {exc}") from exc

        if not response.is_success:
            raise CatalogWriteError(f"Failed to {action}: HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            if lenient:
                log.info(f"{self.config.name} {action} answered without JSON; assuming success")
                return CatalogWriteResult(success=True)
            raise CatalogWriteError(f"Failed to {action}: response was not JSON") from exc

        reply = WriteResponse.model_validate(data if isinstance(data, dict) else {})
        if reply.failed:
            raise CatalogWriteError(reply.error or reply.message or f"Failed to {action}")
        return CatalogWriteResult(
            success=True, message=reply.message, url=reply.url, file_id=reply.file_id
        )

    def _params(self, action: str | None) -> httpx.QueryParams:
        params: dict[str, str] = {"token": self.config.token}
        if action:
            params = {"action": action, **params}
        return httpx.QueryParams(params)
