"""Port for the spreadsheet-backed remote catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogUpload:
    """Upload action payload: either inline base64 content or an external URL."""

    title: str
    uploaded_by: str
    category: str = ""
    description: str = ""
    file_base64: str | None = None
    mime_type: str | None = None
    external_url: str | None = None

    def __post_init__(self) -> None:
        if (self.file_base64 is None) == (self.external_url is None):
            raise ValueError("exactly one of file_base64 or external_url is required")


@dataclass(frozen=True, slots=True)
class CatalogWriteResult:
    success: bool
    message: str | None = None
    url: str | None = None
    file_id: str | None = None


@runtime_checkable
class RemoteCatalog(Protocol):
    """Opaque listing/upload/delete API for documents or gallery images."""

    async def fetch_records(self) -> Sequence[Mapping[str, object]]: ...

    async def upload(self, upload: CatalogUpload) -> CatalogWriteResult: ...

    async def delete(
        self,
        title: str,
        *,
        file_id: str | None = None,
        uploaded_by: str | None = None,
    ) -> CatalogWriteResult: ...
