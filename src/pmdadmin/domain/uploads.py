"""Upload and delete flows for documents and gallery images.

Two write paths exist. ``BlobUploader`` stores the payload in object storage and
records its metadata in the record store; ``CatalogUploader`` hands the payload
(or an external URL) to the spreadsheet-backed catalog. Both validate the
request before touching the network.
"""

from __future__ import annotations

import base64
import logging
import re
import secrets
import string
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

from pmdadmin.domain.errors import CatalogWriteError, UploadTooLargeError, UploadValidationError
from pmdadmin.domain.model import UNTITLED, Collection, SourceKind
from pmdadmin.domain.ports import CatalogUpload

if TYPE_CHECKING:
    from pmdadmin.domain.model import CatalogEntry
    from pmdadmin.domain.ports import BlobStore, CatalogWriteResult, RecordStore, RemoteCatalog

log = logging.getLogger(__name__)

MIB: Final = 1024 * 1024
DEFAULT_UPLOADER: Final = "admin@pmd.com"

_BASE36: Final = string.digits + string.ascii_lowercase
_MIME_SUBTYPE: Final = re.compile(r"/([a-z0-9]+)$")


class UploadKind(Enum):
    DOCUMENT = ("documents", Collection.DOCUMENTS, 10 * MIB, "application/pdf")
    IMAGE = ("gallery", Collection.GALLERY, 5 * MIB, "image/jpeg")

    def __init__(
        self, prefix: str, collection: Collection, max_bytes: int, default_mime: str
    ) -> None:
        self.prefix = prefix
        self.collection = collection
        self.max_bytes = max_bytes
        self.default_mime = default_mime


@dataclass(frozen=True, slots=True, kw_only=True)
class UploadRequest:
    title: str
    data: bytes
    mime_type: str | None = None
    category: str = ""
    description: str = ""
    uploaded_by: str = DEFAULT_UPLOADER


@dataclass(frozen=True, slots=True)
class StoredUpload:
    file_id: str
    url: str
    storage_path: str


def validate_upload(kind: UploadKind, request: UploadRequest) -> None:
    if not request.title.strip():
        raise UploadValidationError("Title is required")
    if not request.data:
        raise UploadValidationError("File content is empty")
    if len(request.data) > kind.max_bytes:
        raise UploadTooLargeError(len(request.data), kind.max_bytes)


def extension_for_mime(mime_type: str | None) -> str:
    mime = (mime_type or "").lower()
    if "pdf" in mime:
        return "pdf"
    # OOXML spreadsheet and presentation types also contain "document"
    if "excel" in mime or "spreadsheet" in mime:
        return "xlsx"
    if "powerpoint" in mime or "presentation" in mime:
        return "pptx"
    if "word" in mime or "document" in mime:
        return "docx"
    if "image" in mime:
        if "png" in mime:
            return "png"
        if "jpeg" in mime or "jpg" in mime:
            return "jpg"
        return "img"
    match = _MIME_SUBTYPE.search(mime)
    return match.group(1) if match else "bin"


def _random_token() -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(7))


def new_file_id(
    *,
    clock: Callable[[], float] = time.time,
    token: Callable[[], str] = _random_token,
) -> str:
    """``<epoch milliseconds>_<7 base36 chars>``."""
    return f"{int(clock() * 1000)}_{token()}"


@dataclass(slots=True)
class BlobUploader:
    record_store: RecordStore
    blob_store: BlobStore
    file_ids: Callable[[], str] = new_file_id

    async def upload(self, kind: UploadKind, request: UploadRequest) -> StoredUpload:
        validate_upload(kind, request)
        mime_type = request.mime_type or kind.default_mime
        file_id = self.file_ids()
        path = f"{kind.prefix}/{file_id}.{extension_for_mime(mime_type)}"

        url = await self.blob_store.put_object(path, request.data, mime_type)
        log.info("Stored %s upload at %s", kind.name.lower(), path)

        # the blob stays in place if this fails; the error still reaches the caller
        self.record_store.create(
            kind.collection,
            {
                "title": request.title.strip() or UNTITLED,
                "url": url,
                "category": request.category,
                "description": request.description,
                "uploadedBy": request.uploaded_by or DEFAULT_UPLOADER,
                "storagePath": path,
                "fileType": mime_type,
            },
            record_id=file_id,
        )
        return StoredUpload(file_id=file_id, url=url, storage_path=path)


@dataclass(slots=True)
class CatalogUploader:
    catalog: RemoteCatalog

    async def upload(self, kind: UploadKind, request: UploadRequest) -> CatalogWriteResult:
        validate_upload(kind, request)
        upload = CatalogUpload(
            title=request.title.strip(),
            uploaded_by=request.uploaded_by or DEFAULT_UPLOADER,
            category=request.category,
            description=request.description,
            file_base64=base64.b64encode(request.data).decode("ascii"),
            mime_type=request.mime_type or kind.default_mime,
        )
        return await self._send(upload)

    async def register_url(
        self,
        title: str,
        url: str,
        *,
        category: str = "",
        description: str = "",
        uploaded_by: str = DEFAULT_UPLOADER,
    ) -> CatalogWriteResult:
        if not title.strip():
            raise UploadValidationError("Title is required")
        if not url.strip():
            raise UploadValidationError("URL is required")
        upload = CatalogUpload(
            title=title.strip(),
            uploaded_by=uploaded_by or DEFAULT_UPLOADER,
            category=category,
            description=description,
            external_url=url.strip(),
        )
        return await self._send(upload)

    async def _send(self, upload: CatalogUpload) -> CatalogWriteResult:
        result = await self.catalog.upload(upload)
        if not result.success:
            raise CatalogWriteError(result.message or "Upload failed")
        return result


async def delete_catalog_entry(
    catalog: RemoteCatalog,
    record_store: RecordStore,
    collection: str,
    entry: CatalogEntry,
    *,
    uploaded_by: str | None = None,
) -> None:
    """Delete ``entry`` from whichever backend it was read from."""

    if entry.source is SourceKind.STORE and entry.record_id:
        record_store.delete(collection, entry.record_id)
        log.info("Deleted %s from %s", entry.record_id, collection)
        return
    result = await catalog.delete(
        entry.title, file_id=entry.source_file_id, uploaded_by=uploaded_by
    )
    if not result.success:
        raise CatalogWriteError(result.message or "Delete failed")
    log.info("Deleted catalog entry %r", entry.title)
