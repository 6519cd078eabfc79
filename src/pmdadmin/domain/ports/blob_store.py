"""Port for object storage."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStore(Protocol):
    """Store a payload under ``path`` and return its public URL."""

    async def put_object(self, path: str, data: bytes, content_type: str) -> str: ...
