from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from pmdadmin.adapters.gcs import GcsBlobStore
from pmdadmin.adapters.http_resilience import ResilientClient
from pmdadmin.config import BlobStoreConfig, ResilienceConfig, get_blob_store_config
from pmdadmin.domain.errors import BlobStoreError


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


@pytest.fixture
def blob_config(monkeypatch: pytest.MonkeyPatch) -> BlobStoreConfig:
    monkeypatch.setenv("BLOB_BUCKET", "pmd-bucket")
    monkeypatch.setenv("BLOB_ACCESS_TOKEN", "ya29.token")
    monkeypatch.delenv("BLOB_BASE_URL", raising=False)
    return get_blob_store_config()


def test_put_object_uploads_media_and_returns_public_url(blob_config: BlobStoreConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "documents/1_a.pdf"})

    store = GcsBlobStore(blob_config, client_factory=_make_client_factory(handler))
    url = asyncio.run(store.put_object("documents/1_a.pdf", b"%PDF", "application/pdf"))

    assert url == "https://storage.googleapis.com/pmd-bucket/documents/1_a.pdf"
    (request,) = seen
    assert request.method == "POST"
    assert request.url.path == "/upload/storage/v1/b/pmd-bucket/o"
    assert request.url.params["uploadType"] == "media"
    assert request.url.params["name"] == "documents/1_a.pdf"
    assert request.headers["Authorization"] == "Bearer ya29.token"
    assert request.headers["Content-Type"] == "application/pdf"
    assert request.content == b"%PDF"


@pytest.mark.parametrize("status", [401, 403, 500])
def test_put_object_http_errors(blob_config: BlobStoreConfig, status: int) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="denied")

    store = GcsBlobStore(blob_config, client_factory=_make_client_factory(handler))

    with pytest.raises(BlobStoreError, match=str(status)):
        asyncio.run(store.put_object("gallery/1_a.jpg", b"img", "image/jpeg"))


def test_put_object_transport_error(blob_config: BlobStoreConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    store = GcsBlobStore(blob_config, client_factory=_make_client_factory(handler))

    with pytest.raises(BlobStoreError):
        asyncio.run(store.put_object("gallery/1_a.jpg", b"img", "image/jpeg"))
