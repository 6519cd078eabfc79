from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient

from pmdadmin.adapters.http_resilience import (
    ResilientClient,
    _build_cache_components,  # type: ignore[reportPrivateUsage]
    _ShouldCacheResponseFilter,  # type: ignore[reportPrivateUsage]
    build_retry,
)
from pmdadmin.config import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from pmdadmin.config.catalog import _is_listing_payload  # type: ignore[reportPrivateUsage]


def test_build_retry_copies_policy() -> None:
    policy = RetryPolicy(total=3, backoff_factor=0.25, allowed_methods=frozenset({"GET"}))

    retry = build_retry(policy)

    assert retry.total == 3
    assert retry.backoff_factor == 0.25


def test_default_retry_policy_does_not_repeat_posts() -> None:
    assert "POST" not in RetryPolicy().allowed_methods
    assert NO_RETRY.total == 0


def test_client_without_cache_is_plain_async_client() -> None:
    client = ResilientClient(ResilienceConfig(name="plain", cache=None))

    assert type(client._client) is httpx.AsyncClient  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    asyncio.run(client.aclose())


def test_disabled_cache_builds_nothing() -> None:
    assert _build_cache_components(None) == (None, None)
    assert _build_cache_components(CacheConfig(enabled=False)) == (None, None)


def test_sqlite_cache_uses_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PMDADMIN_DATA_DIR", str(tmp_path))

    client = ResilientClient(
        ResilienceConfig(
            name="cached",
            cache=CacheConfig(backend="sqlite", default_ttl_seconds=60, should_cache=bool),
        )
    )

    assert isinstance(client._client, AsyncCacheClient)  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    storage, policy = _build_cache_components(CacheConfig(backend="sqlite"))
    assert isinstance(storage, AsyncSqliteStorage)
    assert policy is None
    asyncio.run(client.aclose())


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (b'[{"Title": "A"}]', True),
        (b'{"data": []}', True),
        (b'{"error": "Unauthorized"}', False),
        (b"<html>login</html>", False),
        (b"\xff\xfe", False),
        (None, False),
    ],
)
def test_listing_cache_filter(body: bytes | None, *, expected: bool) -> None:
    cache_filter = _ShouldCacheResponseFilter(_is_listing_payload)

    assert cache_filter.needs_body()
    assert cache_filter.apply(object(), body) is expected  # type: ignore[arg-type]


def test_rate_limited_requests_pass_through() -> None:
    calls: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    async def run() -> list[int]:
        client = ResilientClient(
            ResilienceConfig(name="limited", ratelimit=RateLimit(max_calls=10, per_seconds=1.0))
        )
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        async with client:
            responses = [await client.get(f"https://example.test/{i}") for i in range(3)]
        return [response.status_code for response in responses]

    assert asyncio.run(run()) == [200, 200, 200]
    assert calls == ["/0", "/1", "/2"]
