"""Blob store (object storage) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_BLOB_BASE_URL = "https://storage.googleapis.com"
BLOB_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class BlobStoreConfig:
    bucket: str
    access_token: str
    base_url: str
    resilience: ResilienceConfig

    def public_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{self.bucket}/{path.lstrip('/')}"


def get_blob_store_config(*, resilience: ResilienceConfig | None = None) -> BlobStoreConfig:
    values = require_env_vars(("BLOB_BUCKET", "BLOB_ACCESS_TOKEN"))
    base_url = optional_env_var("BLOB_BASE_URL", DEFAULT_BLOB_BASE_URL) or DEFAULT_BLOB_BASE_URL
    return BlobStoreConfig(
        bucket=values["BLOB_BUCKET"],
        access_token=values["BLOB_ACCESS_TOKEN"],
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="blob-store",
            base_url=base_url,
            timeout_seconds=BLOB_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
            cache=None,
        ),
    )
