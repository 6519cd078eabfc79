"""Remote catalog (spreadsheet script) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig

CATALOG_TIMEOUT_SECONDS = 30.0
DEFAULT_DOCUMENTS_GET_ACTION = "getDocuments"
PLACEHOLDER_TOKEN = "CHANGE_THIS_IN_PRODUCTION"  # noqa: S105


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Connection settings for one spreadsheet-script deployment."""

    name: str
    url: str
    token: str
    get_action: str | None
    resilience: ResilienceConfig


def _catalog_resilience(name: str) -> ResilienceConfig:
    # script deployments answer with a redirect to the content host
    return ResilienceConfig(
        name=name,
        timeout_seconds=CATALOG_TIMEOUT_SECONDS,
        retry=NO_RETRY,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        cache=None,
        default_headers={"Accept": "application/json"},
        follow_redirects=True,
    )


def _checked_token(value: str) -> str:
    if value == PLACEHOLDER_TOKEN:
        raise ConfigurationError("APPS_SCRIPT_SECRET_TOKEN still holds the placeholder value")
    return value


def get_documents_catalog_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> CatalogConfig:
    values = require_env_vars(("DOCUMENTS_API_URL", "APPS_SCRIPT_SECRET_TOKEN"))
    return CatalogConfig(
        name="documents",
        url=values["DOCUMENTS_API_URL"],
        token=_checked_token(values["APPS_SCRIPT_SECRET_TOKEN"]),
        get_action=optional_env_var("DOCUMENTS_GET_ACTION", DEFAULT_DOCUMENTS_GET_ACTION),
        resilience=resilience or _catalog_resilience("documents-catalog"),
    )


def get_gallery_catalog_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> CatalogConfig:
    values = require_env_vars(("GALLERY_API_URL", "APPS_SCRIPT_SECRET_TOKEN"))
    return CatalogConfig(
        name="gallery",
        url=values["GALLERY_API_URL"],
        token=_checked_token(values["APPS_SCRIPT_SECRET_TOKEN"]),
        get_action=optional_env_var("GALLERY_GET_ACTION"),
        resilience=resilience or _catalog_resilience("gallery-catalog"),
    )


def _is_listing_payload(payload: object) -> bool:
    """Only successful listings are cached; error objects are not."""
    return isinstance(payload, list) or (isinstance(payload, dict) and "error" not in payload)


def with_listing_cache(config: CatalogConfig, ttl_seconds: float) -> CatalogConfig:
    """Return ``config`` with a time-boxed on-disk cache for listing reads."""

    cache = CacheConfig(
        backend="sqlite",
        default_ttl_seconds=ttl_seconds,
        refresh_ttl_on_access=False,
        should_cache=_is_listing_payload,
    )
    return replace(config, resilience=replace(config.resilience, cache=cache))
