"""Domain error hierarchy shared by services and adapters."""

from __future__ import annotations


class PmdAdminError(RuntimeError):
    """Base class for all application-level failures."""


class RecordStoreError(PmdAdminError):
    """Raised when the record store cannot complete an operation."""


class RecordNotFoundError(RecordStoreError):
    """Raised when a record addressed by id does not exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"No record {record_id!r} in collection {collection!r}")
        self.collection = collection
        self.record_id = record_id


class UnsupportedQueryError(RecordStoreError):
    """Raised when the store cannot honour a requested filter or ordering."""


class CatalogError(PmdAdminError):
    """Base class for remote catalog failures."""


class CatalogUnavailableError(CatalogError):
    """Raised when a catalog listing cannot be fetched or decoded."""


class CatalogWriteError(CatalogError):
    """Raised when an upload or delete against the catalog fails."""


class BlobStoreError(PmdAdminError):
    """Raised when an object upload fails."""


class ValidationError(PmdAdminError, ValueError):
    """Raised before any write when input data is not acceptable."""


class RankValidationError(ValidationError):
    """Raised when a rank definition violates its invariants."""


class SecondaryIdRequiredError(ValidationError):
    """Raised when a rank mandates a secondary id (metal number) that is blank."""

    def __init__(self, rank_label: str) -> None:
        super().__init__(f"Metal number is required for rank {rank_label!r}")
        self.rank_label = rank_label


class UploadValidationError(ValidationError):
    """Raised when an upload request is incomplete."""


class UploadTooLargeError(UploadValidationError):
    """Raised when an upload payload exceeds the size ceiling for its kind."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File too large ({size} bytes, max {limit // (1024 * 1024)}MB)")
        self.size = size
        self.limit = limit


class NotificationValidationError(ValidationError):
    """Raised when a notification lacks the fields its target type needs."""
