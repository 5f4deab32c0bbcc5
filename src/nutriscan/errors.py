"""Error taxonomy shared by services, adapters and the HTTP layer."""


class NutriScanError(Exception):
    """Base class for all application errors."""


class NotFoundError(NutriScanError):
    """A user, entry or food does not exist (or is not visible to the caller)."""


class ValidationError(NutriScanError):
    """Input was rejected before any storage write."""


class StorageError(NutriScanError):
    """The data store failed; the operation persisted nothing."""


class UpstreamInferenceError(NutriScanError):
    """The nutrition inference provider failed or returned unusable output."""
