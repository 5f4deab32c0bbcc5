"""Translation of Supabase client failures into StorageError."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from nutriscan.errors import StorageError

_logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise PostgREST and transport errors as StorageError."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        _logger.exception("Supabase %s failed", action)
        raise StorageError(f"Storage failure during {action}") from exc
