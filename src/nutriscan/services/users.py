"""User lookups, profile edits and local calendar resolution."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutriscan.domain.models import Gender, UserRecord
from nutriscan.errors import NotFoundError, ValidationError

MIN_AGE = 1
MAX_AGE = 150
_LIST_FIELDS = ("allergies", "health_conditions", "dietary_preferences")
_PROFILE_FIELDS = ("full_name", "age", "gender", "timezone", *_LIST_FIELDS)

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user, if present."""

    def save(self, user: UserRecord) -> UserRecord:
        """Persist the profile fields of an existing user."""


@dataclass
class UserService:
    """Application service for user lookups and profile edits."""

    repository: UserRepository
    default_timezone: str = "UTC"
    now: Callable[[], datetime] = field(default=_utcnow)

    def get_user(self, user_id: UUID) -> UserRecord:
        """Return the user or raise NotFoundError."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def timezone_for(self, user: UserRecord) -> ZoneInfo:
        """Return the user's timezone, falling back to the default."""
        name = user.timezone or self.default_timezone
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            _logger.warning(
                "Unknown timezone %s for user %s, using %s",
                name,
                user.id,
                self.default_timezone,
            )
            return ZoneInfo(self.default_timezone)

    def local_now(self, user: UserRecord) -> datetime:
        """Return the current time in the user's timezone."""
        return self.now().astimezone(self.timezone_for(user))

    def local_today(self, user: UserRecord) -> date:
        """Return today's date in the user's calendar."""
        return self.local_now(user).date()

    def get_profile(self, user_id: UUID) -> UserRecord:
        """Return the caller's profile."""
        return self.get_user(user_id)

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply the supplied profile fields; omitted or None fields are kept."""
        unknown = set(changes) - set(_PROFILE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown profile fields: {', '.join(sorted(unknown))}"
            )
        updates: dict[str, object] = {}
        for name, value in changes.items():
            if value is None:
                continue
            if name == "full_name":
                updates[name] = _clean_name(value)
            elif name == "age":
                updates[name] = _clean_age(value)
            elif name == "gender":
                updates[name] = _clean_gender(value)
            elif name == "timezone":
                updates[name] = _clean_timezone(value)
            else:
                updates[name] = _clean_list(name, value)
        current = self.get_user(user_id)
        if not updates:
            return current
        updated = self.repository.save(replace(current, **updates))
        _logger.info(
            "Updated profile user=%s fields=%s", user_id, ",".join(sorted(updates))
        )
        return updated


def _clean_name(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("full_name must be a non-empty string")
    return value.strip()


def _clean_age(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("age must be a whole number")
    if not MIN_AGE <= value <= MAX_AGE:
        raise ValidationError(f"age must be between {MIN_AGE} and {MAX_AGE}")
    return value


def _clean_gender(value: object) -> Gender:
    try:
        return Gender(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(gender.value for gender in Gender)
        raise ValidationError(
            f"Unknown gender {value!r}, expected one of: {allowed}"
        ) from exc


def _clean_timezone(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("timezone must be an IANA timezone name")
    name = value.strip()
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValidationError(f"Unknown timezone {name!r}") from exc
    return name


def _clean_list(name: str, value: object) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{name} must be a list of strings")
    return [item.strip() for item in value if item.strip()]
