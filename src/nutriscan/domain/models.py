"""Domain models for users."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class Gender(str, Enum):
    """Self-reported gender on a user profile."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user profile as seen by the nutrition services."""

    id: UUID
    timezone: str | None = None
    allergies: list[str] = field(default_factory=list)
    health_conditions: list[str] = field(default_factory=list)
    full_name: str | None = None
    age: int | None = None
    gender: Gender | None = None
    dietary_preferences: list[str] = field(default_factory=list)
