"""Nutrition goal service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutriscan.domain.goals import Goal
from nutriscan.errors import ValidationError
from nutriscan.services.users import UserService

_GOAL_FIELDS = ("calories", "protein_g", "carbs_g", "fats_g", "water_ml")


class GoalRepository(Protocol):
    """Persistence interface for user goals."""

    def get(self, user_id: UUID) -> Goal | None:
        """Return stored goals, or None if the user never customized them."""

    def save(self, user_id: UUID, goal: Goal) -> Goal:
        """Persist goals for a user."""


@dataclass
class GoalService:
    """Service for reading and updating daily targets."""

    repository: GoalRepository
    user_service: UserService

    def get_goals(self, user_id: UUID) -> Goal:
        """Return the user's goals, or defaults when never customized."""
        self.user_service.get_user(user_id)
        return self.repository.get(user_id) or Goal()

    def update_goals(self, user_id: UUID, changes: dict[str, float | None]) -> Goal:
        """Apply the supplied goal values and return the result."""
        unknown = set(changes) - set(_GOAL_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown goal fields: {', '.join(sorted(unknown))}")
        updates: dict[str, float] = {}
        for name, value in changes.items():
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ValidationError(f"{name} must be a number")
            if value <= 0:
                raise ValidationError(f"{name} must be greater than zero")
            updates[name] = float(value)
        current = self.get_goals(user_id)
        if not updates:
            return current
        return self.repository.save(user_id, replace(current, **updates))
