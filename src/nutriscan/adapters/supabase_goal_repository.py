"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutriscan.adapters.supabase_errors import storage_errors
from nutriscan.domain.goals import Goal
from nutriscan.services.goals import GoalRepository

_COLUMNS = "calories, protein_g, carbs_g, fats_g, water_ml"


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for user goals."""

    client: Client

    def get(self, user_id: UUID) -> Goal | None:
        """Return the stored goals for a user."""
        with storage_errors("get goals"):
            response = (
                self.client.table("user_goals")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def save(self, user_id: UUID, goal: Goal) -> Goal:
        """Create or replace the user's goals."""
        with storage_errors("save goals"):
            response = (
                self.client.table("user_goals")
                .upsert(
                    {
                        "user_id": str(user_id),
                        "calories": goal.calories,
                        "protein_g": goal.protein_g,
                        "carbs_g": goal.carbs_g,
                        "fats_g": goal.fats_g,
                        "water_ml": goal.water_ml,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    },
                    on_conflict="user_id",
                )
                .execute()
            )
        if not response.data:
            return goal
        return _parse_goal(response.data[0])


def _parse_goal(row: dict[str, object]) -> Goal:
    defaults = Goal()
    return Goal(
        calories=_value(row, "calories", defaults.calories),
        protein_g=_value(row, "protein_g", defaults.protein_g),
        carbs_g=_value(row, "carbs_g", defaults.carbs_g),
        fats_g=_value(row, "fats_g", defaults.fats_g),
        water_ml=_value(row, "water_ml", defaults.water_ml),
    )


def _value(row: dict[str, object], key: str, default: float) -> float:
    raw = row.get(key)
    return default if raw is None else float(raw)
