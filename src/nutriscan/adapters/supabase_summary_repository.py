"""Supabase repository for daily summaries.

Totals are written with a PostgREST upsert whose payload never includes
``water_ml``, so the generated ``ON CONFLICT DO UPDATE`` leaves water alone.
Water goes through the ``increment_water_intake`` database function, a single
``INSERT ... ON CONFLICT DO UPDATE SET water_ml = water_ml + amount``.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutriscan.adapters.supabase_errors import storage_errors
from nutriscan.domain.nutrition import MacroTotals, MealType
from nutriscan.domain.summaries import DailySummary, empty_breakdown
from nutriscan.errors import StorageError
from nutriscan.services.aggregation import SummaryRepository

_COLUMNS = (
    "user_id, date, total_calories, total_protein_g, total_carbs_g, "
    "total_fats_g, total_fiber_g, water_ml, meal_breakdown, goal_met"
)


@dataclass
class SupabaseSummaryRepository(SummaryRepository):
    """Supabase implementation for per-day summaries."""

    client: Client

    def find_one(self, user_id: UUID, day: date) -> DailySummary | None:
        """Return the stored summary for a user and date."""
        with storage_errors("find daily summary"):
            response = (
                self.client.table("daily_summaries")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .eq("date", day.isoformat())
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_summary(response.data[0])

    def upsert_totals(
        self,
        user_id: UUID,
        day: date,
        totals: MacroTotals,
        breakdown: dict[MealType, MacroTotals],
    ) -> DailySummary:
        """Create or overwrite totals and breakdown in one statement."""
        payload = {
            "user_id": str(user_id),
            "date": day.isoformat(),
            "total_calories": totals.calories,
            "total_protein_g": totals.protein_g,
            "total_carbs_g": totals.carbs_g,
            "total_fats_g": totals.fats_g,
            "total_fiber_g": totals.fiber_g,
            "meal_breakdown": {
                meal.value: value.to_dict() for meal, value in breakdown.items()
            },
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        with storage_errors("upsert daily summary"):
            response = (
                self.client.table("daily_summaries")
                .upsert(payload, on_conflict="user_id,date")
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to upsert daily summary")
        return _parse_summary(response.data[0])

    def increment_water(
        self, user_id: UUID, day: date, amount_ml: float
    ) -> DailySummary:
        """Atomically add water through the database function."""
        with storage_errors("increment water intake"):
            response = self.client.rpc(
                "increment_water_intake",
                {
                    "p_user_id": str(user_id),
                    "p_date": day.isoformat(),
                    "p_amount_ml": amount_ml,
                },
            ).execute()
        data = response.data
        row = data[0] if isinstance(data, list) and data else data
        if not isinstance(row, dict):
            raise StorageError("Failed to increment water intake")
        return _parse_summary(row)

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DailySummary]:
        """Return summaries between two dates inclusive, oldest first."""
        with storage_errors("list daily summaries"):
            response = (
                self.client.table("daily_summaries")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .execute()
            )
        return [_parse_summary(row) for row in response.data or []]


def _parse_summary(row: dict[str, object]) -> DailySummary:
    breakdown = empty_breakdown()
    raw_breakdown = row.get("meal_breakdown") or {}
    if isinstance(raw_breakdown, dict):
        for meal in MealType:
            values = raw_breakdown.get(meal.value)
            if isinstance(values, dict):
                breakdown[meal] = MacroTotals.from_dict(values)
    return DailySummary(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        totals=MacroTotals(
            calories=float(row.get("total_calories") or 0.0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
            fats_g=float(row.get("total_fats_g") or 0.0),
            fiber_g=float(row.get("total_fiber_g") or 0.0),
        ),
        water_intake_ml=float(row.get("water_ml") or 0.0),
        meal_breakdown=breakdown,
        goal_met=bool(row.get("goal_met", False)),
    )
