"""Daily nutrition aggregation.

Day totals are never incremented or decremented in place. They are
re-derived from the current entries on every read and written back with a
single upsert that only covers the totals and breakdown columns. Water is
owned by a separate atomic increment on the same row, so neither path can
clobber the other.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from nutriscan.domain.entries import FoodEntry
from nutriscan.domain.goals import Goal
from nutriscan.domain.nutrition import MacroTotals, MealType
from nutriscan.domain.summaries import (
    DailyReport,
    DailySummary,
    EntryNutrition,
    GoalProgress,
    MealBreakdown,
    WeeklySummary,
    empty_breakdown,
)
from nutriscan.errors import NotFoundError, ValidationError
from nutriscan.services.entries import (
    EntryRepository,
    entry_nutrition,
    parse_day,
    round_half_up,
)
from nutriscan.services.goals import GoalRepository
from nutriscan.services.users import UserService

WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


class SummaryRepository(Protocol):
    """Persistence interface for per-day summaries.

    The two write operations touch disjoint columns of the same row.
    """

    def find_one(self, user_id: UUID, day: date) -> DailySummary | None:
        """Return the stored summary for the user and date, if any."""

    def upsert_totals(
        self,
        user_id: UUID,
        day: date,
        totals: MacroTotals,
        breakdown: dict[MealType, MacroTotals],
    ) -> DailySummary:
        """Create or overwrite totals and breakdown, leaving water untouched."""

    def increment_water(
        self, user_id: UUID, day: date, amount_ml: float
    ) -> DailySummary:
        """Atomically add water, creating a zero-total row when absent."""

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DailySummary]:
        """Return stored summaries with start <= day <= end, oldest first."""


@dataclass
class DailyAggregator:
    """Computes goal-relative daily summaries from logged entries."""

    user_service: UserService
    entry_repository: EntryRepository
    goal_repository: GoalRepository
    summary_repository: SummaryRepository
    eager_recompute_on_delete: bool = False

    def get_or_recompute_daily_summary(
        self, user_id: UUID, day: date | str | None = None
    ) -> DailyReport:
        """Recompute the day's totals from its entries and return the report."""
        user = self.user_service.get_user(user_id)
        if day is None:
            target = self.user_service.local_today(user)
        else:
            target = parse_day(day)
        entries = self.entry_repository.list_by_user_and_date(user_id, target)
        goal = self.goal_repository.get(user_id) or Goal()

        if not entries:
            stored = self.summary_repository.find_one(user_id, target)
            if stored is None:
                # Nothing logged and nothing stored: do not create an empty row.
                empty = DailySummary(user_id=user_id, day=target)
                return _build_report(empty, [], goal)

        totals, breakdown = aggregate_entries(entries)
        summary = self.summary_repository.upsert_totals(
            user_id, target, totals, breakdown
        )
        _logger.debug(
            "Recomputed daily summary user=%s day=%s entries=%s calories=%s",
            user_id,
            target,
            len(entries),
            totals.calories,
        )
        return _build_report(summary, entries, goal)

    def log_water_intake(self, user_id: UUID, amount_ml: float) -> float:
        """Add water to today's summary and return the new cumulative amount."""
        if (
            isinstance(amount_ml, bool)
            or not isinstance(amount_ml, int | float)
            or not math.isfinite(amount_ml)
            or amount_ml <= 0
        ):
            raise ValidationError("amount_ml must be a positive number")
        user = self.user_service.get_user(user_id)
        today = self.user_service.local_today(user)
        summary = self.summary_repository.increment_water(
            user_id, today, float(amount_ml)
        )
        _logger.info(
            "Logged water user=%s day=%s amount_ml=%s total_ml=%s",
            user_id,
            today,
            amount_ml,
            summary.water_intake_ml,
        )
        return summary.water_intake_ml

    def remove_food_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's entries.

        The day's summary is reconciled on its next read unless eager
        recomputation is enabled.
        """
        deleted = self.entry_repository.delete_one(user_id, entry_id)
        if deleted is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        _logger.info(
            "Removed food entry user=%s entry=%s day=%s",
            user_id,
            entry_id,
            deleted.entry_date,
        )
        if self.eager_recompute_on_delete:
            self.get_or_recompute_daily_summary(user_id, deleted.entry_date)

    def get_weekly_summary(self, user_id: UUID) -> WeeklySummary:
        """Return stored summaries for the trailing seven days with averages."""
        user = self.user_service.get_user(user_id)
        end = self.user_service.local_today(user)
        start = end - timedelta(days=WEEK_DAYS - 1)
        daily = sorted(
            self.summary_repository.list_range(user_id, start, end),
            key=lambda summary: summary.day,
        )
        count = len(daily)
        if count == 0:
            return WeeklySummary(
                start=start,
                end=end,
                daily=[],
                avg_calories=0,
                avg_protein_g=0,
                avg_carbs_g=0,
                avg_fats_g=0,
            )
        totals = MacroTotals()
        for summary in daily:
            totals = totals + summary.totals
        return WeeklySummary(
            start=start,
            end=end,
            daily=daily,
            avg_calories=round_half_up(totals.calories / count, 0),
            avg_protein_g=round_half_up(totals.protein_g / count, 2),
            avg_carbs_g=round_half_up(totals.carbs_g / count, 2),
            avg_fats_g=round_half_up(totals.fats_g / count, 2),
        )


def aggregate_entries(
    entries: list[FoodEntry],
) -> tuple[MacroTotals, dict[MealType, MacroTotals]]:
    """Sum per-entry rounded contributions into totals and a meal breakdown."""
    totals = MacroTotals()
    breakdown = empty_breakdown()
    for entry in entries:
        contribution = entry_nutrition(entry)
        totals = totals + contribution
        breakdown[entry.meal_type] = breakdown[entry.meal_type] + contribution
    return _clean(totals), {meal: _clean(value) for meal, value in breakdown.items()}


def percent_of_goal(total: float, goal: float | None) -> int:
    """Return round(total / goal * 100), or 0 for a zero or missing goal."""
    if not goal or goal <= 0:
        return 0
    return int(round_half_up(total / goal * 100, 0))


def _clean(totals: MacroTotals) -> MacroTotals:
    # Sums of two-decimal values pick up binary float noise.
    return MacroTotals(
        calories=round_half_up(totals.calories, 0),
        protein_g=round_half_up(totals.protein_g, 2),
        carbs_g=round_half_up(totals.carbs_g, 2),
        fats_g=round_half_up(totals.fats_g, 2),
        fiber_g=round_half_up(totals.fiber_g, 2),
    )


def _build_report(
    summary: DailySummary, entries: list[FoodEntry], goal: Goal
) -> DailyReport:
    meals: dict[MealType, MealBreakdown] = {}
    for meal_type in MealType:
        meal_entries = [
            EntryNutrition(
                entry_id=entry.id,
                food_name=entry.food_name,
                quantity_grams=entry.quantity_grams,
                nutrition=entry_nutrition(entry),
                allergen_warning=entry.allergen_warning,
                advisory_tags=list(entry.advisory_tags),
            )
            for entry in entries
            if entry.meal_type == meal_type
        ]
        meals[meal_type] = MealBreakdown(
            totals=summary.meal_breakdown.get(meal_type, MacroTotals()),
            entries=meal_entries,
        )
    totals = summary.totals
    return DailyReport(
        day=summary.day,
        totals=totals,
        water_intake_ml=summary.water_intake_ml,
        goals=goal,
        progress=GoalProgress(
            calorie_percent=percent_of_goal(totals.calories, goal.calories),
            protein_percent=percent_of_goal(totals.protein_g, goal.protein_g),
            carbs_percent=percent_of_goal(totals.carbs_g, goal.carbs_g),
            fats_percent=percent_of_goal(totals.fats_g, goal.fats_g),
        ),
        meals=meals,
    )
