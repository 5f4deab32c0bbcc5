"""Domain models for daily and weekly summaries."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from nutriscan.domain.goals import Goal
from nutriscan.domain.nutrition import MacroTotals, MealType


def empty_breakdown() -> dict[MealType, MacroTotals]:
    """Return a zero-valued breakdown keyed by every meal type."""
    return {meal_type: MacroTotals() for meal_type in MealType}


@dataclass(frozen=True)
class DailySummary:
    """Persisted per-user, per-date aggregate."""

    user_id: UUID
    day: date
    totals: MacroTotals = field(default_factory=MacroTotals)
    water_intake_ml: float = 0.0
    meal_breakdown: dict[MealType, MacroTotals] = field(
        default_factory=empty_breakdown
    )
    goal_met: bool = False


@dataclass(frozen=True)
class GoalProgress:
    """Whole-number percentages of each goal reached."""

    calorie_percent: int
    protein_percent: int
    carbs_percent: int
    fats_percent: int


@dataclass(frozen=True)
class EntryNutrition:
    """An entry's contribution to a day, for display."""

    entry_id: UUID
    food_name: str
    quantity_grams: float
    nutrition: MacroTotals
    allergen_warning: bool
    advisory_tags: list[str]


@dataclass(frozen=True)
class MealBreakdown:
    """Totals and contributing entries for one meal type."""

    totals: MacroTotals
    entries: list[EntryNutrition]


@dataclass(frozen=True)
class DailyReport:
    """Goal-relative nutrition summary for one day."""

    day: date
    totals: MacroTotals
    water_intake_ml: float
    goals: Goal
    progress: GoalProgress
    meals: dict[MealType, MealBreakdown]


@dataclass(frozen=True)
class WeeklySummary:
    """Persisted summaries for a trailing seven-day window."""

    start: date
    end: date
    daily: list[DailySummary]
    avg_calories: float
    avg_protein_g: float
    avg_carbs_g: float
    avg_fats_g: float
