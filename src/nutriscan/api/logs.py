"""Daily log endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from nutriscan.api.dependencies import current_user_id, require_api_token
from nutriscan.api.models import WaterLogRequest

if TYPE_CHECKING:
    from nutriscan.containers import AppContainer
    from nutriscan.domain.nutrition import MacroTotals
    from nutriscan.domain.summaries import DailyReport, DailySummary, WeeklySummary

router = APIRouter(
    prefix="/logs", tags=["logs"], dependencies=[Depends(require_api_token)]
)


@router.get("/daily")
def daily_summary(
    request: Request,
    date: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Recompute and return the day's goal-relative summary."""
    container: AppContainer = request.app.state.container
    report = container.daily_aggregator.get_or_recompute_daily_summary(user_id, date)
    return {"success": True, "data": format_daily_report(report)}


@router.get("/weekly")
def weekly_summary(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the trailing seven days of stored summaries with averages."""
    container: AppContainer = request.app.state.container
    summary = container.daily_aggregator.get_weekly_summary(user_id)
    return {"success": True, "data": format_weekly_summary(summary)}


@router.post("/water")
def log_water(
    payload: WaterLogRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Add water to today's total."""
    container: AppContainer = request.app.state.container
    total = container.daily_aggregator.log_water_intake(user_id, payload.amount_ml)
    return {"success": True, "data": {"waterIntakeMl": total}}


@router.delete("/scan/{entry_id}")
def remove_scan(
    entry_id: UUID,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Delete one of the caller's food entries."""
    container: AppContainer = request.app.state.container
    container.daily_aggregator.remove_food_entry(user_id, entry_id)
    return {"success": True, "message": "Food scan removed successfully"}


def format_macros(totals: MacroTotals) -> dict[str, float]:
    """Format nutrient totals for API responses."""
    return {
        "calories": totals.calories,
        "protein": totals.protein_g,
        "carbs": totals.carbs_g,
        "fats": totals.fats_g,
        "fiber": totals.fiber_g,
    }


def format_daily_report(report: DailyReport) -> dict[str, object]:
    """Format a daily report for API responses."""
    return {
        "date": report.day.isoformat(),
        "totals": {
            **format_macros(report.totals),
            "water": report.water_intake_ml,
        },
        "goals": {
            "calories": report.goals.calories,
            "protein": report.goals.protein_g,
            "carbs": report.goals.carbs_g,
            "fats": report.goals.fats_g,
            "water": report.goals.water_ml,
        },
        "progress": {
            "caloriePercent": report.progress.calorie_percent,
            "proteinPercent": report.progress.protein_percent,
            "carbsPercent": report.progress.carbs_percent,
            "fatsPercent": report.progress.fats_percent,
        },
        "meals": {
            meal_type.value: {
                "totals": format_macros(meal.totals),
                "entries": [
                    {
                        "id": str(entry.entry_id),
                        "food": entry.food_name,
                        "quantity": entry.quantity_grams,
                        "nutrition": format_macros(entry.nutrition),
                        "allergenWarning": entry.allergen_warning,
                        "advisoryTags": entry.advisory_tags,
                    }
                    for entry in meal.entries
                ],
            }
            for meal_type, meal in report.meals.items()
        },
    }


def format_weekly_summary(summary: WeeklySummary) -> dict[str, object]:
    """Format a weekly summary for API responses."""
    return {
        "period": f"{summary.start.isoformat()} to {summary.end.isoformat()}",
        "dailyBreakdown": [_format_day(day) for day in summary.daily],
        "averages": {
            "calories": summary.avg_calories,
            "protein": summary.avg_protein_g,
            "carbs": summary.avg_carbs_g,
            "fats": summary.avg_fats_g,
        },
    }


def _format_day(day: DailySummary) -> dict[str, object]:
    return {
        "date": day.day.isoformat(),
        **format_macros(day.totals),
        "water": day.water_intake_ml,
    }
