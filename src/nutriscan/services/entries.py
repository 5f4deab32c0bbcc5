"""Food entry persistence interface and per-entry nutrition math."""

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol
from uuid import UUID

from nutriscan.domain.entries import FoodEntry, NewFoodEntry
from nutriscan.domain.nutrition import (
    MAX_CALORIES_PER_100G,
    MAX_GRAMS_PER_100G,
    MAX_PORTION_GRAMS,
    MAX_SODIUM_MG_PER_100G,
    MacroTotals,
    MealType,
    NutrientProfile,
)
from nutriscan.errors import ValidationError

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class EntryRepository(Protocol):
    """Persistence interface for logged food entries."""

    def list_by_user_and_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return every entry attributed to the user on the given date."""

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        """Persist a new entry and return it with its id."""

    def delete_one(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Delete the user's entry and return it, or None if it was not found."""


def portion_nutrition(profile: NutrientProfile, quantity_grams: float) -> MacroTotals:
    """Scale a per-100 g profile to a portion.

    Calories are rounded to whole numbers and the other nutrients to two
    decimals here, before any summation, so day totals are reproducible.
    """
    factor = quantity_grams / 100.0
    return MacroTotals(
        calories=round_half_up(profile.calories * factor, 0),
        protein_g=round_half_up(profile.protein_g * factor, 2),
        carbs_g=round_half_up(profile.carbs_g * factor, 2),
        fats_g=round_half_up(profile.fats_g * factor, 2),
        fiber_g=round_half_up(profile.fiber_g * factor, 2),
    )


def entry_nutrition(entry: FoodEntry) -> MacroTotals:
    """Return the rounded contribution of one entry."""
    return portion_nutrition(entry.nutrients, entry.quantity_grams)


def round_half_up(value: float, places: int) -> float:
    """Round half away from zero on the decimal representation."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_day(value: date | str) -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}: {exc}") from exc


def parse_meal_type(value: MealType | str) -> MealType:
    """Parse a meal category."""
    if isinstance(value, MealType):
        return value
    try:
        return MealType(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(meal.value for meal in MealType)
        raise ValidationError(
            f"Unknown meal type {value!r}, expected one of: {allowed}"
        ) from exc


def validate_quantity(quantity_grams: object) -> float:
    """Return the quantity as a float, rejecting non-positive or absurd values."""
    if isinstance(quantity_grams, bool) or not isinstance(quantity_grams, int | float):
        raise ValidationError("quantity_grams must be a number")
    if not math.isfinite(quantity_grams) or quantity_grams <= 0:
        raise ValidationError("quantity_grams must be a finite number above zero")
    if quantity_grams > MAX_PORTION_GRAMS:
        raise ValidationError(
            f"quantity_grams must not exceed {MAX_PORTION_GRAMS:g} g"
        )
    return float(quantity_grams)


_PROFILE_LIMITS = {
    "calories": MAX_CALORIES_PER_100G,
    "protein_g": MAX_GRAMS_PER_100G,
    "carbs_g": MAX_GRAMS_PER_100G,
    "fats_g": MAX_GRAMS_PER_100G,
    "fiber_g": MAX_GRAMS_PER_100G,
    "sugar_g": MAX_GRAMS_PER_100G,
    "sodium_mg": MAX_SODIUM_MG_PER_100G,
}


def validate_profile(profile: NutrientProfile) -> NutrientProfile:
    """Reject per-100 g values that are negative, non-finite or implausible."""
    for name, value in profile.to_dict().items():
        if not math.isfinite(value) or value < 0:
            raise ValidationError(f"{name} must be a finite non-negative number")
        if value > _PROFILE_LIMITS[name]:
            raise ValidationError(
                f"{name} must not exceed {_PROFILE_LIMITS[name]:g} per 100 g"
            )
    return profile
