"""Domain models for logged food entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from nutriscan.domain.advisory import Advisory
from nutriscan.domain.nutrition import Food, MacroTotals, MealType, NutrientProfile


@dataclass(frozen=True)
class NewFoodEntry:
    """A food entry ready to be persisted."""

    user_id: UUID
    food_id: UUID | None
    food_name: str
    nutrients: NutrientProfile
    quantity_grams: float
    meal_type: MealType
    entry_date: date
    recorded_at: datetime
    detected_allergens: list[str] = field(default_factory=list)
    allergen_warning: bool = False
    advisory_tags: list[str] = field(default_factory=list)
    confidence: float | None = None


@dataclass(frozen=True)
class FoodEntry:
    """One logged instance of food consumption."""

    id: UUID
    user_id: UUID
    food_id: UUID | None
    food_name: str
    nutrients: NutrientProfile
    quantity_grams: float
    meal_type: MealType
    entry_date: date
    recorded_at: datetime
    detected_allergens: list[str] = field(default_factory=list)
    allergen_warning: bool = False
    advisory_tags: list[str] = field(default_factory=list)
    confidence: float | None = None


@dataclass(frozen=True)
class LoggedEntry:
    """Result of logging food: the stored entry and its portion nutrition."""

    entry: FoodEntry
    food: Food
    nutrition: MacroTotals
    advisory: Advisory
