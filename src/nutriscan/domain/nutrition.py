"""Nutrition domain models."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


# Upper bounds for a single portion and for per-100 g values. Pure fat is
# about 900 kcal per 100 g and no food holds more than 100 g of a macro.
MAX_PORTION_GRAMS = 10_000.0
MAX_CALORIES_PER_100G = 900.0
MAX_GRAMS_PER_100G = 100.0
MAX_SODIUM_MG_PER_100G = 100_000.0


class MealType(str, Enum):
    """Meal category an entry is attributed to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodCategory(str, Enum):
    """Coarse food category reported by the inference provider."""

    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    GRAINS = "grains"
    PROTEIN = "protein"
    DAIRY = "dairy"
    OILS = "oils"
    SWEETS = "sweets"
    BEVERAGES = "beverages"
    OTHER = "other"


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrients per 100 g of a food."""

    calories: float
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fats_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Return the profile as a JSON-friendly snapshot."""
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fats_g": self.fats_g,
            "fiber_g": self.fiber_g,
            "sugar_g": self.sugar_g,
            "sodium_mg": self.sodium_mg,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "NutrientProfile":
        """Build a profile from a stored snapshot, treating gaps as zero."""
        return cls(
            calories=_as_float(raw.get("calories")),
            protein_g=_as_float(raw.get("protein_g")),
            carbs_g=_as_float(raw.get("carbs_g")),
            fats_g=_as_float(raw.get("fats_g")),
            fiber_g=_as_float(raw.get("fiber_g")),
            sugar_g=_as_float(raw.get("sugar_g")),
            sodium_mg=_as_float(raw.get("sodium_mg")),
        )


@dataclass(frozen=True)
class MacroTotals:
    """Aggregated nutrients tracked against daily goals."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fats_g: float = 0.0
    fiber_g: float = 0.0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fats_g=self.fats_g + other.fats_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )

    def to_dict(self) -> dict[str, float]:
        """Return totals as a JSON-friendly mapping."""
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fats_g": self.fats_g,
            "fiber_g": self.fiber_g,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "MacroTotals":
        """Build totals from a stored mapping."""
        return cls(
            calories=_as_float(raw.get("calories")),
            protein_g=_as_float(raw.get("protein_g")),
            carbs_g=_as_float(raw.get("carbs_g")),
            fats_g=_as_float(raw.get("fats_g")),
            fiber_g=_as_float(raw.get("fiber_g")),
        )


@dataclass(frozen=True)
class Food:
    """A catalogued food with its nutrient profile."""

    id: UUID
    name: str
    category: FoodCategory
    profile: NutrientProfile
    source: str
    allergens: list[str] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)


def _as_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
