"""Models for nutrition inference results."""

from pydantic import BaseModel, ConfigDict, Field

from nutriscan.domain.nutrition import (
    MAX_CALORIES_PER_100G,
    MAX_GRAMS_PER_100G,
    MAX_PORTION_GRAMS,
    MAX_SODIUM_MG_PER_100G,
    FoodCategory,
    NutrientProfile,
)


class InferredFood(BaseModel):
    """Structured nutrition estimate returned by the inference provider."""

    model_config = ConfigDict(allow_inf_nan=False)

    found: bool
    food_name: str
    category: FoodCategory = FoodCategory.OTHER
    estimated_quantity_grams: float | None = Field(
        default=None, gt=0, le=MAX_PORTION_GRAMS
    )
    calories_per_100g: float = Field(ge=0.0, le=MAX_CALORIES_PER_100G)
    protein_g: float = Field(default=0.0, ge=0.0, le=MAX_GRAMS_PER_100G)
    carbs_g: float = Field(default=0.0, ge=0.0, le=MAX_GRAMS_PER_100G)
    fats_g: float = Field(default=0.0, ge=0.0, le=MAX_GRAMS_PER_100G)
    fiber_g: float = Field(default=0.0, ge=0.0, le=MAX_GRAMS_PER_100G)
    sugar_g: float = Field(default=0.0, ge=0.0, le=MAX_GRAMS_PER_100G)
    sodium_mg: float = Field(default=0.0, ge=0.0, le=MAX_SODIUM_MG_PER_100G)
    allergens: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.9, ge=0.0, le=1.0)

    def profile(self) -> NutrientProfile:
        """Return the per-100 g nutrient profile."""
        return NutrientProfile(
            calories=self.calories_per_100g,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fats_g=self.fats_g,
            fiber_g=self.fiber_g,
            sugar_g=self.sugar_g,
            sodium_mg=self.sodium_mg,
        )
