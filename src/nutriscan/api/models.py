"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


class WaterLogRequest(_Payload):
    """Body of a water log request."""

    amount_ml: float = Field(alias="amountMl")


class TextScanRequest(_Payload):
    """Body of a text-based food scan."""

    food_name: str = Field(alias="foodName")
    quantity_grams: float = Field(alias="quantityGrams")
    meal_type: str = Field(alias="mealType")
    entry_date: str | None = Field(default=None, alias="entryDate")


class ManualEntryRequest(_Payload):
    """Body of a manual food entry with nutrients per 100 g."""

    food_name: str = Field(alias="foodName")
    quantity_grams: float = Field(alias="quantityGrams")
    meal_type: str = Field(alias="mealType")
    calories_per_100g: float = Field(alias="caloriesPer100g")
    protein_g: float = Field(default=0.0, alias="proteinGrams")
    carbs_g: float = Field(default=0.0, alias="carbsGrams")
    fats_g: float = Field(default=0.0, alias="fatsGrams")
    fiber_g: float = Field(default=0.0, alias="fiberGrams")
    sugar_g: float = Field(default=0.0, alias="sugarGrams")
    sodium_mg: float = Field(default=0.0, alias="sodiumMg")
    entry_date: str | None = Field(default=None, alias="entryDate")


class GoalsUpdateRequest(_Payload):
    """Body of a goals update; omitted fields keep their value."""

    calories: float | None = Field(default=None, alias="dailyCaloricGoal")
    protein_g: float | None = Field(default=None, alias="proteinGoalGrams")
    carbs_g: float | None = Field(default=None, alias="carbsGoalGrams")
    fats_g: float | None = Field(default=None, alias="fatsGoalGrams")
    water_ml: float | None = Field(default=None, alias="waterIntakeGoalMl")


class ProfileUpdateRequest(_Payload):
    """Body of a profile update; omitted fields keep their value."""

    full_name: str | None = Field(default=None, alias="fullName")
    age: int | None = None
    gender: str | None = None
    timezone: str | None = None
    health_conditions: list[str] | None = Field(
        default=None, alias="healthConditions"
    )
    allergies: list[str] | None = None
    dietary_preferences: list[str] | None = Field(
        default=None, alias="dietaryPreferences"
    )
