"""Domain models for nutrition goals."""

from dataclasses import dataclass

DEFAULT_CALORIES = 2000
DEFAULT_PROTEIN_G = 50.0
DEFAULT_CARBS_G = 250.0
DEFAULT_FATS_G = 65.0
DEFAULT_WATER_ML = 2000


@dataclass(frozen=True)
class Goal:
    """Daily targets for a user."""

    calories: float = DEFAULT_CALORIES
    protein_g: float = DEFAULT_PROTEIN_G
    carbs_g: float = DEFAULT_CARBS_G
    fats_g: float = DEFAULT_FATS_G
    water_ml: float = DEFAULT_WATER_ML
