"""Allergen detection and health advisories for logged foods."""

from nutriscan.domain.advisory import Advisory
from nutriscan.domain.models import UserRecord
from nutriscan.domain.nutrition import NutrientProfile

# Per-100 g thresholds.
HIGH_SUGAR_G = 22.5
HIGH_FAT_G = 17.5
HIGH_SODIUM_MG = 600.0
HIGH_FIBER_G = 6.0
HIGH_PROTEIN_G = 20.0

_SUGAR_CONDITIONS = {"diabetes"}
_FAT_CONDITIONS = {"high_cholesterol"}
_SODIUM_CONDITIONS = {"hypertension", "high_blood_pressure"}


def detect_allergens(food_allergens: list[str], user_allergies: list[str]) -> list[str]:
    """Return the food allergens that match any user allergy.

    Matching is case-insensitive substring containment in either direction,
    so "peanut" matches "peanuts" and "tree nuts" matches "nuts".
    """
    detected: list[str] = []
    wanted = [allergy.strip().lower() for allergy in user_allergies if allergy.strip()]
    for allergen in food_allergens:
        candidate = allergen.strip().lower()
        if not candidate:
            continue
        if any(candidate in allergy or allergy in candidate for allergy in wanted):
            detected.append(allergen)
    return detected


def build_advisory(
    profile: NutrientProfile, food_allergens: list[str], user: UserRecord
) -> Advisory:
    """Return allergen matches and advisory tags for a food and user."""
    detected = detect_allergens(food_allergens, user.allergies)
    conditions = {
        condition.strip().lower().replace(" ", "_")
        for condition in user.health_conditions
    }
    tags = [f"allergen:{allergen.strip().lower()}" for allergen in detected]
    if conditions & _SUGAR_CONDITIONS and profile.sugar_g > HIGH_SUGAR_G:
        tags.append("high_sugar")
    if conditions & _FAT_CONDITIONS and profile.fats_g > HIGH_FAT_G:
        tags.append("high_fat")
    if conditions & _SODIUM_CONDITIONS and profile.sodium_mg > HIGH_SODIUM_MG:
        tags.append("high_sodium")
    conflicts = bool(tags)

    if profile.fiber_g >= HIGH_FIBER_G:
        tags.append("high_fiber")
    if profile.protein_g >= HIGH_PROTEIN_G:
        tags.append("high_protein")

    if conflicts:
        suitability = "bad"
    elif "high_fiber" in tags or "high_protein" in tags:
        suitability = "good"
    else:
        suitability = "neutral"
    return Advisory(detected_allergens=detected, tags=tags, suitability=suitability)
