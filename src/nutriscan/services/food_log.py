"""Food logging from text, images and manual input."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nutriscan.domain.entries import LoggedEntry, NewFoodEntry
from nutriscan.domain.inference import InferredFood
from nutriscan.domain.models import UserRecord
from nutriscan.domain.nutrition import Food, FoodCategory, MealType, NutrientProfile
from nutriscan.errors import NotFoundError, ValidationError
from nutriscan.services.advisory import build_advisory
from nutriscan.services.entries import (
    EntryRepository,
    parse_day,
    parse_meal_type,
    portion_nutrition,
    validate_profile,
    validate_quantity,
)
from nutriscan.services.inference import NutritionInferenceService
from nutriscan.services.users import UserService

DEFAULT_QUANTITY_GRAMS = 100.0
MIN_SEARCH_LENGTH = 2
MANUAL_CONFIDENCE = 1.0

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for the shared food catalog."""

    def find_by_name(self, name: str) -> Food | None:
        """Return the food with this name (case-insensitive), if present."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id."""

    def search(self, query: str, limit: int) -> list[Food]:
        """Return foods whose name contains the query."""

    def create_food(  # noqa: PLR0913
        self,
        name: str,
        category: FoodCategory,
        profile: NutrientProfile,
        source: str,
        allergens: list[str],
        ingredients: list[str],
    ) -> Food:
        """Create a catalog food."""


@dataclass
class FoodLogService:
    """Creates food entries; no entry is written without a valid profile."""

    user_service: UserService
    inference_service: NutritionInferenceService
    food_repository: FoodRepository
    entry_repository: EntryRepository

    async def log_from_text(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_name: str,
        quantity_grams: float,
        meal_type: MealType | str,
        entry_date: date | str | None = None,
    ) -> LoggedEntry:
        """Log a food described by name."""
        quantity = validate_quantity(quantity_grams)
        meal = parse_meal_type(meal_type)
        name = _require_name(food_name)
        day = parse_day(entry_date) if entry_date is not None else None
        user = self.user_service.get_user(user_id)

        food = self.food_repository.find_by_name(name)
        confidence = None
        if food is None:
            inferred = await self.inference_service.infer_from_text(name)
            if inferred is None:
                raise NotFoundError(
                    f'Could not find nutritional information for "{name}"'
                )
            food = self._catalog(inferred)
            confidence = inferred.confidence
        return self._create_entry(
            user, food, food.profile, quantity, meal, day, confidence
        )

    async def log_from_image(  # noqa: PLR0913
        self,
        user_id: UUID,
        image_bytes: bytes,
        meal_type: MealType | str,
        quantity_grams: float | None = None,
        mime_type: str | None = None,
        entry_date: date | str | None = None,
    ) -> LoggedEntry:
        """Log the food shown in a photo."""
        meal = parse_meal_type(meal_type)
        quantity = None
        if quantity_grams is not None:
            quantity = validate_quantity(quantity_grams)
        if not image_bytes:
            raise ValidationError("Image is required")
        if mime_type and not mime_type.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        day = parse_day(entry_date) if entry_date is not None else None
        user = self.user_service.get_user(user_id)

        inferred = await self.inference_service.infer_from_image(image_bytes, mime_type)
        if inferred is None:
            raise NotFoundError(
                "Could not detect a food item in the image. "
                "Please try again with a clearer picture."
            )
        food = self.food_repository.find_by_name(inferred.food_name) or self._catalog(
            inferred
        )
        if quantity is None:
            quantity = inferred.estimated_quantity_grams or DEFAULT_QUANTITY_GRAMS
        return self._create_entry(
            user, food, food.profile, quantity, meal, day, inferred.confidence
        )

    def log_manual(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_name: str,
        quantity_grams: float,
        meal_type: MealType | str,
        profile: NutrientProfile,
        entry_date: date | str | None = None,
    ) -> LoggedEntry:
        """Log a food with caller-supplied nutrients per 100 g."""
        quantity = validate_quantity(quantity_grams)
        meal = parse_meal_type(meal_type)
        name = _require_name(food_name)
        validate_profile(profile)
        day = parse_day(entry_date) if entry_date is not None else None
        user = self.user_service.get_user(user_id)

        food = self.food_repository.find_by_name(name)
        if food is None:
            food = self.food_repository.create_food(
                name=name,
                category=FoodCategory.OTHER,
                profile=profile,
                source="user_input",
                allergens=[],
                ingredients=[],
            )
        return self._create_entry(
            user, food, profile, quantity, meal, day, MANUAL_CONFIDENCE
        )

    async def search_foods(self, query: str, limit: int = 10) -> list[Food]:
        """Search the catalog, asking the inference provider on a miss."""
        cleaned = (query or "").strip()
        if len(cleaned) < MIN_SEARCH_LENGTH:
            raise ValidationError(
                f"Query must be at least {MIN_SEARCH_LENGTH} characters"
            )
        foods = self.food_repository.search(cleaned, limit)
        if foods:
            return foods
        inferred = await self.inference_service.infer_from_text(cleaned)
        if inferred is None:
            return []
        food = self.food_repository.find_by_name(inferred.food_name)
        return [food or self._catalog(inferred)]

    def get_food(self, food_id: UUID) -> Food:
        """Return a catalog food or raise NotFoundError."""
        food = self.food_repository.get_food(food_id)
        if food is None:
            raise NotFoundError(f"Food {food_id} not found")
        return food

    def _catalog(self, inferred: InferredFood) -> Food:
        return self.food_repository.create_food(
            name=inferred.food_name.strip(),
            category=inferred.category,
            profile=inferred.profile(),
            source="inference",
            allergens=inferred.allergens,
            ingredients=inferred.ingredients,
        )

    def _create_entry(  # noqa: PLR0913
        self,
        user: UserRecord,
        food: Food,
        profile: NutrientProfile,
        quantity: float,
        meal: MealType,
        day: date | None,
        confidence: float | None,
    ) -> LoggedEntry:
        recorded_at = self.user_service.now()
        if day is None:
            day = recorded_at.astimezone(self.user_service.timezone_for(user)).date()
        nutrition = portion_nutrition(profile, quantity)
        advisory = build_advisory(profile, food.allergens, user)
        entry = self.entry_repository.create_entry(
            NewFoodEntry(
                user_id=user.id,
                food_id=food.id,
                food_name=food.name,
                nutrients=profile,
                quantity_grams=quantity,
                meal_type=meal,
                entry_date=day,
                recorded_at=recorded_at,
                detected_allergens=advisory.detected_allergens,
                allergen_warning=advisory.allergen_warning,
                advisory_tags=advisory.tags,
                confidence=confidence,
            )
        )
        _logger.info(
            "Logged food entry user=%s entry=%s food=%s day=%s meal=%s",
            user.id,
            entry.id,
            food.name,
            entry.entry_date,
            meal.value,
        )
        return LoggedEntry(
            entry=entry,
            food=food,
            nutrition=nutrition,
            advisory=advisory,
        )


def _require_name(food_name: str) -> str:
    name = (food_name or "").strip()
    if not name:
        raise ValidationError("food_name is required")
    return name
