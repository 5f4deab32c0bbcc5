"""Food scanning, manual entry and catalog endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Request, status

from nutriscan.api.dependencies import current_user_id, require_api_token
from nutriscan.api.logs import format_macros
from nutriscan.api.models import ManualEntryRequest, TextScanRequest
from nutriscan.domain.nutrition import NutrientProfile

if TYPE_CHECKING:
    from nutriscan.containers import AppContainer
    from nutriscan.domain.entries import LoggedEntry
    from nutriscan.domain.nutrition import Food

router = APIRouter(
    prefix="/food", tags=["food"], dependencies=[Depends(require_api_token)]
)


@router.post("/scan", status_code=status.HTTP_201_CREATED)
async def scan_text(
    payload: TextScanRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Log a food described by name."""
    container: AppContainer = request.app.state.container
    logged = await container.food_log_service.log_from_text(
        user_id=user_id,
        food_name=payload.food_name,
        quantity_grams=payload.quantity_grams,
        meal_type=payload.meal_type,
        entry_date=payload.entry_date,
    )
    return {"success": True, "data": format_logged_entry(logged)}


@router.post("/scan-image", status_code=status.HTTP_201_CREATED)
async def scan_image(  # noqa: PLR0913
    request: Request,
    meal_type: str,
    quantity_grams: float | None = None,
    entry_date: str | None = None,
    content_type: str | None = Header(default=None),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Log the food shown in a photo sent as the raw request body."""
    container: AppContainer = request.app.state.container
    image_bytes = await request.body()
    logged = await container.food_log_service.log_from_image(
        user_id=user_id,
        image_bytes=image_bytes,
        meal_type=meal_type,
        quantity_grams=quantity_grams,
        mime_type=content_type,
        entry_date=entry_date,
    )
    return {"success": True, "data": format_logged_entry(logged)}


@router.post("/manual-entry", status_code=status.HTTP_201_CREATED)
def manual_entry(
    payload: ManualEntryRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Log a food with caller-supplied nutrients."""
    container: AppContainer = request.app.state.container
    profile = NutrientProfile(
        calories=payload.calories_per_100g,
        protein_g=payload.protein_g,
        carbs_g=payload.carbs_g,
        fats_g=payload.fats_g,
        fiber_g=payload.fiber_g,
        sugar_g=payload.sugar_g,
        sodium_mg=payload.sodium_mg,
    )
    logged = container.food_log_service.log_manual(
        user_id=user_id,
        food_name=payload.food_name,
        quantity_grams=payload.quantity_grams,
        meal_type=payload.meal_type,
        profile=profile,
        entry_date=payload.entry_date,
    )
    return {"success": True, "data": format_logged_entry(logged)}


@router.get("/search")
async def search_foods(
    request: Request, query: str = "", limit: int = 10
) -> dict[str, object]:
    """Search the food catalog by name."""
    container: AppContainer = request.app.state.container
    foods = await container.food_log_service.search_foods(query, limit)
    return {"success": True, "data": [format_food(food) for food in foods]}


@router.get("/{food_id}")
def food_detail(food_id: UUID, request: Request) -> dict[str, object]:
    """Return one catalog food."""
    container: AppContainer = request.app.state.container
    food = container.food_log_service.get_food(food_id)
    return {"success": True, "data": format_food(food)}


def format_food(food: Food) -> dict[str, object]:
    """Format a catalog food for API responses."""
    return {
        "id": str(food.id),
        "name": food.name,
        "category": food.category.value,
        "nutritionPer100g": food.profile.to_dict(),
        "allergens": food.allergens,
        "ingredients": food.ingredients,
        "source": food.source,
    }


def format_logged_entry(logged: LoggedEntry) -> dict[str, object]:
    """Format a newly logged entry for API responses."""
    entry = logged.entry
    return {
        "id": str(entry.id),
        "food": format_food(logged.food),
        "quantity": entry.quantity_grams,
        "mealType": entry.meal_type.value,
        "date": entry.entry_date.isoformat(),
        "nutrition": format_macros(logged.nutrition),
        "confidence": entry.confidence,
        "allergenWarning": logged.advisory.allergen_warning,
        "detectedAllergens": logged.advisory.detected_allergens,
        "advisoryTags": logged.advisory.tags,
        "suitability": logged.advisory.suitability,
    }
