"""Tests for food logging."""

import asyncio
from datetime import date
from uuid import uuid4

import pytest

from nutriscan.domain.nutrition import FoodCategory, MealType, NutrientProfile
from nutriscan.errors import NotFoundError, UpstreamInferenceError, ValidationError
from nutriscan.services.aggregation import DailyAggregator
from nutriscan.services.food_log import FoodLogService
from tests.conftest import (
    TODAY,
    FakeInferenceClient,
    InMemoryEntryRepository,
    InMemoryFoodRepository,
    inferred_payload,
)


def test_log_from_text_uses_catalog_before_inference(
    food_log_service: FoodLogService,
    food_repository: InMemoryFoodRepository,
    inference_client: FakeInferenceClient,
    user,
) -> None:
    food_repository.add("Rice", NutrientProfile(calories=130, carbs_g=28.2))

    logged = asyncio.run(
        food_log_service.log_from_text(user.id, "rice", 150, "lunch")
    )

    assert inference_client.calls == []
    assert logged.entry.food_name == "Rice"
    assert logged.entry.entry_date == TODAY
    assert logged.entry.meal_type == MealType.LUNCH
    assert logged.nutrition.calories == 195
    assert logged.nutrition.carbs_g == 42.3


def test_log_from_text_catalogs_inferred_food(
    food_log_service: FoodLogService,
    food_repository: InMemoryFoodRepository,
    entry_repository: InMemoryEntryRepository,
    user,
) -> None:
    logged = asyncio.run(
        food_log_service.log_from_text(user.id, "banana", 120, MealType.SNACK)
    )

    assert food_repository.find_by_name("Banana") is not None
    assert logged.food.source == "inference"
    assert logged.food.category == FoodCategory.FRUITS
    assert logged.entry.confidence == 0.92
    assert logged.nutrition.calories == 107
    assert list(entry_repository.entries) == [logged.entry.id]


def test_log_from_text_not_found_writes_nothing(
    food_log_service: FoodLogService,
    inference_client: FakeInferenceClient,
    entry_repository: InMemoryEntryRepository,
    user,
) -> None:
    inference_client.payload = inferred_payload(found=False, food_name="")

    with pytest.raises(NotFoundError):
        asyncio.run(food_log_service.log_from_text(user.id, "xyzzy", 100, "lunch"))

    assert entry_repository.entries == {}


def test_inference_failure_writes_nothing(
    food_log_service: FoodLogService,
    inference_client: FakeInferenceClient,
    entry_repository: InMemoryEntryRepository,
    food_repository: InMemoryFoodRepository,
    user,
) -> None:
    inference_client.error = RuntimeError("timeout")

    with pytest.raises(UpstreamInferenceError):
        asyncio.run(food_log_service.log_from_text(user.id, "apple", 100, "lunch"))

    assert entry_repository.entries == {}
    assert food_repository.foods == {}


@pytest.mark.parametrize(
    ("quantity", "meal"),
    [(0, "lunch"), (-10, "lunch"), (100, "brunch")],
)
def test_log_from_text_validates_before_inference(
    food_log_service: FoodLogService,
    inference_client: FakeInferenceClient,
    user,
    quantity,
    meal,
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(food_log_service.log_from_text(user.id, "apple", quantity, meal))

    assert inference_client.calls == []


def test_log_from_image_defaults_to_estimated_portion(
    food_log_service: FoodLogService, inference_client: FakeInferenceClient, user
) -> None:
    logged = asyncio.run(
        food_log_service.log_from_image(
            user.id, b"\x89PNG\r\n\x1a\nrest", "breakfast", mime_type="image/png"
        )
    )

    assert logged.entry.quantity_grams == 120
    assert inference_client.calls[0]["image_data_url"].startswith(
        "data:image/png;base64,"
    )


def test_log_from_image_falls_back_to_default_portion(
    food_log_service: FoodLogService, inference_client: FakeInferenceClient, user
) -> None:
    inference_client.payload = inferred_payload(estimated_quantity_grams=None)

    logged = asyncio.run(food_log_service.log_from_image(user.id, b"img", "dinner"))

    assert logged.entry.quantity_grams == 100


def test_log_from_image_rejects_non_images(
    food_log_service: FoodLogService, inference_client: FakeInferenceClient, user
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(
            food_log_service.log_from_image(
                user.id, b"%PDF", "dinner", mime_type="application/pdf"
            )
        )
    with pytest.raises(ValidationError):
        asyncio.run(food_log_service.log_from_image(user.id, b"", "dinner"))

    assert inference_client.calls == []


def test_log_manual_snapshots_profile_and_advisory(
    food_log_service: FoodLogService, user_repository, user
) -> None:
    sensitive = user_repository.add(
        allergies=["peanut"], health_conditions=["Diabetes"]
    )
    profile = NutrientProfile(calories=550, protein_g=25, sugar_g=30)

    logged = food_log_service.log_manual(
        sensitive.id, "Peanut bar", 40, "snack", profile, entry_date="2024-05-30"
    )

    assert logged.entry.entry_date == date(2024, 5, 30)
    assert logged.entry.nutrients == profile
    assert logged.entry.confidence == 1.0
    assert logged.advisory.tags == ["high_sugar", "high_protein"]
    assert logged.nutrition.calories == 220


@pytest.mark.parametrize(
    "profile",
    [
        NutrientProfile(calories=-1),
        NutrientProfile(calories=float("nan")),
        NutrientProfile(calories=100, fats_g=float("inf")),
        NutrientProfile(calories=1e30),
        NutrientProfile(calories=100, protein_g=101),
        NutrientProfile(calories=100, sodium_mg=1e9),
    ],
)
def test_log_manual_rejects_implausible_nutrients(
    food_log_service: FoodLogService,
    food_repository: InMemoryFoodRepository,
    entry_repository: InMemoryEntryRepository,
    user,
    profile: NutrientProfile,
) -> None:
    with pytest.raises(ValidationError):
        food_log_service.log_manual(user.id, "Odd", 100, "lunch", profile)

    assert food_repository.foods == {}
    assert entry_repository.entries == {}


@pytest.mark.parametrize("quantity", [1e30, 10_001, float("inf"), float("nan")])
def test_oversized_portion_is_rejected_and_day_still_readable(
    food_log_service: FoodLogService,
    entry_repository: InMemoryEntryRepository,
    aggregator: DailyAggregator,
    user,
    quantity: float,
) -> None:
    with pytest.raises(ValidationError):
        food_log_service.log_manual(
            user.id, "Rice", quantity, "lunch", NutrientProfile(calories=130)
        )

    assert entry_repository.entries == {}
    assert aggregator.get_or_recompute_daily_summary(user.id).totals.calories == 0


def test_largest_portion_is_accepted(food_log_service: FoodLogService, user) -> None:
    logged = food_log_service.log_manual(
        user.id, "Oil", 10_000, "dinner", NutrientProfile(calories=900, fats_g=100)
    )

    assert logged.nutrition.calories == 90_000
    assert logged.nutrition.fats_g == 10_000


def test_implausible_inferred_profile_writes_nothing(
    food_log_service: FoodLogService,
    food_repository: InMemoryFoodRepository,
    entry_repository: InMemoryEntryRepository,
    inference_client: FakeInferenceClient,
    user,
) -> None:
    inference_client.payload = inferred_payload(calories_per_100g=1e30)

    with pytest.raises(UpstreamInferenceError):
        asyncio.run(food_log_service.log_from_text(user.id, "banana", 100, "lunch"))

    assert food_repository.foods == {}
    assert entry_repository.entries == {}


def test_entry_date_follows_user_timezone(
    food_log_service: FoodLogService, user_repository
) -> None:
    # 12:00 UTC is already the next day in Kiritimati (UTC+14).
    islander = user_repository.add(timezone="Pacific/Kiritimati")

    logged = food_log_service.log_manual(
        islander.id, "Tea", 200, "breakfast", NutrientProfile(calories=1)
    )

    assert logged.entry.entry_date == date(2024, 6, 2)


def test_search_requires_two_characters(food_log_service: FoodLogService) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(food_log_service.search_foods(" a "))


def test_search_returns_catalog_matches(
    food_log_service: FoodLogService,
    food_repository: InMemoryFoodRepository,
    inference_client: FakeInferenceClient,
) -> None:
    food_repository.add("Greek yogurt", NutrientProfile(calories=59))
    food_repository.add("Yogurt drink", NutrientProfile(calories=70))

    foods = asyncio.run(food_log_service.search_foods("yogurt", limit=1))

    assert [food.name for food in foods] == ["Greek yogurt"]
    assert inference_client.calls == []


def test_search_falls_back_to_inference(food_log_service: FoodLogService) -> None:
    foods = asyncio.run(food_log_service.search_foods("banana"))

    assert [food.name for food in foods] == ["Banana"]


def test_get_food_unknown(food_log_service: FoodLogService) -> None:
    with pytest.raises(NotFoundError):
        food_log_service.get_food(uuid4())
