"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from nutriscan.config import Settings
from nutriscan.containers import AppContainer
from nutriscan.domain.entries import FoodEntry, NewFoodEntry
from nutriscan.domain.goals import Goal
from nutriscan.domain.models import UserRecord
from nutriscan.domain.nutrition import (
    Food,
    FoodCategory,
    MacroTotals,
    MealType,
    NutrientProfile,
)
from nutriscan.domain.summaries import DailySummary, empty_breakdown
from nutriscan.services.aggregation import DailyAggregator, SummaryRepository
from nutriscan.services.entries import EntryRepository
from nutriscan.services.food_log import FoodLogService, FoodRepository
from nutriscan.services.goals import GoalRepository, GoalService
from nutriscan.services.inference import InferenceClient, NutritionInferenceService
from nutriscan.services.users import UserRepository, UserService

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
TODAY = date(2024, 6, 1)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def add(self, **kwargs) -> UserRecord:  # type: ignore[no-untyped-def]
        user = UserRecord(id=kwargs.pop("id", uuid4()), **kwargs)
        self.users[user.id] = user
        return user

    def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def save(self, user: UserRecord) -> UserRecord:
        self.users[user.id] = user
        return user


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal repository for tests."""

    goals: dict[UUID, Goal] = field(default_factory=dict)

    def get(self, user_id: UUID) -> Goal | None:
        return self.goals.get(user_id)

    def save(self, user_id: UUID, goal: Goal) -> Goal:
        self.goals[user_id] = goal
        return goal


@dataclass
class InMemoryEntryRepository(EntryRepository):
    """In-memory food entry repository for tests."""

    entries: dict[UUID, FoodEntry] = field(default_factory=dict)

    def list_by_user_and_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        return [
            entry
            for entry in self.entries.values()
            if entry.user_id == user_id and entry.entry_date == day
        ]

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        stored = FoodEntry(id=uuid4(), **vars(entry))
        self.entries[stored.id] = stored
        return stored

    def delete_one(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return self.entries.pop(entry_id)


@dataclass
class InMemorySummaryRepository(SummaryRepository):
    """In-memory summary repository; each write holds a lock like a row lock."""

    rows: dict[tuple[UUID, date], DailySummary] = field(default_factory=dict)
    upserts: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def find_one(self, user_id: UUID, day: date) -> DailySummary | None:
        return self.rows.get((user_id, day))

    def upsert_totals(
        self,
        user_id: UUID,
        day: date,
        totals: MacroTotals,
        breakdown: dict[MealType, MacroTotals],
    ) -> DailySummary:
        with self.lock:
            current = self.rows.get((user_id, day)) or DailySummary(
                user_id=user_id, day=day
            )
            summary = replace(current, totals=totals, meal_breakdown=dict(breakdown))
            self.rows[(user_id, day)] = summary
            self.upserts += 1
            return summary

    def increment_water(
        self, user_id: UUID, day: date, amount_ml: float
    ) -> DailySummary:
        with self.lock:
            current = self.rows.get((user_id, day)) or DailySummary(
                user_id=user_id, day=day, meal_breakdown=empty_breakdown()
            )
            summary = replace(
                current, water_intake_ml=current.water_intake_ml + amount_ml
            )
            self.rows[(user_id, day)] = summary
            return summary

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DailySummary]:
        return sorted(
            (
                summary
                for (owner, day), summary in self.rows.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda summary: summary.day,
        )


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food catalog for tests."""

    foods: dict[UUID, Food] = field(default_factory=dict)

    def add(  # type: ignore[no-untyped-def]
        self, name: str, profile: NutrientProfile, **kwargs
    ) -> Food:
        food = Food(
            id=uuid4(),
            name=name,
            category=kwargs.get("category", FoodCategory.OTHER),
            profile=profile,
            source=kwargs.get("source", "seed"),
            allergens=kwargs.get("allergens", []),
            ingredients=kwargs.get("ingredients", []),
        )
        self.foods[food.id] = food
        return food

    def find_by_name(self, name: str) -> Food | None:
        for food in self.foods.values():
            if food.name.lower() == name.strip().lower():
                return food
        return None

    def get_food(self, food_id: UUID) -> Food | None:
        return self.foods.get(food_id)

    def search(self, query: str, limit: int) -> list[Food]:
        matches = [
            food for food in self.foods.values() if query.lower() in food.name.lower()
        ]
        return sorted(matches, key=lambda food: food.name)[:limit]

    def create_food(  # noqa: PLR0913
        self,
        name: str,
        category: FoodCategory,
        profile: NutrientProfile,
        source: str,
        allergens: list[str],
        ingredients: list[str],
    ) -> Food:
        return self.add(
            name,
            profile,
            category=category,
            source=source,
            allergens=allergens,
            ingredients=ingredients,
        )


def inferred_payload(**overrides: object) -> dict[str, object]:
    """Return a valid inference response, optionally overridden."""
    payload: dict[str, object] = {
        "found": True,
        "food_name": "Banana",
        "category": "fruits",
        "estimated_quantity_grams": 120,
        "calories_per_100g": 89,
        "protein_g": 1.1,
        "carbs_g": 22.8,
        "fats_g": 0.3,
        "fiber_g": 2.6,
        "sugar_g": 12.2,
        "sodium_mg": 1,
        "allergens": [],
        "ingredients": ["banana"],
        "confidence": 0.92,
    }
    payload.update(overrides)
    return payload


@dataclass
class FakeInferenceClient(InferenceClient):
    """Fake inference client returning a fixed payload or raising."""

    payload: dict[str, object] = field(default_factory=inferred_payload)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def infer(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append({"prompt": prompt, "image_data_url": image_data_url})
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user(user_repository: InMemoryUserRepository) -> UserRecord:
    return user_repository.add(timezone="UTC")


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def entry_repository() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def summary_repository() -> InMemorySummaryRepository:
    return InMemorySummaryRepository()


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def inference_client() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository) -> UserService:
    return UserService(user_repository, now=lambda: FIXED_NOW)


@pytest.fixture
def aggregator(
    user_service: UserService,
    entry_repository: InMemoryEntryRepository,
    goal_repository: InMemoryGoalRepository,
    summary_repository: InMemorySummaryRepository,
) -> DailyAggregator:
    return DailyAggregator(
        user_service=user_service,
        entry_repository=entry_repository,
        goal_repository=goal_repository,
        summary_repository=summary_repository,
    )


@pytest.fixture
def inference_service(
    inference_client: FakeInferenceClient,
) -> NutritionInferenceService:
    return NutritionInferenceService(
        client=inference_client,
        model="gpt-5.2",
        reasoning_effort="medium",
        store=False,
        retry_delay_seconds=0,
    )


@pytest.fixture
def food_log_service(
    user_service: UserService,
    inference_service: NutritionInferenceService,
    food_repository: InMemoryFoodRepository,
    entry_repository: InMemoryEntryRepository,
) -> FoodLogService:
    return FoodLogService(
        user_service=user_service,
        inference_service=inference_service,
        food_repository=food_repository,
        entry_repository=entry_repository,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_service: UserService,
    goal_repository: InMemoryGoalRepository,
    aggregator: DailyAggregator,
    inference_service: NutritionInferenceService,
    food_log_service: FoodLogService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=user_service,
        goal_service=GoalService(goal_repository, user_service),
        daily_aggregator=aggregator,
        inference_service=inference_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )


def make_entry(  # noqa: PLR0913
    user_id: UUID,
    profile: NutrientProfile,
    quantity_grams: float,
    meal_type: MealType = MealType.LUNCH,
    entry_date: date = TODAY,
    food_name: str = "Food",
) -> NewFoodEntry:
    """Build a new entry for seeding repositories directly."""
    return NewFoodEntry(
        user_id=user_id,
        food_id=None,
        food_name=food_name,
        nutrients=profile,
        quantity_grams=quantity_grams,
        meal_type=meal_type,
        entry_date=entry_date,
        recorded_at=FIXED_NOW,
    )
