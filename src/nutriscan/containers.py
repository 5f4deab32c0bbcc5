"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutriscan.adapters.openai_inference_client import OpenAIInferenceClient
from nutriscan.adapters.supabase_entry_repository import SupabaseEntryRepository
from nutriscan.adapters.supabase_food_repository import SupabaseFoodRepository
from nutriscan.adapters.supabase_goal_repository import SupabaseGoalRepository
from nutriscan.adapters.supabase_summary_repository import SupabaseSummaryRepository
from nutriscan.adapters.supabase_user_repository import SupabaseUserRepository
from nutriscan.config import Settings
from nutriscan.services.aggregation import DailyAggregator
from nutriscan.services.food_log import FoodLogService
from nutriscan.services.goals import GoalService
from nutriscan.services.inference import NutritionInferenceService
from nutriscan.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    goal_service: GoalService
    daily_aggregator: DailyAggregator
    inference_service: NutritionInferenceService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    entry_repository = SupabaseEntryRepository(supabase_client)
    summary_repository = SupabaseSummaryRepository(supabase_client)
    food_repository = SupabaseFoodRepository(supabase_client)

    user_service = UserService(
        user_repository, default_timezone=resolved_settings.default_timezone
    )
    goal_service = GoalService(goal_repository, user_service)
    daily_aggregator = DailyAggregator(
        user_service=user_service,
        entry_repository=entry_repository,
        goal_repository=goal_repository,
        summary_repository=summary_repository,
        eager_recompute_on_delete=resolved_settings.eager_recompute_on_delete,
    )
    openai_client = OpenAIInferenceClient.create(resolved_settings.openai_api_key)
    inference_service = NutritionInferenceService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_log_service = FoodLogService(
        user_service=user_service,
        inference_service=inference_service,
        food_repository=food_repository,
        entry_repository=entry_repository,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        goal_service=goal_service,
        daily_aggregator=daily_aggregator,
        inference_service=inference_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
