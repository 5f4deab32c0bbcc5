"""User goal and profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from nutriscan.api.dependencies import current_user_id, require_api_token
from nutriscan.api.models import GoalsUpdateRequest, ProfileUpdateRequest

if TYPE_CHECKING:
    from nutriscan.containers import AppContainer
    from nutriscan.domain.goals import Goal
    from nutriscan.domain.models import UserRecord

router = APIRouter(
    prefix="/user", tags=["user"], dependencies=[Depends(require_api_token)]
)


@router.get("/goals")
def get_goals(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the caller's daily goals."""
    container: AppContainer = request.app.state.container
    goal = container.goal_service.get_goals(user_id)
    return {"success": True, "data": format_goal(goal)}


@router.put("/goals")
def update_goals(
    payload: GoalsUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Update some or all of the caller's daily goals."""
    container: AppContainer = request.app.state.container
    goal = container.goal_service.update_goals(
        user_id, payload.model_dump(exclude_none=True)
    )
    return {"success": True, "data": format_goal(goal)}


def format_goal(goal: Goal) -> dict[str, float]:
    """Format goals using the request field names."""
    return {
        "dailyCaloricGoal": goal.calories,
        "proteinGoalGrams": goal.protein_g,
        "carbsGoalGrams": goal.carbs_g,
        "fatsGoalGrams": goal.fats_g,
        "waterIntakeGoalMl": goal.water_ml,
    }


@router.get("/profile")
def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the caller's profile."""
    container: AppContainer = request.app.state.container
    user = container.user_service.get_profile(user_id)
    return {"success": True, "data": format_profile(user)}


@router.put("/profile")
def update_profile(
    payload: ProfileUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Update some or all of the caller's profile fields."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_profile(
        user_id, payload.model_dump(exclude_none=True)
    )
    return {"success": True, "data": format_profile(user)}


def format_profile(user: UserRecord) -> dict[str, object]:
    return {
        "id": str(user.id),
        "fullName": user.full_name,
        "age": user.age,
        "gender": user.gender.value if user.gender else None,
        "timezone": user.timezone,
        "healthConditions": user.health_conditions,
        "allergies": user.allergies,
        "dietaryPreferences": user.dietary_preferences,
    }
