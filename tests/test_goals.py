"""Tests for goal service."""

from uuid import uuid4

import pytest

from nutriscan.domain.goals import Goal
from nutriscan.errors import NotFoundError, ValidationError
from nutriscan.services.goals import GoalService
from nutriscan.services.users import UserService
from tests.conftest import InMemoryGoalRepository


def test_get_goals_defaults(
    user_service: UserService, goal_repository: InMemoryGoalRepository, user
) -> None:
    service = GoalService(goal_repository, user_service)

    assert service.get_goals(user.id) == Goal()


def test_get_goals_unknown_user(
    user_service: UserService, goal_repository: InMemoryGoalRepository
) -> None:
    service = GoalService(goal_repository, user_service)

    with pytest.raises(NotFoundError):
        service.get_goals(uuid4())


def test_update_goals_partial(
    user_service: UserService, goal_repository: InMemoryGoalRepository, user
) -> None:
    service = GoalService(goal_repository, user_service)

    updated = service.update_goals(user.id, {"calories": 1800, "water_ml": None})

    assert updated.calories == 1800
    assert updated.water_ml == Goal().water_ml
    assert goal_repository.goals[user.id] == updated


@pytest.mark.parametrize(
    "changes", [{"calories": 0}, {"protein_g": -1}, {"steps": 10000}]
)
def test_update_goals_rejects_invalid(
    user_service: UserService,
    goal_repository: InMemoryGoalRepository,
    user,
    changes: dict[str, float],
) -> None:
    service = GoalService(goal_repository, user_service)

    with pytest.raises(ValidationError):
        service.update_goals(user.id, changes)

    assert goal_repository.goals == {}
