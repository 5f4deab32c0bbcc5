"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutriscan.adapters.supabase_errors import storage_errors
from nutriscan.domain.models import Gender, UserRecord
from nutriscan.services.users import UserRepository

_COLUMNS = (
    "id, timezone, allergies, health_conditions, full_name, age, gender, "
    "dietary_preferences"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user profile, if present."""
        with storage_errors("get user"):
            response = (
                self.client.table("users")
                .select(_COLUMNS)
                .eq("id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def save(self, user: UserRecord) -> UserRecord:
        """Write the editable profile columns of an existing user."""
        payload = {
            "timezone": user.timezone,
            "allergies": user.allergies,
            "health_conditions": user.health_conditions,
            "full_name": user.full_name,
            "age": user.age,
            "gender": user.gender.value if user.gender else None,
            "dietary_preferences": user.dietary_preferences,
        }
        with storage_errors("update user"):
            response = (
                self.client.table("users")
                .update(payload)
                .eq("id", str(user.id))
                .execute()
            )
        if not response.data:
            return user
        return _parse_user(response.data[0])


def _parse_user(row: dict) -> UserRecord:
    gender = row.get("gender")
    return UserRecord(
        id=UUID(row["id"]),
        timezone=row.get("timezone"),
        allergies=list(row.get("allergies") or []),
        health_conditions=list(row.get("health_conditions") or []),
        full_name=row.get("full_name"),
        age=row.get("age"),
        gender=Gender(gender) if gender else None,
        dietary_preferences=list(row.get("dietary_preferences") or []),
    )
