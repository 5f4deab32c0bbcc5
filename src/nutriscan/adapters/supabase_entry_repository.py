"""Supabase repository for logged food entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from nutriscan.adapters.supabase_errors import storage_errors
from nutriscan.domain.entries import FoodEntry, NewFoodEntry
from nutriscan.domain.nutrition import MealType, NutrientProfile
from nutriscan.errors import StorageError
from nutriscan.services.entries import EntryRepository

_COLUMNS = (
    "id, user_id, food_id, food_name, nutrient_snapshot, quantity_grams, "
    "meal_type, entry_date, recorded_at, detected_allergens, allergen_warning, "
    "advisory_tags, confidence"
)


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for food entries."""

    client: Client

    def list_by_user_and_date(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return the user's entries attributed to a date."""
        with storage_errors("list food entries"):
            response = (
                self.client.table("food_entries")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .eq("entry_date", day.isoformat())
                .order("recorded_at", desc=False)
                .execute()
            )
        return [_parse_entry(row) for row in response.data or []]

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        """Insert an entry row and return it."""
        with storage_errors("create food entry"):
            response = (
                self.client.table("food_entries")
                .insert(
                    {
                        "user_id": str(entry.user_id),
                        "food_id": str(entry.food_id) if entry.food_id else None,
                        "food_name": entry.food_name,
                        "nutrient_snapshot": entry.nutrients.to_dict(),
                        "quantity_grams": entry.quantity_grams,
                        "meal_type": entry.meal_type.value,
                        "entry_date": entry.entry_date.isoformat(),
                        "recorded_at": entry.recorded_at.isoformat(),
                        "detected_allergens": entry.detected_allergens,
                        "allergen_warning": entry.allergen_warning,
                        "advisory_tags": entry.advisory_tags,
                        "confidence": entry.confidence,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to create food entry")
        return _parse_entry(response.data[0])

    def delete_one(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Delete the entry only when it belongs to the user."""
        with storage_errors("delete food entry"):
            response = (
                self.client.table("food_entries")
                .delete()
                .eq("id", str(entry_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            return None
        return _parse_entry(response.data[0])


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    snapshot = row.get("nutrient_snapshot") or {}
    confidence = row.get("confidence")
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_id=UUID(str(row["food_id"])) if row.get("food_id") else None,
        food_name=str(row.get("food_name", "")),
        nutrients=NutrientProfile.from_dict(
            snapshot if isinstance(snapshot, dict) else {}
        ),
        quantity_grams=float(row.get("quantity_grams", 0.0)),
        meal_type=MealType(str(row["meal_type"])),
        entry_date=date.fromisoformat(str(row["entry_date"])),
        recorded_at=datetime.fromisoformat(str(row["recorded_at"])),
        detected_allergens=list(row.get("detected_allergens") or []),
        allergen_warning=bool(row.get("allergen_warning", False)),
        advisory_tags=list(row.get("advisory_tags") or []),
        confidence=float(confidence) if confidence is not None else None,
    )
