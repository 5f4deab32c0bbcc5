"""Supabase repository for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutriscan.adapters.supabase_errors import storage_errors
from nutriscan.domain.nutrition import Food, FoodCategory, NutrientProfile
from nutriscan.errors import StorageError
from nutriscan.services.food_log import FoodRepository

_COLUMNS = (
    "id, name, category, source, calories_per_100g, protein_g, carbs_g, fats_g, "
    "fiber_g, sugar_g, sodium_mg, allergens, ingredients"
)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for catalog foods."""

    client: Client

    def find_by_name(self, name: str) -> Food | None:
        """Return the food with exactly this name, ignoring case."""
        with storage_errors("find food"):
            response = (
                self.client.table("foods")
                .select(_COLUMNS)
                .ilike("name", _escape_like(name.strip()))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id."""
        with storage_errors("get food"):
            response = (
                self.client.table("foods")
                .select(_COLUMNS)
                .eq("id", str(food_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def search(self, query: str, limit: int) -> list[Food]:
        """Return foods whose name contains the query."""
        with storage_errors("search foods"):
            response = (
                self.client.table("foods")
                .select(_COLUMNS)
                .ilike("name", f"%{_escape_like(query.strip())}%")
                .order("name", desc=False)
                .limit(limit)
                .execute()
            )
        return [_parse_food(row) for row in response.data or []]

    def create_food(  # noqa: PLR0913
        self,
        name: str,
        category: FoodCategory,
        profile: NutrientProfile,
        source: str,
        allergens: list[str],
        ingredients: list[str],
    ) -> Food:
        """Insert a catalog food and return it."""
        with storage_errors("create food"):
            response = (
                self.client.table("foods")
                .insert(
                    {
                        "name": name,
                        "category": category.value,
                        "source": source,
                        "calories_per_100g": profile.calories,
                        "protein_g": profile.protein_g,
                        "carbs_g": profile.carbs_g,
                        "fats_g": profile.fats_g,
                        "fiber_g": profile.fiber_g,
                        "sugar_g": profile.sugar_g,
                        "sodium_mg": profile.sodium_mg,
                        "allergens": allergens,
                        "ingredients": ingredients,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to create food")
        return _parse_food(response.data[0])


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_food(row: dict[str, object]) -> Food:
    raw_category = str(row.get("category") or FoodCategory.OTHER.value)
    try:
        category = FoodCategory(raw_category)
    except ValueError:
        category = FoodCategory.OTHER
    return Food(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        category=category,
        profile=NutrientProfile(
            calories=float(row.get("calories_per_100g") or 0.0),
            protein_g=float(row.get("protein_g") or 0.0),
            carbs_g=float(row.get("carbs_g") or 0.0),
            fats_g=float(row.get("fats_g") or 0.0),
            fiber_g=float(row.get("fiber_g") or 0.0),
            sugar_g=float(row.get("sugar_g") or 0.0),
            sodium_mg=float(row.get("sodium_mg") or 0.0),
        ),
        source=str(row.get("source") or "inference"),
        allergens=list(row.get("allergens") or []),
        ingredients=list(row.get("ingredients") or []),
    )
