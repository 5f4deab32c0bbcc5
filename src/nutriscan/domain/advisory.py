"""Domain models for allergen and health advisories."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Advisory:
    """Advisory attached to a food entry at creation time."""

    detected_allergens: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    suitability: str = "neutral"

    @property
    def allergen_warning(self) -> bool:
        """Return True when any user allergen matched."""
        return bool(self.detected_allergens)
