"""Nutrition inference service using LLMs."""

import asyncio
import base64
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from nutriscan.domain.inference import InferredFood
from nutriscan.domain.nutrition import FoodCategory
from nutriscan.errors import UpstreamInferenceError

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "minimum": 0}

INFERENCE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "found": {"type": "boolean"},
        "food_name": {"type": "string"},
        "category": {"type": "string", "enum": [c.value for c in FoodCategory]},
        "estimated_quantity_grams": {"anyOf": [_NUMBER, {"type": "null"}]},
        "calories_per_100g": _NUMBER,
        "protein_g": _NUMBER,
        "carbs_g": _NUMBER,
        "fats_g": _NUMBER,
        "fiber_g": _NUMBER,
        "sugar_g": _NUMBER,
        "sodium_mg": _NUMBER,
        "allergens": {"type": "array", "items": {"type": "string"}},
        "ingredients": {"type": "array", "items": {"type": "string"}},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": [
        "found",
        "food_name",
        "category",
        "estimated_quantity_grams",
        "calories_per_100g",
        "protein_g",
        "carbs_g",
        "fats_g",
        "fiber_g",
        "sugar_g",
        "sodium_mg",
        "allergens",
        "ingredients",
        "confidence",
    ],
    "additionalProperties": False,
}

_TEXT_PROMPT = (
    "Provide nutritional information for the food named {name!r}. "
    "All nutrient values are per 100 grams; sodium in milligrams. "
    "List common allergens and typical ingredients. "
    "Set found to false if this is not a recognizable food."
)

_IMAGE_PROMPT = (
    "Identify the main food in this image and estimate its nutritional content "
    "per 100 grams (sodium in milligrams) and the portion size in grams. "
    "List common allergens and visible or typical ingredients. "
    "Set found to false if no food is visible."
)


class InferenceClient(Protocol):
    """Interface for LLM nutrition inference."""

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
        """Return structured nutrition data."""


@dataclass
class NutritionInferenceService:
    """Service that prepares inference prompts and validates results.

    Returns None when the provider reports no recognizable food and raises
    UpstreamInferenceError when the provider fails or its answer is unusable.
    """

    client: InferenceClient
    model: str
    reasoning_effort: str | None
    store: bool
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def infer_from_text(self, food_name: str) -> InferredFood | None:
        """Estimate nutrition for a food name."""
        return await self._infer(
            prompt=_TEXT_PROMPT.format(name=food_name),
            image_data_url=None,
            action="text",
        )

    async def infer_from_image(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> InferredFood | None:
        """Estimate nutrition for the food shown in an image."""
        return await self._infer(
            prompt=_IMAGE_PROMPT,
            image_data_url=_to_data_url(image_bytes, mime_type),
            action="image",
        )

    async def _infer(
        self, *, prompt: str, image_data_url: str | None, action: str
    ) -> InferredFood | None:
        try:
            raw = await self._call_with_retry(
                lambda: self.client.infer(
                    model=self.model,
                    reasoning_effort=self.reasoning_effort,
                    store=self.store,
                    prompt=prompt,
                    schema=INFERENCE_SCHEMA,
                    image_data_url=image_data_url,
                ),
                action=action,
            )
        except Exception as exc:
            _logger.exception("Nutrition inference failed (%s)", action)
            raise UpstreamInferenceError("Could not analyze the food") from exc

        try:
            result = InferredFood.model_validate(raw)
        except PydanticValidationError as exc:
            _logger.warning("Unparsable inference response (%s): %s", action, exc)
            raise UpstreamInferenceError("Could not analyze the food") from exc

        name = result.food_name.strip()
        if not result.found or not name or "not found" in name.lower():
            return None
        return result

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Inference %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
