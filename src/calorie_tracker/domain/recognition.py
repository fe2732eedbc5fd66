"""Models for food recognition results."""

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, field_validator

DEFAULT_FOOD_NAME = "Detected Food"


class RecognitionSource(str, Enum):
    """Which path produced a recognition result."""

    MODEL = "model"
    OFFLINE = "offline"
    UNPARSED = "unparsed"


class NutritionEstimate(BaseModel):
    """Nutrition values estimated from a food photo."""

    name: str = DEFAULT_FOOD_NAME
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fats: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def _default_blank_name(cls, value: object) -> str:
        if value is None:
            return DEFAULT_FOOD_NAME
        cleaned = str(value).strip()
        return cleaned or DEFAULT_FOOD_NAME

    @field_validator("calories", "protein", "carbs", "fats", mode="before")
    @classmethod
    def _clamp_non_negative(cls, value: object) -> int:
        return _to_non_negative_int(value)


@dataclass(frozen=True)
class RecognitionResult:
    """Estimate plus the path that produced it."""

    estimate: NutritionEstimate
    source: RecognitionSource

    @property
    def is_fallback(self) -> bool:
        """Return True when the estimate is a placeholder."""
        return self.source is not RecognitionSource.MODEL


def _to_non_negative_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(round(number), 0)
