"""Food recognition from photos with offline fallbacks."""

import asyncio
import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.errors import ExternalServiceError
from calorie_tracker.domain.recognition import (
    NutritionEstimate,
    RecognitionResult,
    RecognitionSource,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0

RECOGNITION_PROMPT = (
    "Analyze this image. Identify the food item. "
    "Return ONLY a valid JSON object with these fields: name (string), "
    "calories (number), protein (number), carbs (number), fats (number). "
    "Do not wrap in markdown code blocks."
)

OFFLINE_ESTIMATE = NutritionEstimate(
    name="Simulated Meal (Network/API Error)",
    calories=400,
    protein=20,
    carbs=45,
    fats=15,
)
UNPARSED_ESTIMATE = NutritionEstimate(
    name="Detected Food",
    calories=250,
    protein=10,
    carbs=20,
    fats=10,
)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class RecognitionClient(Protocol):
    """Interface for the multimodal recognition endpoint."""

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Return the endpoint's free-form text answer for an image."""


class UnconfiguredRecognitionClient(RecognitionClient):
    """Client used when no endpoint credentials are configured."""

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Fail so the caller falls back to the offline estimate."""
        raise ExternalServiceError("Recognition endpoint is not configured")


@dataclass
class FoodRecognitionService:
    """Turns a food photo into a nutrition estimate.

    The endpoint call is raced against ``timeout_seconds``. A slow or failing
    endpoint yields ``OFFLINE_ESTIMATE`` and an answer that cannot be parsed
    yields ``UNPARSED_ESTIMATE``, so ``recognize`` always returns a result.
    """

    client: RecognitionClient
    model: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    async def recognize(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> RecognitionResult:
        """Estimate nutrition for an image."""
        data_url = to_data_url(image_bytes, mime_type)
        try:
            text = await asyncio.wait_for(
                self.client.analyze(
                    model=self.model,
                    prompt=RECOGNITION_PROMPT,
                    image_data_url=data_url,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "Recognition timed out after %.1fs; using offline estimate",
                self.timeout_seconds,
            )
            return RecognitionResult(OFFLINE_ESTIMATE, RecognitionSource.OFFLINE)
        except ExternalServiceError as exc:
            logger.warning("Recognition failed (%s); using offline estimate", exc)
            return RecognitionResult(OFFLINE_ESTIMATE, RecognitionSource.OFFLINE)
        except Exception:
            logger.exception("Recognition client raised; using offline estimate")
            return RecognitionResult(OFFLINE_ESTIMATE, RecognitionSource.OFFLINE)

        try:
            estimate = parse_estimate(text)
        except ValueError as exc:
            logger.warning("Could not parse recognition answer (%s)", exc)
            return RecognitionResult(UNPARSED_ESTIMATE, RecognitionSource.UNPARSED)
        return RecognitionResult(estimate, RecognitionSource.MODEL)


def parse_estimate(text: str) -> NutritionEstimate:
    """Parse a JSON nutrition object, tolerating markdown code fences."""
    cleaned = _CODE_FENCE.sub("", text).strip()
    payload = json.loads(cleaned)
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    return NutritionEstimate.model_validate(payload)


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
