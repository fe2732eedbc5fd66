"""Photo-to-log food flow."""

from dataclasses import dataclass
from datetime import date

from calorie_tracker.domain.models import DayLog, FoodEntry, FoodInput
from calorie_tracker.domain.recognition import RecognitionSource
from calorie_tracker.services.recognition import FoodRecognitionService, to_data_url
from calorie_tracker.services.users import UserDataService


@dataclass(frozen=True)
class LoggedFood:
    """A food logged from a photo."""

    entry: FoodEntry
    log: DayLog
    source: RecognitionSource


@dataclass
class FoodLogService:
    """Recognizes a photo and appends the result to the day's log."""

    recognition_service: FoodRecognitionService
    user_data_service: UserDataService

    async def log_photo(
        self,
        email: str,
        image_bytes: bytes,
        day: date,
        mime_type: str | None = None,
    ) -> LoggedFood:
        """Log the food in a photo; placeholders are logged when recognition fails."""
        result = await self.recognition_service.recognize(image_bytes, mime_type)
        food = FoodInput(
            **result.estimate.model_dump(),
            image=to_data_url(image_bytes, mime_type),
        )
        log = self.user_data_service.add_food(email, food, day)
        return LoggedFood(entry=log.foods[-1], log=log, source=result.source)
