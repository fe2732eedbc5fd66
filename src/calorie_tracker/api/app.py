"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.auth import require_session
from calorie_tracker.api.auth import router as auth_router
from calorie_tracker.api.models import CalorieGoalUpdate, ThemeUpdate
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import (
    StaleRecordError,
    UnreadableDataError,
    ValidationError,
)
from calorie_tracker.domain.models import DayLog, FoodInput
from calorie_tracker.domain.sessions import SessionRecord
from calorie_tracker.domain.stats import DailyTotals, DashboardSummary
from calorie_tracker.services.stats import local_today
from calorie_tracker.services.users import parse_calorie_goal


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)

    @app.exception_handler(ValidationError)
    async def validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StaleRecordError)
    async def stale_record(_request: Request, exc: StaleRecordError) -> JSONResponse:
        logger.warning("Rejected stale write: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UnreadableDataError)
    async def unreadable_data(
        _request: Request, exc: UnreadableDataError
    ) -> JSONResponse:
        logger.error("Refused to overwrite stored data: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Stored data is unreadable"},
        )

    def today() -> date:
        return local_today(container.settings.timezone)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dashboard")
    async def dashboard(
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Return today's goals, totals, streak and foods."""
        summary = container.stats_service.dashboard(session.email, today())
        return _serialize_dashboard(summary)

    @app.get("/stats/daily")
    async def daily_stats(
        day: date | None = Query(default=None, alias="date"),
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Return summed macros for a date, defaulting to today."""
        resolved = day or today()
        totals = container.stats_service.daily_stats(session.email, resolved)
        return {"date": resolved.isoformat(), **_serialize_totals(totals)}

    @app.get("/stats/weekly")
    async def weekly_stats(
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Return calories for the last seven days, oldest first."""
        week = container.stats_service.weekly_stats(session.email, today())
        return {
            "days": [
                {
                    "day": entry.day,
                    "date": entry.date.isoformat(),
                    "calories": entry.calories,
                }
                for entry in week
            ]
        }

    @app.get("/logs/{day}")
    async def day_log(
        day: date,
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Return the foods logged on a date."""
        log = container.user_data_service.get_log(session.email, day)
        return _serialize_log(day, log)

    @app.put("/goals/calories")
    async def update_calorie_goal(
        body: CalorieGoalUpdate,
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Set the daily calorie goal."""
        calories = parse_calorie_goal(body.calories)
        goals = container.user_data_service.update_goal(session.email, calories)
        return {"goals": goals.model_dump()}

    @app.post("/foods")
    async def add_food(
        food: FoodInput,
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Log a food entered by hand for today."""
        day = today()
        log = container.user_data_service.add_food(session.email, food, day)
        return _serialize_log(day, log)

    @app.post("/foods/photo")
    async def add_food_photo(
        request: Request,
        session: SessionRecord = Depends(require_session),
    ) -> dict[str, object]:
        """Recognize the food in an uploaded photo and log it for today."""
        image = await request.body()
        if not image:
            raise ValidationError("Image body is empty")
        content_type = request.headers.get("content-type", "")
        mime_type = content_type if content_type.startswith("image/") else None
        day = today()
        logged = await container.food_log_service.log_photo(
            session.email, image, day, mime_type=mime_type
        )
        return {
            "entry": logged.entry.model_dump(mode="json"),
            "source": logged.source.value,
            **_serialize_log(day, logged.log),
        }

    @app.get("/theme")
    async def get_theme() -> dict[str, str]:
        """Return the stored theme."""
        return {"theme": container.theme_service.get_theme().value}

    @app.put("/theme")
    async def set_theme(body: ThemeUpdate) -> dict[str, str]:
        """Store a theme choice."""
        return {"theme": container.theme_service.set_theme(body.theme).value}

    @app.post("/theme/toggle")
    async def toggle_theme() -> dict[str, str]:
        """Switch between light and dark."""
        return {"theme": container.theme_service.toggle_theme().value}

    return app


def _serialize_totals(totals: DailyTotals) -> dict[str, int]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fats": totals.fats,
    }


def _serialize_log(day: date, log: DayLog) -> dict[str, object]:
    return {"date": day.isoformat(), **log.model_dump(mode="json")}


def _serialize_dashboard(summary: DashboardSummary) -> dict[str, object]:
    return {
        "date": summary.date.isoformat(),
        "goals": summary.goals.model_dump(),
        "consumed": _serialize_totals(summary.consumed),
        "calories_left": summary.calories_left,
        "streak": summary.streak_count,
        "foods": [food.model_dump(mode="json") for food in summary.foods],
    }
