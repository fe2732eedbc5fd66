"""Statistics derived from logged foods."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from calorie_tracker.domain.models import DayLog
from calorie_tracker.domain.stats import DailyTotals, DashboardSummary, WeekdayCalories
from calorie_tracker.services.users import UserDataService

WEEK_DAYS = 7

_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass
class StatsService:
    """Service for daily totals and the rolling week."""

    user_data_service: UserDataService

    def daily_stats(self, email: str, day: date) -> DailyTotals:
        """Return summed macros for a date; zeros when nothing was logged."""
        return _aggregate_day(self.user_data_service.get_log(email, day))

    def weekly_stats(self, email: str, today: date) -> list[WeekdayCalories]:
        """Return calories for the seven days ending at ``today``, oldest first."""
        logs = self.user_data_service.get_user(email).logs
        week = []
        for offset in range(WEEK_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            totals = _aggregate_day(logs.get(day) or DayLog())
            week.append(
                WeekdayCalories(
                    day=_WEEKDAY_LABELS[day.weekday()],
                    date=day,
                    calories=totals.calories,
                )
            )
        return week

    def dashboard(self, email: str, day: date) -> DashboardSummary:
        """Return goals, consumption and the day's foods newest first."""
        record = self.user_data_service.get_user(email)
        log = record.logs.get(day) or DayLog()
        consumed = _aggregate_day(log)
        goals = record.profile.goals
        return DashboardSummary(
            date=day,
            goals=goals,
            consumed=consumed,
            calories_left=goals.calories - consumed.calories,
            streak_count=record.streak.count,
            foods=list(reversed(log.foods)),
        )


def local_today(timezone_name: str, now: datetime | None = None) -> date:
    """Return the current calendar date in a timezone."""
    current = now or datetime.now(tz=UTC)
    return current.astimezone(ZoneInfo(timezone_name)).date()


def _aggregate_day(log: DayLog) -> DailyTotals:
    return DailyTotals(
        calories=sum(food.calories for food in log.foods),
        protein=sum(food.protein for food in log.foods),
        carbs=sum(food.carbs for food in log.foods),
        fats=sum(food.fats for food in log.foods),
    )
