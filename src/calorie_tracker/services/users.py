"""Persistence of per-user documents."""

import json
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime

import pydantic

from calorie_tracker.domain.errors import (
    StaleRecordError,
    UnreadableDataError,
    ValidationError,
)
from calorie_tracker.domain.models import (
    DayLog,
    FoodEntry,
    FoodInput,
    Goals,
    UserRecord,
)
from calorie_tracker.services.storage import DATA_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UserDataService:
    """Reads and writes whole user documents in the key-value store.

    Every mutating call reloads the document, applies its change and writes
    the document back. ``save_user`` refuses to overwrite a document whose
    stored version no longer matches the one the caller loaded. Records that
    fail to parse are left in the blob untouched; reads treat them as absent
    and writes to them raise ``UnreadableDataError``.
    """

    store: KeyValueStore
    now: Callable[[], datetime] = _utc_now

    def find_user(self, email: str) -> UserRecord | None:
        """Return the stored user for an email without creating one."""
        data = self._load_raw()
        if data is None or email not in data:
            return None
        return _parse_record(email, data[email])

    def get_user(self, email: str) -> UserRecord:
        """Return the user for an email, creating a default record if needed."""
        data = self._load_raw()
        if data is None:
            return UserRecord(email=email)
        if email in data:
            return _parse_record(email, data[email]) or UserRecord(email=email)

        created = UserRecord(email=email)
        data[email] = created.model_dump(mode="json")
        try:
            self._write_raw(data)
        except UnreadableDataError:
            logger.warning("Default record for %s was not persisted", email)
            return created
        logger.info("Created default user record for %s", email)
        return created

    def save_user(self, email: str, record: UserRecord) -> UserRecord:
        """Overwrite the stored document for an email and return it."""
        data = self._load_raw()
        if data is None:
            raise UnreadableDataError(
                "Stored user data is unreadable; refusing to overwrite it"
            )
        if email in data:
            current = _parse_record(email, data[email])
            if current is None:
                raise UnreadableDataError(
                    f"Stored record for {email} is unreadable; refusing to overwrite it"
                )
            if current.version != record.version:
                raise StaleRecordError(
                    f"User {email} changed since it was loaded "
                    f"(stored version {current.version}, got {record.version})"
                )

        saved = record.model_copy(update={"version": record.version + 1}, deep=True)
        data[email] = saved.model_dump(mode="json")
        self._write_raw(data)
        return saved

    def update_goal(self, email: str, calories: int) -> Goals:
        """Set the daily calorie goal and return the resulting goals."""
        record = self.get_user(email)
        record.profile.goals.calories = calories
        saved = self.save_user(email, record)
        return saved.profile.goals

    def get_log(self, email: str, day: date) -> DayLog:
        """Return the log for a date, or an empty unsaved log."""
        return self.get_user(email).logs.get(day) or DayLog()

    def add_food(self, email: str, food: FoodInput, day: date) -> DayLog:
        """Append a food to the log of the given date and return that log."""
        record = self.get_user(email)
        log = record.logs.get(day)
        if log is None:
            log = DayLog()
            record.logs[day] = log
            record.streak.count += 1
            record.streak.last_logged_date = day

        log.foods.append(FoodEntry(**food.model_dump(), timestamp=self.now()))
        saved = self.save_user(email, record)
        return saved.logs[day]

    def _load_raw(self) -> dict[str, object] | None:
        raw = self.store.get(DATA_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored user data is not valid JSON")
            return None
        if not isinstance(data, dict):
            logger.warning("Stored user data is not a JSON object")
            return None
        return data

    def _write_raw(self, data: dict[str, object]) -> None:
        self.store.set(DATA_KEY, json.dumps(data, ensure_ascii=False))


def _parse_record(email: str, entry: object) -> UserRecord | None:
    try:
        return UserRecord.model_validate(entry)
    except pydantic.ValidationError:
        logger.warning("Stored record for %s is unreadable", email)
        return None


def parse_calorie_goal(raw: object) -> int:
    """Parse a calorie goal typed by the user."""
    cleaned = str(raw).strip()
    try:
        number = float(cleaned)
    except ValueError as exc:
        raise ValidationError(
            f"Calorie goal must be a number, got {cleaned!r}"
        ) from exc
    if not math.isfinite(number) or number < 0:
        raise ValidationError(
            f"Calorie goal must be a non-negative number, got {cleaned!r}"
        )
    return int(number)
