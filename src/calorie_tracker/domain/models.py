"""Persisted user documents for the calorie tracker."""

from datetime import date, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

DEFAULT_PROFILE_NAME = "User"


def new_record_id() -> str:
    """Return a random identifier for users and food entries."""
    return uuid4().hex


class Goals(BaseModel):
    """Daily nutrition targets."""

    calories: int = 2000
    protein: int = 150
    carbs: int = 200
    fats: int = 70


class Profile(BaseModel):
    """Display name and goals for a user."""

    name: str = DEFAULT_PROFILE_NAME
    goals: Goals = Field(default_factory=Goals)
    joined: datetime | None = None


class Streak(BaseModel):
    """Count of distinct days with at least one logged food."""

    count: int = Field(default=0, ge=0)
    last_logged_date: date | None = None


class FoodInput(BaseModel):
    """Food data supplied by a caller before it is logged."""

    name: str = Field(min_length=1)
    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fats: int = Field(default=0, ge=0)
    image: str | None = None


class FoodEntry(FoodInput):
    """A logged food with its generated identity."""

    id: str = Field(default_factory=new_record_id)
    timestamp: datetime


class DayLog(BaseModel):
    """Foods logged on one calendar date, in insertion order."""

    foods: list[FoodEntry] = Field(default_factory=list)


class UserRecord(BaseModel):
    """Whole per-user document stored under the data key."""

    id: str = Field(default_factory=new_record_id)
    email: str
    password_hash: str | None = None
    profile: Profile = Field(default_factory=Profile)
    logs: dict[date, DayLog] = Field(default_factory=dict)
    streak: Streak = Field(default_factory=Streak)
    version: int = 0
