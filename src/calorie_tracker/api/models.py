"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel


class Credentials(BaseModel):
    """Email and password for signup or login."""

    email: str
    password: str


class CalorieGoalUpdate(BaseModel):
    """Raw calorie goal as typed by the user."""

    calories: int | float | str


class ThemeUpdate(BaseModel):
    """Requested theme name."""

    theme: str
