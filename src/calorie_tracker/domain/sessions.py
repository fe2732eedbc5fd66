"""Domain models for login sessions."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel


class SessionRecord(BaseModel):
    """The single active login session."""

    user_id: str
    email: str
    name: str
    expiry: datetime


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a signup or login attempt."""

    success: bool
    message: str
