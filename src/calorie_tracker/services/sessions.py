"""Login sessions backed by a single stored record."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pydantic

from calorie_tracker.domain.models import UserRecord
from calorie_tracker.domain.sessions import AuthResult, SessionRecord
from calorie_tracker.services.passwords import (
    DEFAULT_ITERATIONS,
    hash_password,
    verify_password,
)
from calorie_tracker.services.storage import SESSION_KEY, KeyValueStore
from calorie_tracker.services.users import UserDataService

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=24)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Signup, login and the one active session slot.

    The slot is either empty, active, or expired. An expired record is
    removed the next time it is read, so callers only ever see an active
    session or ``None``.
    """

    store: KeyValueStore
    user_data_service: UserDataService
    ttl: timedelta = DEFAULT_SESSION_TTL
    password_iterations: int = DEFAULT_ITERATIONS
    now: Callable[[], datetime] = _utc_now

    def signup(self, email: str, password: str) -> AuthResult:
        """Register credentials for an email and log the user in."""
        if not email or not password:
            return AuthResult(success=False, message="Email and password are required")

        existing = self.user_data_service.find_user(email)
        if existing is not None and existing.password_hash:
            return AuthResult(success=False, message="User already exists")

        record = existing or UserRecord(email=email)
        record.password_hash = hash_password(password, self.password_iterations)
        record.profile.name = email.split("@")[0]
        record.profile.joined = self.now()
        self.user_data_service.save_user(email, record)
        logger.info("Registered user %s", email)

        self.login(email, password)
        return AuthResult(success=True, message="Account created successfully")

    def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and start a new session."""
        record = self.user_data_service.find_user(email)
        if record is None or not verify_password(password, record.password_hash):
            logger.info("Rejected login for %s", email)
            return AuthResult(success=False, message="Invalid credentials")

        session = SessionRecord(
            user_id=record.id,
            email=record.email,
            name=record.profile.name,
            expiry=self.now() + self.ttl,
        )
        self.store.set(SESSION_KEY, session.model_dump_json())
        return AuthResult(success=True, message="Login successful")

    def logout(self) -> None:
        """Remove the stored session."""
        self.store.remove(SESSION_KEY)

    def check_session(self) -> SessionRecord | None:
        """Return the active session, dropping it once expired."""
        raw = self.store.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            session = SessionRecord.model_validate_json(raw)
        except pydantic.ValidationError:
            logger.warning("Discarding unreadable session record")
            self.logout()
            return None
        if self.now() > session.expiry:
            logger.info("Session for %s expired", session.email)
            self.logout()
            return None
        return session

    def require_session(self) -> SessionRecord | None:
        """Return the active session; callers treat ``None`` as signed out."""
        return self.check_session()

    def is_authenticated(self) -> bool:
        """Return True while a session is active."""
        return self.check_session() is not None
