"""Tests for signup, login and session expiry."""

from datetime import timedelta

from calorie_tracker.adapters.memory_store import InMemoryKeyValueStore
from calorie_tracker.domain.models import FoodInput
from calorie_tracker.services.sessions import SessionService
from calorie_tracker.services.storage import SESSION_KEY
from calorie_tracker.services.users import UserDataService
from tests.conftest import FakeClock


def test_signup_creates_user_and_logs_in(
    session_service: SessionService, user_data_service: UserDataService
) -> None:
    result = session_service.signup("jane.doe@example.com", "s3cret")

    assert result.success
    assert result.message == "Account created successfully"
    user = user_data_service.find_user("jane.doe@example.com")
    assert user is not None
    assert user.profile.name == "jane.doe"
    assert user.profile.joined is not None
    session = session_service.check_session()
    assert session is not None
    assert session.email == "jane.doe@example.com"
    assert session.user_id == user.id
    assert session.name == "jane.doe"


def test_signup_never_stores_plain_password(
    session_service: SessionService, store: InMemoryKeyValueStore
) -> None:
    session_service.signup("a@example.com", "hunter2-unique")

    assert all("hunter2-unique" not in value for value in store.values.values())


def test_signup_duplicate_email_fails_without_changes(
    session_service: SessionService, user_data_service: UserDataService
) -> None:
    session_service.signup("a@example.com", "first")
    before = user_data_service.get_user("a@example.com")

    result = session_service.signup("a@example.com", "second")

    assert not result.success
    assert result.message == "User already exists"
    after = user_data_service.get_user("a@example.com")
    assert after.model_dump() == before.model_dump()
    session_service.logout()
    assert session_service.login("a@example.com", "first").success
    assert not session_service.login("a@example.com", "second").success


def test_signup_claims_record_created_lazily(
    session_service: SessionService, user_data_service: UserDataService, clock
) -> None:
    user_data_service.add_food(
        "a@example.com", FoodInput(name="Toast"), clock.current.date()
    )

    result = session_service.signup("a@example.com", "pw")

    assert result.success
    user = user_data_service.get_user("a@example.com")
    assert user.password_hash
    assert user.streak.count == 1


def test_signup_requires_email_and_password(session_service: SessionService) -> None:
    assert not session_service.signup("", "pw").success
    assert not session_service.signup("a@example.com", "").success


def test_login_with_bad_credentials_keeps_state(
    session_service: SessionService,
) -> None:
    session_service.signup("a@example.com", "right")
    existing = session_service.check_session()

    result = session_service.login("a@example.com", "wrong")

    assert not result.success
    assert result.message == "Invalid credentials"
    assert session_service.check_session() == existing


def test_login_unknown_or_credentialless_user_fails(
    session_service: SessionService, user_data_service: UserDataService
) -> None:
    user_data_service.get_user("lazy@example.com")

    assert not session_service.login("nobody@example.com", "pw").success
    assert not session_service.login("lazy@example.com", "").success
    assert session_service.check_session() is None


def test_session_valid_until_expiry(
    session_service: SessionService, clock: FakeClock
) -> None:
    session_service.signup("a@example.com", "pw")
    session_service.logout()
    assert session_service.login("a@example.com", "pw").success

    clock.advance(timedelta(hours=23, minutes=59))
    assert session_service.check_session() is not None

    clock.advance(timedelta(minutes=2))
    assert session_service.check_session() is None


def test_expired_session_is_removed(
    session_service: SessionService,
    store: InMemoryKeyValueStore,
    clock: FakeClock,
) -> None:
    session_service.signup("a@example.com", "pw")
    clock.advance(timedelta(hours=25))

    assert session_service.require_session() is None
    assert SESSION_KEY not in store.values

    clock.advance(-timedelta(hours=25))
    assert session_service.check_session() is None


def test_logout_clears_session(session_service: SessionService) -> None:
    session_service.signup("a@example.com", "pw")
    assert session_service.is_authenticated()

    session_service.logout()

    assert not session_service.is_authenticated()
    session_service.logout()


def test_unreadable_session_is_discarded(
    session_service: SessionService, store: InMemoryKeyValueStore
) -> None:
    store.set(SESSION_KEY, "garbage")

    assert session_service.check_session() is None
    assert SESSION_KEY not in store.values


def test_custom_ttl(store: InMemoryKeyValueStore, clock: FakeClock) -> None:
    user_data_service = UserDataService(store, now=clock)
    service = SessionService(
        store=store,
        user_data_service=user_data_service,
        ttl=timedelta(minutes=30),
        password_iterations=1_000,
        now=clock,
    )
    service.signup("a@example.com", "pw")

    clock.advance(timedelta(minutes=31))

    assert service.check_session() is None
