import pytest

from app.errors import Conflict, IdentifierExhausted, ValidationFailed
from app.models.user import UserRole
from app.services import accounts

from conftest import make_settings


def test_roles_are_totally_ordered():
    assert UserRole.prime_admin.satisfies(UserRole.admin)
    assert UserRole.prime_admin.satisfies(UserRole.user)
    assert UserRole.admin.satisfies(UserRole.admin)
    assert not UserRole.admin.satisfies(UserRole.prime_admin)
    assert not UserRole.user.satisfies(UserRole.admin)
    assert UserRole.user.satisfies("user")
    assert [r.is_elevated for r in UserRole] == [False, True, True]


def test_ids_follow_role_ranges(make_user):
    student = make_user()
    admin = make_user(email="admin@campusride.com", role=UserRole.admin)
    assert 10_000_000 <= student.id <= 99_999_999
    assert 1_000_000_000 <= admin.id <= 9_999_999_999


def test_new_user_gets_default_credits_admin_does_not(make_user):
    assert make_user().credits == 500
    assert make_user(email="admin@campusride.com", role=UserRole.admin).credits == 0


def test_id_generation_is_bounded(session_factory, make_user, monkeypatch):
    taken = make_user()
    calls = []

    def always_taken(role):
        calls.append(role)
        return taken.id

    monkeypatch.setattr(accounts, "_random_id", always_taken)
    with session_factory() as db:
        with pytest.raises(IdentifierExhausted):
            accounts.allocate_user_id(db, UserRole.user, max_attempts=4)
    assert len(calls) == 4


def test_id_collision_is_redrawn(session_factory, make_user, monkeypatch):
    taken = make_user()
    draws = iter([taken.id, taken.id, 12_345_678])
    monkeypatch.setattr(accounts, "_random_id", lambda role: next(draws))
    with session_factory() as db:
        assert accounts.allocate_user_id(db, UserRole.user) == 12_345_678


def test_email_is_unique_case_insensitively(make_user):
    make_user(email="dup@bennett.edu.in")
    with pytest.raises(Conflict):
        make_user(email="  DUP@bennett.edu.in ")


def test_only_one_prime_admin(make_user):
    make_user(email="prime@campusride.com", role=UserRole.prime_admin)
    with pytest.raises(Conflict):
        make_user(email="prime2@campusride.com", role=UserRole.prime_admin)


def test_password_less_account_cannot_be_elevated(make_user):
    with pytest.raises(ValidationFailed):
        make_user(email="g@campusride.com", password=None, google_id="google-1", role=UserRole.admin)
    user = make_user(email="g@bennett.edu.in", password=None, google_id="google-1")
    assert user.hashed_password is None
    assert not user.has_password


def test_institutional_domain_check():
    settings = make_settings()
    accounts.check_institutional_email("A@Bennett.edu.in", settings)
    with pytest.raises(ValidationFailed):
        accounts.check_institutional_email("a@gmail.com", settings)
    with pytest.raises(ValidationFailed):
        accounts.check_institutional_email("a@notbennett.edu.in.evil.com", settings)


def test_id_race_is_not_reported_as_email_conflict(make_user, monkeypatch):
    taken = make_user()
    monkeypatch.setattr(accounts, "allocate_user_id", lambda db, role, max_attempts=10: taken.id)
    with pytest.raises(Conflict) as exc_info:
        make_user(email="fresh@bennett.edu.in")
    assert "email" not in exc_info.value.detail


def test_email_race_is_reported_as_email_conflict(make_user, monkeypatch):
    make_user(email="dup@bennett.edu.in")
    monkeypatch.setattr(accounts, "ensure_email_available", lambda db, email, exclude_user_id=None: None)
    with pytest.raises(Conflict) as exc_info:
        make_user(email="dup@bennett.edu.in")
    assert exc_info.value.detail == "User with this email already exists"
