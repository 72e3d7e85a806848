from datetime import datetime, timedelta, timezone

import pytest

from app.models.user import User
from app.services import otp
from app.services.otp import OtpResult, check_code, generate_code, issue_code

from conftest import make_settings

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user():
    return User(id=12345678, email="a@bennett.edu.in")


def test_generate_code_is_fixed_length_digits():
    for _ in range(50):
        code = generate_code(6)
        assert len(code) == 6
        assert code.isdigit()


def test_generate_code_rejects_non_positive_length():
    with pytest.raises(ValueError):
        generate_code(0)


def test_issue_code_sets_five_minute_window(user):
    code = issue_code(user, make_settings(), now=NOW)
    assert user.otp_code == code
    assert user.otp_expires_at == NOW + timedelta(minutes=5)


def test_code_is_single_use(user):
    code = issue_code(user, make_settings(), now=NOW)
    assert check_code(user, code, now=NOW + timedelta(minutes=1)) is OtpResult.ok
    assert user.otp_code is None
    assert user.otp_expires_at is None
    assert check_code(user, code, now=NOW + timedelta(minutes=2)) is not OtpResult.ok


def test_expired_code_fails_even_when_matching(user):
    code = issue_code(user, make_settings(), now=NOW)
    assert check_code(user, code, now=NOW + timedelta(minutes=5)) is OtpResult.expired
    assert check_code(user, code, now=NOW + timedelta(minutes=30)) is OtpResult.expired


def test_mismatch_keeps_stored_code(user):
    code = issue_code(user, make_settings(), now=NOW)
    wrong = "000000" if code != "000000" else "111111"
    assert check_code(user, wrong, now=NOW) is OtpResult.mismatch
    assert check_code(user, "", now=NOW) is OtpResult.mismatch
    assert check_code(user, code, now=NOW) is OtpResult.ok


def test_missing_code(user):
    assert check_code(user, "123456", now=NOW) is OtpResult.missing


def test_reissue_invalidates_previous_code(user, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp, "generate_code", lambda length=6: next(codes))
    settings = make_settings()
    first = issue_code(user, settings, now=NOW)
    second = issue_code(user, settings, now=NOW + timedelta(minutes=1))
    assert check_code(user, first, now=NOW + timedelta(minutes=2)) is OtpResult.mismatch
    assert check_code(user, second, now=NOW + timedelta(minutes=2)) is OtpResult.ok


def test_naive_stored_expiry_is_treated_as_utc(user):
    user.otp_code = "123456"
    user.otp_expires_at = datetime(2026, 1, 1, 12, 5)
    assert check_code(user, "123456", now=NOW + timedelta(minutes=6)) is OtpResult.expired
    assert check_code(user, "123456", now=NOW) is OtpResult.ok


def test_code_is_logged_only_in_development(user, caplog):
    caplog.set_level("INFO", logger="app.services.otp")
    code = issue_code(user, make_settings(app_env="production"), now=NOW)
    assert code not in caplog.text
    code = issue_code(user, make_settings(app_env="development"), now=NOW)
    assert code in caplog.text
