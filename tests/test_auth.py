import jwt
import pytest
from datetime import timedelta

from bharatgpt.config.settings import settings
from bharatgpt.services.auth_service import AuthError, AuthService, create_token, decode_token
from bharatgpt.utils.helpers import utcnow


def test_register_normalizes_email_and_hashes_password(db_session):
    user, token = AuthService(db_session).register("  Ravi@Example.COM ", "long-password", "Ravi")
    assert user.email == "ravi@example.com"
    assert user.role == "student"
    assert user.password_hash != "long-password"
    assert decode_token(token)["sub"] == str(user.id)


def test_register_rejects_short_password(db_session):
    with pytest.raises(ValueError):
        AuthService(db_session).register("a@example.com", "short")


def test_register_rejects_duplicate_email(db_session, student):
    with pytest.raises(ValueError, match="already"):
        AuthService(db_session).register("ASHA@example.com", "another-password")


def test_login_updates_last_sign_in(db_session, student):
    user, _ = student
    logged_in, token = AuthService(db_session).login("asha@example.com", "student-pass-123")
    assert logged_in.id == user.id
    assert logged_in.last_sign_in_at is not None
    assert decode_token(token)["role"] == "student"


def test_login_bad_password(db_session, student):
    with pytest.raises(ValueError):
        AuthService(db_session).login("asha@example.com", "wrong-password")


def test_login_disabled_account(db_session, student):
    user, _ = student
    user.is_active = False
    db_session.commit()
    with pytest.raises(PermissionError):
        AuthService(db_session).login("asha@example.com", "student-pass-123")


def test_expired_token_rejected(db_session, student):
    user, _ = student
    now = utcnow()
    expired = jwt.encode(
        {"sub": str(user.id), "role": "student", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(AuthError, match="expired"):
        AuthService(db_session).get_user_from_token(expired)


def test_token_for_missing_user(db_session):
    with pytest.raises(AuthError):
        AuthService(db_session).get_user_from_token(create_token(999, "student"))


def test_garbage_token(db_session):
    with pytest.raises(AuthError):
        AuthService(db_session).get_user_from_token("not-a-jwt")


def test_register_promotes_configured_admin_emails(db_session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["Owner@Example.com"])
    owner, _ = AuthService(db_session).register("owner@example.com", "long-password")
    other, _ = AuthService(db_session).register("other@example.com", "long-password")
    assert owner.role == "admin"
    assert other.role == "student"


def test_set_role(db_session, student):
    user, _ = student
    service = AuthService(db_session)
    assert service.set_role(user.id, "admin").role == "admin"
    assert service.set_role(9999, "admin") is None
    with pytest.raises(ValueError):
        service.set_role(user.id, "owner")
