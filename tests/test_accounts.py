import pytest
from passlib.hash import bcrypt
from sqlmodel import select

from core.errors import DuplicateEntry, Forbidden, InvalidCredentials, NotFound, WeakPassword
from models.models import AccountStatus, AdminStatus, AuditLog, User
from services import account_service

from tests.conftest import PASSWORD


def test_create_account_normalizes_email_and_hashes_password(session):
    user = account_service.create_account(session, "  Bob@Example.COM ", PASSWORD, "Bob")

    assert user.email == "bob@example.com"
    assert user.plan == "Starter"
    assert user.role == "user"
    assert user.password_hash != PASSWORD
    assert user.password_hash.startswith("$argon2")


def test_duplicate_email_is_rejected(session, user):
    with pytest.raises(DuplicateEntry):
        account_service.create_account(session, "ALICE@example.com", "another-pass", "Other")

    rows = session.exec(select(User).where(User.email == "alice@example.com")).all()
    assert len(rows) == 1


def test_short_password_is_rejected(session):
    with pytest.raises(WeakPassword) as exc:
        account_service.create_account(session, "weak@example.com", "123", "Weak")
    assert "at least 6" in exc.value.message


def test_verify_credentials(session, user):
    assert account_service.verify_credentials(session, "alice@example.com", PASSWORD).id == user.id

    with pytest.raises(InvalidCredentials):
        account_service.verify_credentials(session, "alice@example.com", "wrong-password")
    with pytest.raises(InvalidCredentials):
        account_service.verify_credentials(session, "nobody@example.com", PASSWORD)


def test_password_change_invalidates_old_password(session, user):
    account_service.change_password(session, user.id, PASSWORD, "new-secret-1")

    with pytest.raises(InvalidCredentials):
        account_service.verify_credentials(session, user.email, PASSWORD)
    assert account_service.verify_credentials(session, user.email, "new-secret-1").id == user.id


def test_change_password_requires_current_password(session, user):
    with pytest.raises(InvalidCredentials) as exc:
        account_service.change_password(session, user.id, "not-it", "new-secret-1")
    assert exc.value.message == "Current password is incorrect"


def test_legacy_bcrypt_hash_is_upgraded_on_login(session, user):
    user.password_hash = bcrypt.hash(PASSWORD)
    session.add(user)
    session.commit()

    account_service.verify_credentials(session, user.email, PASSWORD)

    session.refresh(user)
    assert user.password_hash.startswith("$argon2")


def test_update_profile_only_touches_given_fields(session, user):
    changes = account_service.update_profile(session, user.id, {"name": "Alice B"})

    assert changes == {"name": "Alice B"}
    session.refresh(user)
    assert user.name == "Alice B"
    assert user.email == "alice@example.com"


def test_update_profile_duplicate_email(session, user, admin_user):
    with pytest.raises(DuplicateEntry):
        account_service.update_profile(session, user.id, {"email": admin_user.email})


def test_update_unknown_user(session):
    with pytest.raises(NotFound):
        account_service.update_profile(session, "missing", {"name": "x"})


def test_delete_account_returns_snapshot(session, user):
    snapshot = account_service.delete_account(session, user.id)

    assert snapshot["email"] == "alice@example.com"
    assert "password_hash" not in snapshot
    assert account_service.get_user(session, user.id) is None


def test_authenticate_admin_prefers_admins_table(session, separate_admin):
    account = account_service.authenticate_admin(session, "ops@example.com", PASSWORD)

    assert account.id == separate_admin.id
    assert account.last_login is not None
    entry = session.exec(select(AuditLog).where(AuditLog.action == "admin_login")).one()
    # Admins outside the users table are stored without an actor
    assert entry.user_id is None
    assert entry.entity_id == separate_admin.id


def test_authenticate_admin_falls_back_to_users(session, admin_user):
    account = account_service.authenticate_admin(session, admin_user.email, PASSWORD)
    assert account.id == admin_user.id


def test_authenticate_admin_rejects_regular_user(session, user):
    with pytest.raises(Forbidden):
        account_service.authenticate_admin(session, user.email, PASSWORD)

    actions = session.exec(select(AuditLog.action)).all()
    assert "admin_login_forbidden" in actions


def test_authenticate_admin_wrong_password_is_audited(session, admin_user):
    with pytest.raises(InvalidCredentials):
        account_service.authenticate_admin(session, admin_user.email, "wrong-password")

    actions = session.exec(select(AuditLog.action)).all()
    assert actions == ["admin_login_failed"]


def test_authenticate_admin_rejects_inactive_accounts(session, admin_user, separate_admin):
    admin_user.status = AccountStatus.CANCELLED
    separate_admin.status = AdminStatus.SUSPENDED
    session.add(admin_user)
    session.add(separate_admin)
    session.commit()

    with pytest.raises(Forbidden, match="cancelled"):
        account_service.authenticate_admin(session, admin_user.email, PASSWORD)
    with pytest.raises(Forbidden, match="suspended"):
        account_service.authenticate_admin(session, separate_admin.email, PASSWORD)


def test_timestamps_round_trip_as_naive_utc(session, user):
    account_service.record_login(session, user)
    stored_login = user.last_login

    session.expire_all()
    reloaded = account_service.get_user(session, user.id)

    assert reloaded.created_at.tzinfo is None
    assert reloaded.last_login.tzinfo is None
    assert reloaded.last_login == stored_login
