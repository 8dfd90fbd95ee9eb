# ================================================================
# services/account_service.py — Credential store (users + admins)
# ================================================================
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.config import settings
from core.errors import DuplicateEntry, Forbidden, InvalidCredentials, NotFound, WeakPassword
from core.security import dummy_verify, hash_password, verify_and_update_password
from core.updates import apply_updates
from models.models import (
    ADMIN_ROLES,
    AccountStatus,
    Admin,
    AdminRole,
    AdminStatus,
    PlanName,
    User,
    UserRole,
)
from services import audit_service

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "plan", "status")
DUPLICATE_EMAIL_MESSAGE = "Email already exists"

Account = Union[User, Admin]


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password_policy(password: str) -> None:
    min_length = settings.PASSWORD_MIN_LENGTH
    if not password or len(password) < min_length:
        raise WeakPassword(f"Password must be at least {min_length} characters")


def _commit_unique(session: Session, message: str) -> None:
    """Commit, turning a unique-key rejection into DuplicateEntry."""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info(f"Unique constraint rejected write: {e.orig}")
        raise DuplicateEntry(message)


# ------------------------------------------------------------
# Users
# ------------------------------------------------------------
def create_account(
    session: Session,
    email: str,
    password: str,
    name: str,
    plan: PlanName = PlanName.STARTER,
    role: UserRole = UserRole.USER,
) -> User:
    check_password_policy(password)
    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        name=name,
        role=role,
        plan=plan,
        status=AccountStatus.ACTIVE,
    )
    session.add(user)
    _commit_unique(session, DUPLICATE_EMAIL_MESSAGE)
    session.refresh(user)
    logger.info(f"✅ Created account {user.id}")
    return user


def get_user(session: Session, user_id: str) -> Optional[User]:
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def _require_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def _check_password(session: Session, account: Account, password: str) -> bool:
    ok, new_hash = verify_and_update_password(password, account.password_hash)
    if ok and new_hash:
        # Legacy bcrypt row: upgrade in place
        account.password_hash = new_hash
        session.add(account)
        session.commit()
        session.refresh(account)
    return ok


def verify_credentials(session: Session, email: str, password: str) -> User:
    """
    Return the user when the password matches.
    Unknown email and wrong password raise the same InvalidCredentials.
    """
    user = get_user_by_email(session, email)
    if not user:
        dummy_verify()
        logger.info("Login rejected: unknown email")
        raise InvalidCredentials()
    if not _check_password(session, user, password):
        logger.info(f"Login rejected: password mismatch for {user.id}")
        raise InvalidCredentials()
    return user


def update_profile(session: Session, user_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply a field update set (name/email/plan/status) and return what changed."""
    user = _require_user(session, user_id)
    updates = dict(updates)
    if updates.get("email"):
        updates["email"] = normalize_email(updates["email"])
    changes = apply_updates(user, updates, PROFILE_FIELDS)
    if not changes:
        return changes
    session.add(user)
    _commit_unique(session, DUPLICATE_EMAIL_MESSAGE)
    session.refresh(user)
    return changes


def update_password(session: Session, user_id: str, new_password: str) -> None:
    check_password_policy(new_password)
    user = _require_user(session, user_id)
    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()


def change_password(session: Session, user_id: str, current_password: str, new_password: str) -> None:
    user = _require_user(session, user_id)
    if not _check_password(session, user, current_password):
        raise InvalidCredentials("Current password is incorrect")
    update_password(session, user_id, new_password)


def delete_account(session: Session, user_id: str) -> Dict[str, Any]:
    """
    Delete a user; the database cascades sessions/subscriptions and nulls audit references.
    Returns a snapshot of the deleted row.
    """
    user = _require_user(session, user_id)
    snapshot = user.model_dump(exclude={"password_hash"})
    session.delete(user)
    session.commit()
    return snapshot


def list_accounts(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(User.created_at.desc())).all())


def record_login(session: Session, account: Account) -> None:
    account.last_login = datetime.utcnow()
    session.add(account)
    session.commit()
    session.refresh(account)


# ------------------------------------------------------------
# Admins (separate table)
# ------------------------------------------------------------
def get_admin_by_email(session: Session, email: str) -> Optional[Admin]:
    return session.exec(select(Admin).where(Admin.email == normalize_email(email))).first()


def create_admin(
    session: Session,
    email: str,
    password: str,
    name: str,
    role: AdminRole = AdminRole.SUPER_ADMIN,
) -> Admin:
    check_password_policy(password)
    admin = Admin(
        email=normalize_email(email),
        password_hash=hash_password(password),
        name=name,
        role=role,
        status=AdminStatus.ACTIVE,
    )
    session.add(admin)
    _commit_unique(session, DUPLICATE_EMAIL_MESSAGE)
    session.refresh(admin)
    return admin


def authenticate_admin(session: Session, email: str, password: str, ip_address: Optional[str] = None) -> Account:
    """
    Admin login: the `admins` table is tried first, then `users`.
    The account must hold an admin role and must not be cancelled/suspended.
    """
    account: Optional[Account] = get_admin_by_email(session, email) or get_user_by_email(session, email)

    if not account:
        dummy_verify()
        raise InvalidCredentials()

    if not _check_password(session, account, password):
        audit_service.record(
            session,
            "admin_login_failed",
            entity_type="user",
            entity_id=account.id,
            ip_address=ip_address,
        )
        raise InvalidCredentials()

    if account.role not in ADMIN_ROLES:
        audit_service.record(
            session,
            "admin_login_forbidden",
            actor_id=account.id,
            entity_type="user",
            entity_id=account.id,
            ip_address=ip_address,
        )
        raise Forbidden("Not authorized as admin")

    if account.status == AccountStatus.CANCELLED.value:
        raise Forbidden("Account has been cancelled")
    if account.status == AdminStatus.SUSPENDED.value:
        raise Forbidden("Account has been suspended")

    record_login(session, account)
    audit_service.record(
        session,
        "admin_login",
        actor_id=account.id,
        entity_type="user",
        entity_id=account.id,
        ip_address=ip_address,
    )
    return account
