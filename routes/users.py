# routes/users.py
from typing import List
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from core.database import get_session
from core.errors import NotFound
from core.request_utils import get_client_ip
from core.security import get_current_admin, get_current_user
from models.models import User
from schemas.auth_schema import TokenPayload
from schemas.user_schema import PasswordChange, PasswordSet, ProfileUpdate, UserCreate, UserRead, UserUpdate
from services import account_service, audit_service

logger = logging.getLogger(__name__)


router = APIRouter(tags=["Users"])


# ----------------------------------------------------------------------
# ✅ Current User
# ----------------------------------------------------------------------
@router.get("/me", response_model=UserRead)
def get_current_user_endpoint(current_user: User = Depends(get_current_user)):
    """Return current user info (decoded from JWT)."""
    return current_user


@router.put("/me", response_model=UserRead)
def update_current_user_profile(
    user_update: ProfileUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Allow a user to update their own name/email."""
    changes = account_service.update_profile(
        session,
        current_user.id,
        user_update.model_dump(exclude_unset=True, exclude_none=True),
    )
    if changes:
        audit_service.record(
            session,
            "profile_updated",
            actor_id=current_user.id,
            entity_type="user",
            entity_id=current_user.id,
            changes=changes,
            ip_address=get_client_ip(request),
        )
    return account_service.get_user(session, current_user.id)


@router.put("/me/password")
def change_own_password(
    data: PasswordChange,
    request: Request,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account_service.change_password(session, current_user.id, data.current_password, data.new_password)
    audit_service.record(
        session,
        "password_changed",
        actor_id=current_user.id,
        entity_type="user",
        entity_id=current_user.id,
        ip_address=get_client_ip(request),
    )
    return {"success": True, "message": "Password updated."}


# ----------------------------------------------------------------------
# ✅ Admin: list / create
# ----------------------------------------------------------------------
@router.get("/", response_model=List[UserRead])
def get_all_users(
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Admins: list all users, newest first."""
    return account_service.list_accounts(session)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    user = account_service.create_account(session, data.email, data.password, data.name, plan=data.plan)
    audit_service.record(
        session,
        "user_created",
        actor_id=admin.user_id,
        entity_type="user",
        entity_id=user.id,
        changes={"email": user.email, "name": user.name},
        ip_address=get_client_ip(request),
    )
    return user


# ----------------------------------------------------------------------
# ✅ Admin: single user
# ----------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    user = account_service.get_user(session, user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    user_update: UserUpdate,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Admin: update name/email/plan/status. Only the fields sent are changed."""
    changes = account_service.update_profile(
        session,
        user_id,
        user_update.model_dump(exclude_unset=True, exclude_none=True),
    )
    if changes:
        audit_service.record(
            session,
            "user_updated",
            actor_id=admin.user_id,
            entity_type="user",
            entity_id=user_id,
            changes=changes,
            ip_address=get_client_ip(request),
        )
    return account_service.get_user(session, user_id)


@router.put("/{user_id}/password")
def set_user_password(
    user_id: str,
    data: PasswordSet,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    account_service.update_password(session, user_id, data.new_password)
    audit_service.record(
        session,
        "password_changed",
        actor_id=admin.user_id,
        entity_type="user",
        entity_id=user_id,
        ip_address=get_client_ip(request),
    )
    return {"success": True, "message": "Password updated."}


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
def delete_user(
    user_id: str,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Admin: permanently delete a user (sessions and subscriptions go with it)."""
    deleted = account_service.delete_account(session, user_id)
    audit_service.record(
        session,
        "user_deleted",
        actor_id=admin.user_id,
        entity_type="user",
        entity_id=user_id,
        changes={"deleted": True},
        ip_address=get_client_ip(request),
    )
    return {"success": True, "message": f"User {deleted['email']} has been permanently removed."}
