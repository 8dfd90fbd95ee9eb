from typing import Optional
import logging

from fastapi import APIRouter, Depends, Header, Request, status
from sqlmodel import Session

from core.database import get_session
from core.errors import Forbidden, NotFound, Unauthorized
from core.request_utils import get_client_ip, get_user_agent
from core.security import create_token_for_account, get_token_payload
from models.models import AccountStatus, Admin, User
from schemas.auth_schema import (
    AdminTokenResponse,
    LoginRequest,
    SignupRequest,
    TokenPayload,
    TokenResponse,
    VerifyResponse,
)
from schemas.session_schema import SessionRead
from schemas.subscription_schema import SubscriptionRead
from schemas.user_schema import AccountRead, UserRead
from services import account_service, audit_service, session_service, subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


# ==========================================================
# ✅ Public Signup — creates a Starter user account
# ==========================================================
@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, request: Request, session: Session = Depends(get_session)):
    """Create a user account and log it in."""
    user = account_service.create_account(session, data.email, data.password, data.name)
    audit_service.record(
        session,
        "user_signup",
        actor_id=user.id,
        entity_type="user",
        entity_id=user.id,
        changes={"email": user.email, "name": user.name},
        ip_address=get_client_ip(request),
    )
    return TokenResponse(access_token=create_token_for_account(user), user=UserRead.model_validate(user))


# ==========================================================
# ✅ User Login — bearer token + server-side session
# ==========================================================
@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, request: Request, session: Session = Depends(get_session)):
    """Authenticate a user; returns a bearer token and an opaque session token."""
    user = account_service.verify_credentials(session, credentials.email, credentials.password)

    if user.status == AccountStatus.CANCELLED:
        raise Forbidden("Account has been cancelled")

    account_service.record_login(session, user)
    ip_address = get_client_ip(request)
    user_session = session_service.create_session(
        session,
        user.id,
        user_agent=get_user_agent(request),
        ip_address=ip_address,
    )
    audit_service.record(
        session,
        "user_login",
        actor_id=user.id,
        entity_type="user",
        entity_id=user.id,
        ip_address=ip_address,
    )
    logger.info(f"Login successful for user {user.id}")

    return TokenResponse(
        access_token=create_token_for_account(user),
        user=UserRead.model_validate(user),
        session_token=user_session.session_token,
    )


# ==========================================================
# ✅ Admin Login — admins table first, then users
# ==========================================================
@router.post("/admin/login", response_model=AdminTokenResponse)
def admin_login(credentials: LoginRequest, request: Request, session: Session = Depends(get_session)):
    account = account_service.authenticate_admin(
        session,
        credentials.email,
        credentials.password,
        ip_address=get_client_ip(request),
    )
    return AdminTokenResponse(
        access_token=create_token_for_account(account),
        user=AccountRead.model_validate(account),
    )


# ==========================================================
# ✅ Verify Token — returns the account behind a bearer token
# ==========================================================
@router.get("/verify", response_model=VerifyResponse)
def verify(payload: TokenPayload = Depends(get_token_payload), session: Session = Depends(get_session)):
    """Resolve the token's account; users also get their active subscription."""
    user = session.get(User, payload.user_id)
    if user:
        subscription = subscription_service.get_active_subscription(session, user.id)
        return VerifyResponse(
            user=AccountRead.model_validate(user),
            subscription=SubscriptionRead.model_validate(subscription) if subscription else None,
        )

    admin = session.get(Admin, payload.user_id)
    if admin:
        return VerifyResponse(user=AccountRead.model_validate(admin))

    raise NotFound("User not found")


# ==========================================================
# ✅ Opaque Sessions — lookup and logout
# ==========================================================
@router.get("/session", response_model=SessionRead)
def get_session_info(
    x_session_token: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
):
    user_session = session_service.lookup_session(session, x_session_token)
    if not user_session:
        raise Unauthorized("Session expired or not found")
    return user_session


@router.post("/logout")
def logout(
    x_session_token: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
):
    if not x_session_token:
        raise Unauthorized("Session token required")
    removed = session_service.delete_session(session, x_session_token)
    return {"success": True, "session_removed": removed}
