# routes/subscriptions.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from core.database import get_session
from core.request_utils import get_client_ip
from core.security import get_current_user
from models.models import User
from schemas.subscription_schema import SubscriptionActivate, SubscriptionRead
from services import audit_service, subscription_service

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


# ----------------------------------------------------------------------
# ✅ Current subscription / history
# ----------------------------------------------------------------------
@router.get("/me", response_model=Optional[SubscriptionRead])
def get_my_subscription(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """The user's Active subscription, or null."""
    return subscription_service.get_active_subscription(session, current_user.id)


@router.get("/history", response_model=List[SubscriptionRead])
def get_my_subscription_history(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return subscription_service.list_subscriptions(session, current_user.id)


# ----------------------------------------------------------------------
# ✅ Activate / cancel
# ----------------------------------------------------------------------
@router.post("/activate", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
def activate_subscription(
    data: SubscriptionActivate,
    request: Request,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Start a plan. Fails with 409 while another subscription is Active."""
    user_id = current_user.id
    subscription = subscription_service.activate(session, user_id, data.plan)
    audit_service.record(
        session,
        "subscription_activated",
        actor_id=user_id,
        entity_type="subscription",
        entity_id=subscription.id,
        changes={"plan": data.plan.value},
        ip_address=get_client_ip(request),
    )
    return subscription


@router.post("/{subscription_id}/cancel", response_model=SubscriptionRead)
def cancel_subscription(
    subscription_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    user_id = current_user.id
    subscription = subscription_service.cancel(session, subscription_id, user_id)
    audit_service.record(
        session,
        "subscription_cancelled",
        actor_id=user_id,
        entity_type="subscription",
        entity_id=subscription_id,
        changes={"status": "Cancelled"},
        ip_address=get_client_ip(request),
    )
    return subscription
