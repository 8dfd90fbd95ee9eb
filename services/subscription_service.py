# ================================================================
# services/subscription_service.py — Plan activation / cancellation
# ================================================================
from calendar import monthrange
from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.errors import ConflictingSubscription, NotFound
from models.models import PlanName, Subscription, SubscriptionStatus, User

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Subscription not found or access denied"


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar-month arithmetic; the day is clamped to the target month (Jan 31 + 1 -> Feb 28/29)."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def get_active_subscription(session: Session, user_id: str) -> Optional[Subscription]:
    return session.exec(
        select(Subscription).where(
            Subscription.user_id == user_id,
            Subscription.status == SubscriptionStatus.ACTIVE,
        )
    ).first()


def list_subscriptions(session: Session, user_id: str) -> List[Subscription]:
    return list(
        session.exec(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc())
        ).all()
    )


def activate(session: Session, user_id: str, plan: PlanName) -> Subscription:
    """
    Create an Active subscription and move the user onto `plan` in one transaction.
    The unique active-subscription key rejects a second Active row; callers must cancel first.
    """
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    # Naive UTC so renewal comparisons are timezone-free
    now = datetime.utcnow()
    subscription = Subscription(
        user_id=user_id,
        plan=plan,
        start_date=now,
        renewal_date=add_months(now, 1),
        created_at=now,
        updated_at=now,
    )
    subscription.mark_status(SubscriptionStatus.ACTIVE)
    user.plan = plan
    user.updated_at = now

    session.add(subscription)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info(f"Activation rejected for user {user_id}: {e.orig}")
        raise ConflictingSubscription()

    session.refresh(subscription)
    logger.info(f"✅ Subscription {subscription.id} activated ({plan}) for user {user_id}")
    return subscription


def cancel(session: Session, subscription_id: str, requesting_user_id: str) -> Subscription:
    """
    Cancel the requester's Active subscription and drop their plan back to Starter.
    Anything else (missing, someone else's, already cancelled) is reported as not found.
    """
    subscription = session.get(Subscription, subscription_id)
    if (
        not subscription
        or subscription.user_id != requesting_user_id
        or subscription.status != SubscriptionStatus.ACTIVE
    ):
        raise NotFound(ACCESS_DENIED_MESSAGE)

    now = datetime.utcnow()
    subscription.mark_status(SubscriptionStatus.CANCELLED)
    subscription.end_date = now
    subscription.updated_at = now

    user = session.get(User, requesting_user_id)
    if user:
        user.plan = PlanName.STARTER
        user.updated_at = now
        session.add(user)

    session.add(subscription)
    session.commit()
    session.refresh(subscription)
    return subscription
