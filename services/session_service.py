# ================================================================
# services/session_service.py — Server-side opaque sessions
# ================================================================
from datetime import datetime, timedelta
from typing import Optional
import logging

from sqlalchemy import delete
from sqlmodel import Session, select

from core.config import settings
from core.security import generate_session_token
from models.models import UserSession

logger = logging.getLogger(__name__)


def session_lifetime() -> timedelta:
    return timedelta(hours=settings.SESSION_EXPIRE_HOURS)


def create_session(
    session: Session,
    user_id: str,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
    lifetime: Optional[timedelta] = None,
) -> UserSession:
    now = datetime.utcnow()
    user_session = UserSession(
        user_id=user_id,
        session_token=generate_session_token(),
        user_agent=user_agent,
        ip_address=ip_address,
        created_at=now,
        last_activity=now,
        expires_at=now + (lifetime or session_lifetime()),
    )
    session.add(user_session)
    session.commit()
    session.refresh(user_session)
    return user_session


def lookup_session(session: Session, token: str) -> Optional[UserSession]:
    """
    Resolve a session token.
    Returns None once expires_at has passed, even if the row has not been pruned yet.
    A successful lookup records activity and slides the expiry forward.
    """
    if not token:
        return None
    now = datetime.utcnow()
    user_session = session.exec(
        select(UserSession).where(
            UserSession.session_token == token,
            UserSession.expires_at > now,
        )
    ).first()
    if not user_session:
        return None

    user_session.last_activity = now
    # Sliding expiry never moves backwards
    user_session.expires_at = max(user_session.expires_at, now + session_lifetime())
    session.add(user_session)
    session.commit()
    session.refresh(user_session)
    return user_session


def delete_session(session: Session, token: str) -> bool:
    """Logout: remove the session row. Returns True if a row was removed."""
    user_session = session.exec(
        select(UserSession).where(UserSession.session_token == token)
    ).first()
    if not user_session:
        return False
    session.delete(user_session)
    session.commit()
    return True


def prune_expired_sessions(session: Session, now: Optional[datetime] = None) -> int:
    """Maintenance sweep: delete every session whose expiry has passed. Never scheduled here."""
    result = session.execute(
        delete(UserSession).where(UserSession.expires_at <= (now or datetime.utcnow()))
    )
    session.commit()
    deleted = result.rowcount or 0
    logger.info(f"🧹 Pruned {deleted} expired session(s)")
    return deleted
