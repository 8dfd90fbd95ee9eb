# ================================================================
# services/audit_service.py — Append-only audit trail
# ================================================================
from typing import Any, Dict, List, Optional
import logging

from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from models.models import AuditLog, User

logger = logging.getLogger(__name__)


def resolve_actor(session: Session, actor_id: Optional[str]) -> Optional[str]:
    """
    Return `actor_id` only if it is a row in `users`.
    Admins from the separate `admins` table (or anything else) are stored as NULL
    so the foreign key on audit_logs.user_id is never violated.
    """
    if not actor_id:
        return None
    try:
        exists = session.exec(select(User.id).where(User.id == actor_id)).first()
    except SQLAlchemyError as e:
        logger.warning(f"⚠️ Could not resolve audit actor {actor_id}: {e}")
        return None
    return actor_id if exists else None


def record(
    session: Session,
    action: str,
    actor_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    changes: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> Optional[AuditLog]:
    """
    Append one audit entry and commit it.

    Best-effort: a failed write is rolled back and logged and None is returned,
    the operation being audited has already been committed by the caller.
    """
    entry = AuditLog(
        user_id=resolve_actor(session, actor_id),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        changes=jsonable_encoder(changes) if changes else None,
        ip_address=ip_address,
    )
    try:
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"❌ Failed to write audit entry '{action}' for {entity_type}:{entity_id}: {e}")
        return None


def list_entries(
    session: Session,
    limit: int = 100,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
) -> List[AuditLog]:
    stmt = select(AuditLog)
    if action:
        stmt = stmt.where(AuditLog.action == action)
    if entity_type:
        stmt = stmt.where(AuditLog.entity_type == entity_type)
    stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit)
    return list(session.exec(stmt).all())
