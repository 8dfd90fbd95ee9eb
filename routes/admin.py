# routes/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from core.database import get_session
from core.request_utils import get_client_ip
from core.security import get_current_admin
from schemas.audit_schema import AuditLogRead
from schemas.auth_schema import TokenPayload
from schemas.session_schema import PruneResult
from services import audit_service, session_service

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/audit-logs", response_model=List[AuditLogRead])
def get_audit_logs(
    limit: int = Query(100, ge=1, le=1000),
    action: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None),
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Most recent audit entries first."""
    return audit_service.list_entries(session, limit=limit, action=action, entity_type=entity_type)


@router.post("/maintenance/prune-sessions", response_model=PruneResult)
def prune_sessions(
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Delete expired opaque sessions. Nothing runs this automatically."""
    deleted = session_service.prune_expired_sessions(session)
    audit_service.record(
        session,
        "sessions_pruned",
        actor_id=admin.user_id,
        entity_type="session",
        changes={"deleted": deleted},
        ip_address=get_client_ip(request),
    )
    return PruneResult(deleted=deleted)
