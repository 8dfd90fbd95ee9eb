# routes/landing.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from sqlmodel import Session

from core.config import settings
from core.database import get_session
from core.request_utils import get_client_ip
from core.security import get_current_admin
from schemas.auth_schema import TokenPayload
from services import audit_service, landing_service

router = APIRouter(prefix="/api/landing-settings", tags=["Landing"])


def get_landing_defaults() -> Dict[str, Any]:
    """Per-request defaults taken from configuration (a fresh copy every time)."""
    return dict(settings.LANDING_DEFAULTS)


@router.get("")
def read_landing_settings(
    defaults: Dict[str, Any] = Depends(get_landing_defaults),
    session: Session = Depends(get_session),
):
    """Public: the stored landing document laid over the configured defaults."""
    stored = landing_service.get_landing_settings(session)
    return landing_service.merge_with_defaults(stored, defaults)


@router.put("")
def write_landing_settings(
    request: Request,
    document: Dict[str, Any] = Body(...),
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    """Admin: replace the whole landing document."""
    saved = landing_service.set_landing_settings(session, document)
    audit_service.record(
        session,
        "landing_settings_updated",
        actor_id=admin.user_id,
        entity_type="landing_settings",
        entity_id="1",
        changes={"sections": sorted(saved.keys())},
        ip_address=get_client_ip(request),
    )
    return saved
