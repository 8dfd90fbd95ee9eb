# ================================================================
# services/landing_service.py — Singleton landing-page document
# ================================================================
from datetime import datetime
from typing import Any, Dict, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from models.models import LANDING_SETTINGS_ROW_ID, LandingSettings

logger = logging.getLogger(__name__)


def get_landing_settings(session: Session) -> Optional[Dict[str, Any]]:
    row = session.get(LandingSettings, LANDING_SETTINGS_ROW_ID)
    return dict(row.data) if row else None


def set_landing_settings(session: Session, document: Dict[str, Any]) -> Dict[str, Any]:
    """Upsert: insert the single row if absent, otherwise replace the whole document."""
    row = session.get(LandingSettings, LANDING_SETTINGS_ROW_ID)
    if row is None:
        row = LandingSettings(id=LANDING_SETTINGS_ROW_ID, data=document)
        session.add(row)
        try:
            session.commit()
        except IntegrityError:
            # Another request created the row first; overwrite it instead
            session.rollback()
            logger.info("Landing settings row created concurrently, overwriting")
            row = session.get(LandingSettings, LANDING_SETTINGS_ROW_ID)
            _overwrite(session, row, document)
    else:
        _overwrite(session, row, document)

    session.refresh(row)
    return dict(row.data)


def _overwrite(session: Session, row: LandingSettings, document: Dict[str, Any]) -> None:
    # New dict object so the JSON column is detected as changed
    row.data = dict(document)
    row.updated_at = datetime.utcnow()
    session.add(row)
    session.commit()


def merge_with_defaults(document: Optional[Dict[str, Any]], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Top-level merge: stored sections replace default sections wholesale."""
    merged = dict(defaults)
    merged.update(document or {})
    return merged
