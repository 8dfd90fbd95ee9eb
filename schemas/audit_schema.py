# audit_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional
from datetime import datetime


class AuditLogRead(BaseModel):
    id: str
    user_id: Optional[str] = None
    action: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    changes: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
