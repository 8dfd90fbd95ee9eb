# session_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class SessionRead(BaseModel):
    id: str
    user_id: str
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    last_activity: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PruneResult(BaseModel):
    deleted: int
