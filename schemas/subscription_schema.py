# subscription_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from models.models import PlanName, SubscriptionStatus


class SubscriptionActivate(BaseModel):
    plan: PlanName


class SubscriptionRead(BaseModel):
    id: str
    user_id: str
    plan: PlanName
    status: SubscriptionStatus
    renewal_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
