# user_schema.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime

from models.models import UserRole, PlanName, AccountStatus


# ---------------------------
# Read
# ---------------------------
class UserRead(BaseModel):
    """Public profile; the password hash never leaves the service layer."""
    id: str
    email: EmailStr
    name: str
    role: UserRole
    plan: PlanName
    status: AccountStatus
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountRead(BaseModel):
    """Either a users row or an admins row (admins have no plan)."""
    id: str
    email: EmailStr
    name: str
    role: str
    status: str
    plan: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------
# Create / Update
# ---------------------------
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., max_length=128)
    plan: PlanName = PlanName.STARTER


class UserUpdate(BaseModel):
    """Admin field update set: only the fields sent are changed."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    plan: Optional[PlanName] = None
    status: Optional[AccountStatus] = None


class ProfileUpdate(BaseModel):
    """Self-service field update set."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., max_length=128)
    new_password: str = Field(..., max_length=128)


class PasswordSet(BaseModel):
    new_password: str = Field(..., max_length=128)
