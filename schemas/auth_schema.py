# auth_schema.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from schemas.user_schema import UserRead, AccountRead
from schemas.subscription_schema import SubscriptionRead


# ---------------------------
# Credentials
# ---------------------------
class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    # Length policy is enforced by the credential store (WeakPassword)
    password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=128)


# ---------------------------
# Tokens
# ---------------------------
class TokenPayload(BaseModel):
    user_id: str
    email: Optional[str] = None
    role: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    session_token: Optional[str] = None


class AdminTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AccountRead


class VerifyResponse(BaseModel):
    user: AccountRead
    subscription: Optional[SubscriptionRead] = None
