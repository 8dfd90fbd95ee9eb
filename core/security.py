# core/security.py
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple
import logging
import secrets

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session

from core.config import settings
from core.database import get_session
from core.errors import ExpiredToken, Forbidden, InvalidSignature, Unauthorized
from models.models import ADMIN_ROLES, User
from schemas.auth_schema import TokenPayload

logger = logging.getLogger(__name__)


# ========================================
# 🔑 JWT / APP CONFIG
# ========================================
SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM or "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# auto_error=False so a missing header surfaces as our own Unauthorized error
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


# ========================================
# 🔐 Password Hashing (Argon2, bcrypt accepted for legacy rows)
# ========================================
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash password using Argon2."""
    return pwd_context.hash(password)


def verify_and_update_password(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """
    Verify and, when the stored hash uses a deprecated scheme (bcrypt),
    return a fresh Argon2 hash the caller should persist.
    """
    try:
        return pwd_context.verify_and_update(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("⚠️ Stored password hash could not be parsed")
        return False, None


def dummy_verify() -> None:
    """Spend the same time as a real verification when the account does not exist."""
    pwd_context.dummy_verify()


# ========================================
# 🔑 Token Helpers
# ========================================
def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_token_for_account(account: Any, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a bearer token for a `User` or `Admin` row."""
    role = account.role.value if hasattr(account.role, "value") else account.role
    return create_access_token(
        {
            "sub": account.email,
            "user_id": account.id,
            "email": account.email,
            "role": role,
        },
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> TokenPayload:
    """Decode JWT and return payload."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise ExpiredToken()
    except JWTError:
        raise InvalidSignature()

    if not payload.get("user_id") or not payload.get("role"):
        raise InvalidSignature("Invalid token payload")

    return TokenPayload(
        user_id=payload["user_id"],
        email=payload.get("email") or payload.get("sub"),
        role=payload["role"],
    )


# ========================================
# 🎟️ Opaque session tokens
# ========================================
def generate_session_token() -> str:
    """Generate secure random token for the server-side session table."""
    return secrets.token_urlsafe(32)


# ========================================
# 👤 Authentication & Role Checks
# ========================================
def get_token_payload(token: Optional[str] = Depends(oauth2_scheme)) -> TokenPayload:
    """Decode the bearer token without touching the database."""
    if not token:
        raise Unauthorized()
    return decode_token(token)


def require_roles(*roles: str) -> Callable[..., TokenPayload]:
    """Build a dependency that only lets the given roles through."""
    allowed = {r.value if hasattr(r, "value") else r for r in roles}

    def dependency(payload: TokenPayload = Depends(get_token_payload)) -> TokenPayload:
        if payload.role not in allowed:
            raise Forbidden("Unauthorized or insufficient permissions")
        return payload

    return dependency


get_current_admin = require_roles(*ADMIN_ROLES)


def get_current_user(
    payload: TokenPayload = Depends(get_token_payload),
    session: Session = Depends(get_session),
) -> User:
    """Extract user from token and load full record from the users table."""
    user = session.get(User, payload.user_id)
    if not user:
        raise Unauthorized("User not found")
    return user