# models/models.py
from typing import Optional, Dict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)


# ============================================================
# ENUMS
# ============================================================
class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "superadmin"


class AdminRole(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "superadmin"


class PlanName(str, Enum):
    STARTER = "Starter"
    PRO = "Pro"
    EXPERT = "Expert"


class AccountStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"


class AdminStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    CANCELLED = "Cancelled"


class SubscriptionStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"
    INACTIVE = "Inactive"


ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)


# ============================================================
# COLUMN HELPERS
# ============================================================
# InnoDB + utf8mb4 on MySQL, ignored by other dialects
MYSQL_TABLE_ARGS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_unicode_ci",
}


def new_id() -> str:
    return str(uuid4())


def enum_column(enum_cls, default: Enum, index: bool = False) -> Column:
    """ENUM column persisted by value ('Starter', not 'STARTER')."""
    return Column(
        SAEnum(
            enum_cls,
            values_callable=lambda members: [m.value for m in members],
            native_enum=True,
            validate_strings=True,
        ),
        nullable=False,
        default=default.value,
        index=index,
    )


def timestamp_column(nullable: bool = False, index: bool = False, updates: bool = False) -> Column:
    """Naive UTC DATETIME column; every writer uses datetime.utcnow()."""
    return Column(
        DateTime(timezone=False),
        nullable=nullable,
        index=index,
        default=None if nullable else datetime.utcnow,
        onupdate=datetime.utcnow if updates else None,
    )


def user_fk_column(ondelete: str, nullable: bool = False) -> Column:
    return Column(
        String(255),
        ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
        index=True,
    )


# ============================================================
# USER
# ============================================================
class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    email: str = Field(max_length=255, unique=True, index=True, nullable=False)
    password_hash: str = Field(max_length=255, nullable=False)
    name: str = Field(max_length=255, nullable=False)

    role: UserRole = Field(default=UserRole.USER, sa_column=enum_column(UserRole, UserRole.USER))
    plan: PlanName = Field(default=PlanName.STARTER, sa_column=enum_column(PlanName, PlanName.STARTER))
    status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        sa_column=enum_column(AccountStatus, AccountStatus.ACTIVE, index=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(index=True))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(updates=True))
    last_login: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


# ============================================================
# ADMIN (separate administrators table)
# ============================================================
class Admin(SQLModel, table=True):
    __tablename__ = "admins"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    email: str = Field(max_length=255, unique=True, index=True, nullable=False)
    password_hash: str = Field(max_length=255, nullable=False)
    name: str = Field(max_length=255, nullable=False)

    role: AdminRole = Field(default=AdminRole.ADMIN, sa_column=enum_column(AdminRole, AdminRole.ADMIN))
    status: AdminStatus = Field(
        default=AdminStatus.ACTIVE,
        sa_column=enum_column(AdminStatus, AdminStatus.ACTIVE, index=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(index=True))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(updates=True))
    last_login: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


# ============================================================
# SUBSCRIPTION
# ============================================================
class Subscription(SQLModel, table=True):
    """
    A user's plan record.

    `active_slot` is True only while status is Active and NULL otherwise, so the
    unique (user_id, active_slot) key allows any number of Cancelled/Inactive
    rows but only one Active row per user.
    """
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "active_slot", name="unique_active_subscription"),
        MYSQL_TABLE_ARGS,
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    user_id: str = Field(sa_column=user_fk_column(ondelete="CASCADE"))
    plan: PlanName = Field(default=PlanName.STARTER, sa_column=enum_column(PlanName, PlanName.STARTER))
    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.INACTIVE,
        sa_column=enum_column(SubscriptionStatus, SubscriptionStatus.INACTIVE, index=True),
    )
    active_slot: Optional[bool] = Field(default=None)

    renewal_date: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True, index=True))
    start_date: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column())
    end_date: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(updates=True))

    def mark_status(self, status: SubscriptionStatus) -> None:
        self.status = status
        self.active_slot = True if status == SubscriptionStatus.ACTIVE else None


# ============================================================
# OPAQUE SESSION
# ============================================================
class UserSession(SQLModel, table=True):
    __tablename__ = "user_sessions"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    user_id: str = Field(sa_column=user_fk_column(ondelete="CASCADE"))
    session_token: str = Field(max_length=255, unique=True, index=True, nullable=False)
    user_agent: Optional[str] = Field(default=None, max_length=500)
    ip_address: Optional[str] = Field(default=None, max_length=45)

    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column())
    last_activity: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column())
    expires_at: datetime = Field(sa_column=timestamp_column(index=True))


# ============================================================
# AUDIT LOG
# ============================================================
class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    # NULL for system actions and for actors outside the users table
    user_id: Optional[str] = Field(default=None, sa_column=user_fk_column(ondelete="SET NULL", nullable=True))
    action: str = Field(max_length=100, index=True, nullable=False)
    entity_type: Optional[str] = Field(default=None, max_length=50, index=True)
    entity_id: Optional[str] = Field(default=None, max_length=255, index=True)
    changes: Optional[Dict] = Field(default=None, sa_column=Column(JSON, nullable=True))
    ip_address: Optional[str] = Field(default=None, max_length=45)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(index=True))


# ============================================================
# PACKAGE (public catalog)
# ============================================================
class Package(SQLModel, table=True):
    __tablename__ = "packages"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=255)
    name: str = Field(max_length=255, unique=True, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(10, 2), nullable=False, default=0))
    currency: str = Field(default="USD", max_length=10)
    # JSON-encoded list of strings, see services.package_service.parse_features
    features: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    active: bool = Field(default=True, index=True)
    display_order: int = Field(default=0, index=True)
    created_by: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(updates=True))


# ============================================================
# LANDING SETTINGS (singleton JSON document)
# ============================================================
LANDING_SETTINGS_ROW_ID = 1


class LandingSettings(SQLModel, table=True):
    __tablename__ = "landing_settings"
    __table_args__ = (MYSQL_TABLE_ARGS,)

    id: int = Field(default=LANDING_SETTINGS_ROW_ID, primary_key=True)
    data: Dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=timestamp_column(updates=True))


__all__ = [
    "User",
    "Admin",
    "Subscription",
    "UserSession",
    "AuditLog",
    "Package",
    "LandingSettings",
    "UserRole",
    "AdminRole",
    "PlanName",
    "AccountStatus",
    "AdminStatus",
    "SubscriptionStatus",
    "ADMIN_ROLES",
    "LANDING_SETTINGS_ROW_ID",
    "new_id",
]
