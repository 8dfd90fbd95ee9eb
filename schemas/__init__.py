from .user_schema import UserRead, AccountRead, UserCreate, UserUpdate, ProfileUpdate, PasswordChange, PasswordSet
from .subscription_schema import SubscriptionActivate, SubscriptionRead
from .auth_schema import SignupRequest, LoginRequest, TokenPayload, TokenResponse, AdminTokenResponse, VerifyResponse
from .session_schema import SessionRead, PruneResult
from .package_schema import PackageCreate, PackageUpdate, PackageRead
from .audit_schema import AuditLogRead

__all__ = [
    # User
    "UserRead", "AccountRead", "UserCreate", "UserUpdate", "ProfileUpdate", "PasswordChange", "PasswordSet",

    # Subscription
    "SubscriptionActivate", "SubscriptionRead",

    # Auth
    "SignupRequest", "LoginRequest", "TokenPayload", "TokenResponse", "AdminTokenResponse", "VerifyResponse",

    # Session
    "SessionRead", "PruneResult",

    # Package
    "PackageCreate", "PackageUpdate", "PackageRead",

    # Audit
    "AuditLogRead",
]
