# ==================================================================================
# core/config.py — Application Configuration (MySQL + JWT + Pydantic v2 Settings)
# ==================================================================================
from typing import Any, Dict, List, Optional
import logging
import sys

from pydantic import EmailStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # ------------------------
    # DATABASE CONFIG
    # ------------------------
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "quantumalphaindiadb"
    DB_ECHO: bool = False

    # ------------------------
    # SECURITY CONFIG
    # ------------------------
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    SESSION_EXPIRE_HOURS: int = 24
    PASSWORD_MIN_LENGTH: int = 6

    # ------------------------
    # ADMIN BOOTSTRAP (scripts/create_admin.py)
    # ------------------------
    ADMIN_EMAIL: Optional[EmailStr] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_NAME: str = "Admin"
    ADMIN_USE_SEPARATE: bool = False

    # ------------------------
    # FRONTEND / LANDING PAGE
    # ------------------------
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    # Merged under the stored landing document on every public read
    LANDING_DEFAULTS: Dict[str, Any] = {}

    # ------------------------
    # ENVIRONMENT SETTINGS
    # ------------------------
    ENVIRONMENT: str = "development"  # 'development' | 'production'
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Resolve the connection URL.
        An explicit DATABASE_URL wins, then the DB_* parts (MySQL), then a local SQLite file.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
            )
        return "sqlite:///./quantum_alpha.db"

    # ------------------------
    # Pydantic v2 Settings
    # ------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level once at startup."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ------------------------
# Global Settings Loader
# ------------------------
try:
    settings = Settings()
except ValidationError as e:
    logger.critical("❌ Environment configuration error — missing or invalid settings!\n%s", e)
    sys.exit(1)
