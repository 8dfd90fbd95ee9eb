from typing import Generator
import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from core.config import settings

logger = logging.getLogger(__name__)


# ============================================================
# ✅ Engine factory (MySQL preferred, SQLite for local dev)
# ============================================================
def build_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for `url`.
    SQLite connections get foreign keys switched on so ON DELETE CASCADE /
    SET NULL behave the same way they do on InnoDB.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        new_engine = create_engine(url, echo=settings.DB_ECHO, **kwargs)

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine

    # pool_pre_ping avoids stale MySQL connections after wait_timeout
    return create_engine(url, echo=settings.DB_ECHO, pool_pre_ping=True, pool_recycle=3600, **kwargs)


DATABASE_URL = settings.SQLALCHEMY_DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    logger.warning("⚠️ No MySQL configuration found — using SQLite database %s", DATABASE_URL)
else:
    logger.info("✅ Using database host from environment")

engine = build_engine(DATABASE_URL)


# ============================================================
# ✅ Create tables (called at startup)
# ============================================================
def create_db_and_tables(bind: Engine = None) -> None:
    """
    Create all database tables based on SQLModel models.
    This runs automatically at app startup.
    """
    # Models must be imported so their tables are registered on the metadata
    import models.models  # noqa: F401

    try:
        SQLModel.metadata.create_all(bind or engine)
        logger.info("✅ All database tables created successfully.")
    except Exception as e:
        logger.error(f"❌ Failed to create tables: {e}")
        raise


# ============================================================
# ✅ Dependency: FastAPI session generator
# ============================================================
def get_session() -> Generator[Session, None, None]:
    """
    Provides a SQLModel Session to FastAPI dependencies.
    Closes automatically after request completes.
    """
    with Session(engine) as session:
        yield session
