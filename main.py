import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from core.config import settings, configure_logging
from core.database import create_db_and_tables
from core.errors import register_exception_handlers
from routes.admin import router as admin_router
from routes.auth import router as auth_router
from routes.landing import router as landing_router
from routes.packages import router as packages_router
from routes.subscriptions import router as subscriptions_router
from routes.users import router as users_router

logger = logging.getLogger(__name__)


# =========================================
# 🏁 Lifespan (logging + DB initialization)
# =========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(f"🚀 Starting in {settings.ENVIRONMENT} mode")
    create_db_and_tables()
    logger.info("✅ Database tables created on startup.")
    yield
    logger.info("✅ Application shutting down.")


# =========================================
#  ✅ FastAPI App
# =========================================
app = FastAPI(lifespan=lifespan, title="Quantum Alpha Backend", debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# =========================================
# 📦 Routers
# =========================================
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(users_router, prefix="/users", tags=["Users"])
app.include_router(subscriptions_router)
app.include_router(packages_router)
app.include_router(landing_router)
app.include_router(admin_router)


# =========================================
# 🩺 Health Check
# =========================================
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "Backend is running"}


@app.get("/")
def read_root():
    return {"message": "Welcome to Quantum Alpha Backend!"}
