# scripts/prune_sessions.py
"""Delete expired opaque sessions (run from cron): python -m scripts.prune_sessions"""
import os
import sys

from dotenv import load_dotenv
from sqlmodel import Session

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv()

from core.database import engine
from services.session_service import prune_expired_sessions


def prune_sessions() -> int:
    with Session(engine) as session:
        deleted = prune_expired_sessions(session)
    print(f"🧹 Removed {deleted} expired session(s)")
    return deleted


if __name__ == "__main__":
    prune_sessions()
