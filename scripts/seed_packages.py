# scripts/seed_packages.py
"""Populate an empty catalog with the default packages: python -m scripts.seed_packages"""
import os
import sys

from dotenv import load_dotenv
from sqlmodel import Session

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv()

from core.database import engine, create_db_and_tables
from core.errors import AlreadySeeded
from services.package_service import seed_default_packages


def seed_packages() -> int:
    print("🌱 Seeding default packages...")
    create_db_and_tables()

    with Session(engine) as session:
        try:
            created = seed_default_packages(session)
        except AlreadySeeded as e:
            print(f"ℹ️ {e.message}")
            print("To re-seed, delete existing packages first.")
            return 0

        for package in created:
            print(f"✅ Created package: {package.name}")

    print(f"🌱 Seed completed. Total packages created: {len(created)}")
    return 0


if __name__ == "__main__":
    sys.exit(seed_packages())
