# scripts/create_admin.py
"""
Create the first administrator.

    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=Secret123 python -m scripts.create_admin

With ADMIN_USE_SEPARATE=true (or --separate) the account goes into the `admins`
table as a superadmin, otherwise into `users` with role admin and plan Pro.
"""
import os
import sys
import argparse

from dotenv import load_dotenv
from sqlmodel import Session

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv()

from core.config import settings
from core.database import engine, create_db_and_tables
from core.errors import DuplicateEntry, WeakPassword
from models.models import PlanName, UserRole
from services import account_service


def create_admin(email: str, password: str, name: str, separate: bool) -> int:
    create_db_and_tables()

    with Session(engine) as session:
        try:
            if separate:
                admin = account_service.create_admin(session, email, password, name)
                print(f"✅ Admin user created in `admins` table: id={admin.id} email={admin.email}")
            else:
                user = account_service.create_account(
                    session,
                    email,
                    password,
                    name,
                    plan=PlanName.PRO,
                    role=UserRole.ADMIN,
                )
                print(f"✅ Admin user created in `users` table: id={user.id} email={user.email}")
        except (DuplicateEntry, WeakPassword) as e:
            print(f"❌ Failed to create admin user: {e.message}")
            return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create an administrator account.")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    parser.add_argument(
        "--separate",
        action="store_true",
        default=settings.ADMIN_USE_SEPARATE,
        help="Store the account in the dedicated admins table",
    )
    args = parser.parse_args()

    if not args.email or not args.password:
        print("❌ Please set ADMIN_EMAIL and ADMIN_PASSWORD environment variables")
        sys.exit(1)

    sys.exit(create_admin(args.email, args.password, args.name, args.separate))
