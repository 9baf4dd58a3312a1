#!/usr/bin/env python3
"""Create an administrator account (identity + active admin role record).

Run inside Docker:
    docker compose exec backend python scripts/create_admin.py admin@university.edu --first-name Ada --last-name Admin

Or locally with the right DATABASE_URL:
    python scripts/create_admin.py admin@university.edu

The password is read from --password or prompted for.
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add backend to path for imports when the package is not installed
script_dir = Path(__file__).resolve().parent
backend_dir = script_dir.parent / "backend"
if backend_dir.exists():
    sys.path.insert(0, str(backend_dir))

from jobboard.models.base import AsyncSessionLocal
from jobboard.models import app_setting, audit, job, job_application, job_event, saved_job, student_profile, user, user_role  # noqa: F401
from jobboard.services import account_service
from jobboard.services.errors import ValidationError


async def create_admin(email: str, password: str, first_name: str, last_name: str) -> None:
    async with AsyncSessionLocal() as db:
        try:
            new_user, role = await account_service.create_account(
                db,
                email,
                password,
                "admin",
                first_name=first_name,
                last_name=last_name,
            )
            await db.commit()
            print(f"Admin account created: {new_user.email} ({new_user.id})")
        except Exception:
            await db.rollback()
            raise


def main():
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("email", help="Login email for the new admin")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    parser.add_argument("--first-name", default="Site")
    parser.add_argument("--last-name", default="Administrator")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    try:
        asyncio.run(create_admin(args.email, password, args.first_name, args.last_name))
    except ValidationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
