#!/usr/bin/env python3
"""
Bootstrap the first superadmin (no university). Run from backend/:
    python scripts/create_superadmin.py [--email E] [--name N]
Password is read interactively (or from SUPERADMIN_PASSWORD).
"""
import argparse
import os
import sys
from getpass import getpass
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def main() -> int:
    from alumni_connect.database import SessionLocal, init_db
    from alumni_connect.errors import DomainError
    from alumni_connect.models.enums import UserRole
    from alumni_connect.services.identity import create_user

    parser = argparse.ArgumentParser(description="Create a superadmin account")
    parser.add_argument("--email", default=None)
    parser.add_argument("--name", default="Super Admin")
    args = parser.parse_args()

    email = (args.email or input("Superadmin email: ")).strip().lower()
    password = os.environ.get("SUPERADMIN_PASSWORD") or getpass("Superadmin password: ")
    if len(password.encode("utf-8")) > 72:
        print("Password must be at most 72 bytes (bcrypt limit)")
        return 1

    init_db()
    db = SessionLocal()
    try:
        user = create_user(db, email=email, password=password, name=args.name, role=UserRole.SUPERADMIN.value)
    except DomainError as e:
        print(f"FAIL: {e.message}")
        return 1
    finally:
        db.close()
    print(f"Superadmin created: {user.id} ({user.email})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
