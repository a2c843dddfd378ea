#!/usr/bin/env python3
"""
Create (or reset the password of) a staff account without going through /api/register.
Run from backend dir with project venv active:
    python scripts/create_staff_user.py staff@example.edu "Jane Staff" 'S3cret-pass'
"""
import argparse
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("name")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    from aev_scheduler.config import get_settings
    from aev_scheduler.database import Database
    from aev_scheduler.models.user import User
    from aev_scheduler.schemas.auth import MIN_PASSWORD_LENGTH
    from aev_scheduler.services.auth import hash_password

    if len(args.password) < MIN_PASSWORD_LENGTH:
        print(f"FAIL password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    database = Database(get_settings().database_url)
    if database.is_sqlite:
        database.create_schema()
    db = database.session()
    try:
        user = db.query(User).filter(User.email == args.email).first()
        if user:
            user.password_hash = hash_password(args.password)
            user.role = "staff"
            print(f"Updated existing user: {user.email}")
        else:
            user = User(name=args.name, email=args.email, password_hash=hash_password(args.password), role="staff")
            db.add(user)
            print(f"Created staff user: {args.email}")
        db.commit()
    finally:
        db.close()
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
