"""
Create the single Prime Admin account (verified, ready to log in).
Does nothing if a Prime Admin already exists.

Run from project root:
  python scripts/create_prime_admin.py --email admin@example.com --password '...' --first-name Prime --last-name Admin
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.database import Base, create_db_engine, create_session_factory
from app.errors import AppError
from app.models import User  # noqa: F401
from app.services import accounts

log = logging.getLogger("create_prime_admin")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", default="Prime")
    parser.add_argument("--last-name", default="Admin")
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    db = create_session_factory(engine)()
    try:
        existing = accounts.get_prime_admin(db)
        if existing:
            log.info("Prime admin already exists: id=%s email=%s", existing.id, existing.email)
            return 0
        user = accounts.create_user(
            db,
            settings,
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            role="prime_admin",
            is_verified=True,
        )
        db.commit()
        log.info("Prime admin created: id=%s email=%s role=%s", user.id, user.email, user.role.value)
        return 0
    except AppError as e:
        db.rollback()
        log.error("Could not create prime admin: %s", e.detail)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    sys.exit(main())
