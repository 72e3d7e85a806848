"""
Insert the default dropoff locations into an empty dropoff_locations table.

Run from project root:
  python scripts/seed_dropoff_locations.py
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.database import Base, create_db_engine, create_session_factory
from app.models import DropoffLocation  # noqa: F401
from app.seed import seed_dropoff_locations


def main():
    engine = create_db_engine(get_settings())
    Base.metadata.create_all(bind=engine)
    db = create_session_factory(engine)()
    try:
        added = seed_dropoff_locations(db)
    finally:
        db.close()
    if added:
        print(f"Seeded {added} dropoff locations.")
    else:
        print("Dropoff locations already present; nothing to do.")


if __name__ == "__main__":
    main()
