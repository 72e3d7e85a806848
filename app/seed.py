"""Seed default dropoff locations."""
from sqlalchemy.orm import Session
from app.models.dropoff_location import DropoffLocation

DEFAULT_DROPOFF_LOCATIONS = [
    {
        "name": "Main Train Station",
        "address": "123 Railway Rd, City Center",
        "latitude": 12.3456,
        "longitude": 98.7654,
    },
    {
        "name": "Airport Terminal",
        "address": "456 Airport Blvd, Airport Zone",
        "latitude": 12.3789,
        "longitude": 98.7321,
    },
    {
        "name": "Central Bus Station",
        "address": "789 Transit St, Downtown",
        "latitude": 12.3123,
        "longitude": 98.7456,
    },
]


def seed_dropoff_locations(db: Session) -> int:
    """Insert the default locations into an empty table. Returns how many were added."""
    if db.query(DropoffLocation).count() > 0:
        return 0
    for loc in DEFAULT_DROPOFF_LOCATIONS:
        db.add(DropoffLocation(**loc))
    db.commit()
    return len(DEFAULT_DROPOFF_LOCATIONS)
