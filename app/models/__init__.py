"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.user import User, UserRole
from app.models.credit_history import CreditHistory
from app.models.dropoff_location import DropoffLocation

__all__ = [
    "User",
    "UserRole",
    "CreditHistory",
    "DropoffLocation",
]
