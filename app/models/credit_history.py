"""Append-only record of credit balance changes.
No updates or deletes - every adjustment is permanent."""
from sqlalchemy import Column, BigInteger, Integer, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class CreditHistory(Base):
    __tablename__ = "credit_history"

    id = Column(Integer, primary_key=True, index=True)

    # Plain ids, no FK: records outlive the accounts they mention
    user_id = Column(BigInteger, nullable=False, index=True)
    admin_id = Column(BigInteger, nullable=False, index=True)

    previous_credits = Column(Integer, nullable=False)
    new_credits = Column(Integer, nullable=False)
    reason = Column(String(255), nullable=True)

    # UTC only - server_default
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
