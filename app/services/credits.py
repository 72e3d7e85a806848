"""Credit balance changes. Every change appends one CreditHistory row; rows are never updated or deleted."""
from __future__ import annotations

from sqlalchemy.orm import Session

from app.errors import ValidationFailed
from app.models.credit_history import CreditHistory
from app.models.user import User

_REASON_LEN = 255


def set_credits(
    db: Session,
    user: User,
    new_credits: int,
    *,
    actor: User,
    reason: str | None = None,
) -> CreditHistory:
    """Set `user`'s balance and record the change. Caller commits."""
    if new_credits < 0:
        raise ValidationFailed("Credits cannot be negative")
    entry = CreditHistory(
        user_id=user.id,
        admin_id=actor.id,
        previous_credits=user.credits,
        new_credits=new_credits,
        reason=(reason or "").strip()[:_REASON_LEN] or None,
    )
    user.credits = new_credits
    db.add(entry)
    db.flush()  # get entry.id if caller needs it; commit remains with caller
    return entry


def list_history(db: Session, user_id: int) -> list[CreditHistory]:
    return (
        db.query(CreditHistory)
        .filter(CreditHistory.user_id == user_id)
        .order_by(CreditHistory.created_at.desc(), CreditHistory.id.desc())
        .all()
    )
