"""Dropoff locations shown in the booking UI (admin managed)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.errors import NotFound, ValidationFailed
from app.models.dropoff_location import DropoffLocation
from app.schemas.auth import MessageResponse
from app.schemas.location import DropoffLocationCreate, DropoffLocationResponse, DropoffLocationUpdate

router = APIRouter(prefix="/locations", tags=["locations"])


def _get_location_or_404(db: Session, location_id: int) -> DropoffLocation:
    location = db.get(DropoffLocation, location_id)
    if not location:
        raise NotFound("Dropoff location not found")
    return location


@router.get("/dropoff-locations", response_model=list[DropoffLocationResponse])
def list_dropoff_locations(db: Session = Depends(get_db), current_user=Depends(require_admin)):
    locations = db.query(DropoffLocation).order_by(DropoffLocation.name.asc(), DropoffLocation.id).all()
    return [DropoffLocationResponse.model_validate(loc) for loc in locations]


@router.post("/dropoff-locations", response_model=DropoffLocationResponse, status_code=201)
def create_dropoff_location(
    data: DropoffLocationCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    location = DropoffLocation(**data.model_dump())
    db.add(location)
    db.commit()
    db.refresh(location)
    return DropoffLocationResponse.model_validate(location)


@router.put("/dropoff-locations/{location_id}", response_model=DropoffLocationResponse)
def update_dropoff_location(
    location_id: int,
    data: DropoffLocationUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    location = _get_location_or_404(db, location_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValidationFailed(f"{field} must not be blank")
        setattr(location, field, value)
    db.commit()
    db.refresh(location)
    return DropoffLocationResponse.model_validate(location)


@router.delete("/dropoff-locations/{location_id}", response_model=MessageResponse)
def delete_dropoff_location(
    location_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    location = _get_location_or_404(db, location_id)
    db.delete(location)
    db.commit()
    return MessageResponse(message="Dropoff location deleted successfully")
