from sqlalchemy.orm import Session

from app.models.owner import Owner
from app.models.vehicle import Vehicle
from app.utils.exceptions import NotFoundException


# Current-state reads only see active rows; history reads go through the ledger.

def active_vehicle_or_404(db: Session, vehicle_id: int) -> Vehicle:
    v = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.isActive == True).first()
    if not v:
        raise NotFoundException("Vehicle")
    return v


def active_owner_or_404(db: Session, owner_id: int, label: str = "Owner") -> Owner:
    o = db.query(Owner).filter(Owner.id == owner_id, Owner.isActive == True).first()
    if not o:
        raise NotFoundException(label)
    return o
