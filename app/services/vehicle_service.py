from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.owner import Owner
from app.models.ownership import Ownership
from app.models.plate_number import PlateNumber, PlateStatus
from app.models.user import User
from app.models.vehicle import Vehicle
from app.services.lookups import active_vehicle_or_404
from app.services.ownership_service import ownership_service
from app.utils.exceptions import NotFoundException
from app.utils.serializers import serialize_ownership, serialize_vehicle


def current_state_of(v: Vehicle) -> tuple[PlateNumber | None, Ownership | None]:
    """The vehicle's IN_USE plate and open ownership record, either may be None."""
    plate = next((p for p in v.plates if p.status == PlateStatus.IN_USE), None)
    record = next((o for o in v.ownerships if o.endDate is None), None)
    return plate, record


def _serialize(v: Vehicle) -> dict:
    plate, record = current_state_of(v)
    return serialize_vehicle(v, plate, record.owner if record else None)


class VehicleService:
    """Read side of the register. Nothing here writes."""

    # ─── Current state ────────────────────────────────────────────────────────
    def list_vehicles(self, db: Session, page: int, limit: int, search: str | None) -> tuple[list[dict], int]:
        q = db.query(Vehicle).filter(Vehicle.isActive == True)
        if search:
            kw = f"%{search}%"
            q = q.filter(or_(
                Vehicle.chassisNumber.ilike(kw),
                Vehicle.modelName.ilike(kw),
                Vehicle.manufacturerCompany.ilike(kw),
            ))
        total = q.count()
        items = q.order_by(Vehicle.id).offset((page - 1) * limit).limit(limit).all()
        return [_serialize(v) for v in items], total

    def get_vehicle_state(self, db: Session, vehicle_id: int) -> dict:
        return _serialize(active_vehicle_or_404(db, vehicle_id))

    def find_by_chassis(self, db: Session, chassis_number: str) -> dict:
        v = db.query(Vehicle).filter(
            Vehicle.chassisNumber == chassis_number.strip().upper(),
            Vehicle.isActive == True,
        ).first()
        if not v:
            raise NotFoundException("Vehicle")
        return _serialize(v)

    def find_by_plate(self, db: Session, plate_number: str) -> dict:
        """Only a plate currently mounted (IN_USE) identifies a vehicle."""
        p = db.query(PlateNumber).filter(
            PlateNumber.plateNumber == " ".join(plate_number.split()).upper(),
            PlateNumber.status == PlateStatus.IN_USE,
        ).first()
        if not p or not p.vehicle.isActive:
            raise NotFoundException("Vehicle")
        return _serialize(p.vehicle)

    def vehicles_of_owner(self, db: Session, national_id: str) -> list[dict]:
        """Vehicles the owner holds right now. Unknown national ID gives an empty list."""
        owner = db.query(Owner).join(Owner.user).filter(User.nationalId == national_id.strip()).first()
        if not owner:
            return []
        vehicles = db.query(Vehicle).join(Vehicle.ownerships).filter(
            Ownership.ownerId == owner.id,
            Ownership.endDate.is_(None),
            Vehicle.isActive == True,
        ).order_by(Vehicle.id).all()
        return [_serialize(v) for v in vehicles]

    # ─── History ──────────────────────────────────────────────────────────────
    # History outlives the vehicle: soft-deleted vehicles still resolve here.
    def history_by_vehicle_id(self, db: Session, vehicle_id: int) -> list[dict]:
        v = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        return self._history(db, v)

    def history_by_chassis(self, db: Session, chassis_number: str) -> list[dict]:
        v = db.query(Vehicle).filter(Vehicle.chassisNumber == chassis_number.strip().upper()).first()
        return self._history(db, v)

    def history_by_plate(self, db: Session, plate_number: str) -> list[dict]:
        # Any plate the vehicle ever carried leads to its history
        p = db.query(PlateNumber).filter(
            PlateNumber.plateNumber == " ".join(plate_number.split()).upper()
        ).first()
        return self._history(db, p.vehicle if p else None)

    def _history(self, db: Session, v: Vehicle | None) -> list[dict]:
        if not v:
            raise NotFoundException("Vehicle")
        return [serialize_ownership(o) for o in ownership_service.history_of(db, v)]


vehicle_service = VehicleService()
