import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleRegisterRequest, VehicleUpdateRequest
from app.services.lookups import active_owner_or_404, active_vehicle_or_404
from app.services.ownership_service import ownership_service
from app.services.plate_service import plate_service
from app.services.vehicle_service import current_state_of
from app.utils.exceptions import DuplicateEntryException
from app.utils.serializers import serialize_vehicle

logger = logging.getLogger(__name__)


class VehicleRegistrationService:
    """Brings vehicles onto the register, edits their details and takes them off again."""

    def register_vehicle(self, db: Session, data: VehicleRegisterRequest) -> dict:
        owner = active_owner_or_404(db, data.ownerId)

        if db.query(Vehicle).filter(Vehicle.chassisNumber == data.chassisNumber).first():
            raise DuplicateEntryException(
                f"Vehicle with chassis number '{data.chassisNumber}' already exists.", field="chassisNumber"
            )
        if plate_service.find_by_string(db, data.plateNumber):
            raise DuplicateEntryException(
                f"Plate number '{data.plateNumber}' already exists in the system.", field="plateNumber"
            )

        try:
            vehicle = Vehicle(
                chassisNumber=data.chassisNumber,
                modelName=data.modelName,
                manufacturerCompany=data.manufacturerCompany,
                manufacturedYear=data.manufacturedYear,
                price=data.price,
                isActive=True,
            )
            db.add(vehicle)
            db.flush()

            plate = plate_service.issue(db, data.plateNumber, owner, vehicle)
            # The purchase price stands in as the amount of the first holding
            ownership_service.open_first(db, vehicle, owner, vehicle.price, datetime.now(timezone.utc))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Registration of chassis {data.chassisNumber} hit a uniqueness constraint: {e}")
            raise DuplicateEntryException("Chassis number or plate number already registered") from e
        except Exception:
            db.rollback()
            raise

        db.refresh(vehicle)
        db.refresh(plate)
        logger.info(
            f"Vehicle {vehicle.id} ({vehicle.chassisNumber}) registered to owner {owner.id} with plate {plate.plateNumber}"
        )
        return serialize_vehicle(vehicle, plate, owner)

    def update_vehicle(self, db: Session, vehicle_id: int, data: VehicleUpdateRequest) -> dict:
        v = active_vehicle_or_404(db, vehicle_id)

        if data.modelName:                      v.modelName           = data.modelName.strip()
        if data.manufacturerCompany is not None: v.manufacturerCompany = data.manufacturerCompany
        if data.manufacturedYear:               v.manufacturedYear    = data.manufacturedYear
        if data.price is not None:              v.price               = data.price

        db.commit()
        db.refresh(v)
        logger.info(f"Vehicle {v.id} details updated")
        plate, record = current_state_of(v)
        return serialize_vehicle(v, plate, record.owner if record else None)

    def soft_delete_vehicle(self, db: Session, vehicle_id: int) -> None:
        """
        Take the vehicle off the register. Its mounted plate returns to the
        owner as AVAILABLE; ownership history is kept as it is.
        """
        v = active_vehicle_or_404(db, vehicle_id)
        try:
            plate_service.release_plates_of(db, v)
            v.isActive = False
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Vehicle {v.id} ({v.chassisNumber}) soft-deleted")


vehicle_registration_service = VehicleRegistrationService()
