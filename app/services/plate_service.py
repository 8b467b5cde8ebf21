import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from app.models.owner import Owner
from app.models.plate_number import PlateNumber, PlateStatus
from app.models.vehicle import Vehicle
from app.utils.exceptions import NotFoundException, ValidationException
from app.utils.serializers import serialize_plate

logger = logging.getLogger(__name__)

# Statuses from which a plate can be mounted again for the same owner
REASSIGNABLE = (PlateStatus.AVAILABLE, PlateStatus.TRANSFERRED_OUT)


class PlateService:
    """
    Plate lifecycle. Knows plates, their owner and vehicle, nothing about
    ownership history. Mutating methods flush but never commit; the caller's
    transaction decides. set_status is the exception: it is a standalone
    admin operation and commits itself.
    """

    # ─── Reads ────────────────────────────────────────────────────────────────
    def find_by_string(self, db: Session, plate_string: str) -> PlateNumber | None:
        return db.query(PlateNumber).filter(PlateNumber.plateNumber == plate_string).first()

    def get_or_404(self, db: Session, plate_id: int) -> PlateNumber:
        p = db.query(PlateNumber).filter(PlateNumber.id == plate_id).first()
        if not p:
            raise NotFoundException("Plate number")
        return p

    def get_plate(self, db: Session, plate_id: int) -> dict:
        return serialize_plate(self.get_or_404(db, plate_id))

    def active_plate_of(self, db: Session, vehicle_id: int) -> PlateNumber | None:
        return db.query(PlateNumber).filter(
            PlateNumber.vehicleId == vehicle_id,
            PlateNumber.status == PlateStatus.IN_USE,
        ).first()

    def list_vehicle_plates(self, db: Session, vehicle_id: int) -> list[dict]:
        if not db.query(Vehicle).filter(Vehicle.id == vehicle_id).first():
            raise NotFoundException("Vehicle")
        plates = db.query(PlateNumber).filter(PlateNumber.vehicleId == vehicle_id)\
                   .order_by(PlateNumber.issuedDate.desc(), PlateNumber.id.desc()).all()
        return [serialize_plate(p) for p in plates]

    def list_owner_plates(self, db: Session, owner_id: int, page: int, limit: int) -> tuple[list[dict], int]:
        """Every plate registered to an owner, whatever its status. Deactivated owners still resolve."""
        if not db.query(Owner).filter(Owner.id == owner_id).first():
            raise NotFoundException("Owner")
        q = db.query(PlateNumber).filter(PlateNumber.ownerId == owner_id)
        total = q.count()
        plates = q.order_by(PlateNumber.issuedDate.desc(), PlateNumber.id.desc())\
                  .offset((page - 1) * limit).limit(limit).all()
        return [serialize_plate(p) for p in plates], total

    # ─── Issue ────────────────────────────────────────────────────────────────
    def issue(self, db: Session, plate_string: str, owner: Owner, vehicle: Vehicle) -> PlateNumber:
        """
        Put `plate_string` IN_USE on `vehicle` for `owner`.

        Unknown string: a new plate row is created.
        Known string: it must already belong to `owner` and be AVAILABLE or
        TRANSFERRED_OUT (it is re-mounted), or be IN_USE on this very vehicle
        (returned untouched). Anything else is rejected.
        """
        plate = self.find_by_string(db, plate_string)

        if plate is not None:
            if plate.ownerId != owner.id:
                raise ValidationException(
                    f"Plate number '{plate_string}' is registered to a different owner (Owner ID {plate.ownerId}).",
                    field="plateNumber",
                )
            if plate.status == PlateStatus.IN_USE:
                if plate.vehicleId != vehicle.id:
                    raise ValidationException(
                        f"Plate number '{plate_string}' is already IN_USE on a different vehicle (ID: {plate.vehicleId}).",
                        field="plateNumber",
                    )
                logger.info(f"Plate {plate_string} already IN_USE on vehicle {vehicle.id}, nothing to do")
                return plate
            if plate.status not in REASSIGNABLE:
                raise ValidationException(
                    f"Plate number '{plate_string}' is not in an assignable status (current: {plate.status.value}).",
                    field="plateNumber",
                )

        self._ensure_no_other_active_plate(db, vehicle.id, plate.id if plate else None)

        if plate is None:
            plate = PlateNumber(
                plateNumber=plate_string,
                owner=owner,
                vehicle=vehicle,
                status=PlateStatus.IN_USE,
                issuedDate=datetime.now(timezone.utc),
            )
            db.add(plate)
            logger.info(f"Issuing new plate {plate_string} to owner {owner.id} on vehicle {vehicle.id}")
        else:
            logger.info(
                f"Re-activating {plate.status.value} plate {plate_string} on vehicle {vehicle.id} for owner {owner.id}"
            )
            plate.vehicle = vehicle
            plate.owner   = owner
            plate.status  = PlateStatus.IN_USE
        db.flush()
        return plate

    # ─── Lifecycle transitions ────────────────────────────────────────────────
    def retire_active_plates_on(self, db: Session, vehicle: Vehicle) -> list[PlateNumber]:
        """Move the vehicle's IN_USE plate to TRANSFERRED_OUT. No IN_USE plate is a data error."""
        plates = db.query(PlateNumber).filter(
            PlateNumber.vehicleId == vehicle.id,
            PlateNumber.status == PlateStatus.IN_USE,
        ).all()
        if not plates:
            raise ValidationException(
                f"No active IN_USE plate found for vehicle ID {vehicle.id}. Data inconsistency."
            )
        for p in plates:
            logger.info(f"Marking plate {p.plateNumber} (ID: {p.id}) as TRANSFERRED_OUT for vehicle {vehicle.id}")
            p.status = PlateStatus.TRANSFERRED_OUT
        db.flush()
        return plates

    def release_plates_of(self, db: Session, vehicle: Vehicle) -> list[PlateNumber]:
        """Vehicle taken off the register: its IN_USE plate goes back to its owner as AVAILABLE."""
        plates = db.query(PlateNumber).filter(
            PlateNumber.vehicleId == vehicle.id,
            PlateNumber.status == PlateStatus.IN_USE,
        ).all()
        for p in plates:
            logger.info(f"Plate {p.plateNumber} of removed vehicle {vehicle.id} marked AVAILABLE")
            p.status = PlateStatus.AVAILABLE
        db.flush()
        return plates

    def set_status(
        self,
        db: Session,
        plate_id: int,
        new_status: PlateStatus,
        owner_of_vehicle: Callable[[Session, int], int | None] | None = None,
    ) -> dict:
        """
        Admin status change. RETIRED is terminal.
        Moving a plate to IN_USE keeps one active plate per vehicle; when
        `owner_of_vehicle` is given it must also report the plate's owner as
        the vehicle's current owner.
        """
        plate = self.get_or_404(db, plate_id)

        if plate.status == PlateStatus.RETIRED and new_status != PlateStatus.RETIRED:
            raise ValidationException("Cannot change the status of a RETIRED plate.", field="status")
        if plate.status == new_status:
            return serialize_plate(plate)

        if new_status == PlateStatus.IN_USE:
            self._ensure_no_other_active_plate(db, plate.vehicleId, plate.id)
            if owner_of_vehicle is not None and owner_of_vehicle(db, plate.vehicleId) != plate.ownerId:
                raise ValidationException(
                    f"Plate {plate.plateNumber} belongs to owner {plate.ownerId}, "
                    f"who is not the current owner of vehicle {plate.vehicleId}.",
                    field="status",
                )

        old_status = plate.status
        plate.status = new_status
        db.commit()
        db.refresh(plate)
        logger.info(f"Plate {plate.id} status changed {old_status.value} -> {new_status.value}")
        return serialize_plate(plate)

    # ─── Helpers ──────────────────────────────────────────────────────────────
    def _ensure_no_other_active_plate(self, db: Session, vehicle_id: int, plate_id: int | None) -> None:
        active = self.active_plate_of(db, vehicle_id)
        if active is not None and active.id != plate_id:
            raise ValidationException(
                f"Vehicle ID {vehicle_id} already has active plate {active.plateNumber}.",
                field="plateNumber",
            )


plate_service = PlateService()
