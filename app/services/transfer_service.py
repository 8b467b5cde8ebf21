import logging
from datetime import datetime, timezone

from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models.plate_number import PlateStatus
from app.schemas.ownership import TransferRequest
from app.schemas.plate_number import IssuePlateRequest
from app.services.lookups import active_owner_or_404, active_vehicle_or_404
from app.services.ownership_service import ownership_service
from app.services.plate_service import plate_service
from app.utils.email import notify_ownership_transferred
from app.utils.exceptions import ConflictException, ValidationException
from app.utils.serializers import serialize_ownership, serialize_plate

logger = logging.getLogger(__name__)


class TransferService:
    """
    Moves a vehicle from its current owner to a new one.
    Plate and ledger changes are applied in one transaction: on any failure
    nothing is written. Lost races surface as ConflictException.
    """

    def transfer_ownership(
        self,
        db: Session,
        data: TransferRequest,
        background_tasks: BackgroundTasks | None = None,
    ) -> dict:
        logger.info(
            f"Transfer requested: vehicle {data.vehicleId} from owner {data.currentOwnerId} "
            f"to owner {data.newOwnerId}, new plate {data.newPlateNumber}"
        )
        try:
            result, notification = self._apply_transfer(db, data)
            db.commit()
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            logger.warning(f"Transfer of vehicle {data.vehicleId} lost a concurrent update: {e}")
            raise ConflictException() from e
        except Exception:
            db.rollback()
            raise

        logger.info(f"Vehicle {data.vehicleId} transferred to owner {data.newOwnerId}")
        self._dispatch_notification(background_tasks, notification)
        return result

    def _apply_transfer(self, db: Session, data: TransferRequest) -> tuple[dict, tuple]:
        vehicle = active_vehicle_or_404(db, data.vehicleId)

        # The ledger decides who the owner is; the request only confirms it
        record = ownership_service.current_ownership_of(db, vehicle, lock=True)
        current_owner = record.owner
        if current_owner.id != data.currentOwnerId:
            raise ValidationException(
                f"Provided current owner ID ({data.currentOwnerId}) does not match the vehicle's "
                f"actual current owner ID ({current_owner.id}).",
                field="currentOwnerId",
            )

        new_owner = active_owner_or_404(db, data.newOwnerId, "New owner")
        if new_owner.id == current_owner.id:
            raise ValidationException("New owner cannot be the same as the current owner.", field="newOwnerId")

        old_plate = plate_service.active_plate_of(db, vehicle.id)
        if old_plate is None:
            raise ValidationException(
                f"Vehicle ID {vehicle.id} has no IN_USE plate. Data inconsistency."
            )
        if old_plate.ownerId != current_owner.id:
            raise ValidationException(
                f"Active plate {old_plate.plateNumber} is not held by the current owner. Data inconsistency."
            )

        plate_service.retire_active_plates_on(db, vehicle)
        new_plate = plate_service.issue(db, data.newPlateNumber, new_owner, vehicle)

        now = datetime.now(timezone.utc)
        new_record = ownership_service.close_and_open(
            db, vehicle, record, new_owner, data.transferAmount, now
        )

        result = {
            "ownership":     serialize_ownership(new_record),
            "previousPlate": serialize_plate(old_plate),
            "currentPlate":  serialize_plate(new_plate),
        }
        notification = (
            current_owner, new_owner, vehicle.chassisNumber,
            old_plate.plateNumber, new_plate.plateNumber, data.transferAmount,
        )
        # Load identities now; the emails may run after the session is gone
        _ = current_owner.user, new_owner.user
        return result, notification

    def _dispatch_notification(self, background_tasks: BackgroundTasks | None, notification: tuple) -> None:
        if background_tasks is not None:
            background_tasks.add_task(notify_ownership_transferred, *notification)
        else:
            notify_ownership_transferred(*notification)

    # ─── Re-plating ───────────────────────────────────────────────────────────
    def reissue_plate(self, db: Session, data: IssuePlateRequest) -> dict:
        """
        Give a vehicle a different plate without changing its owner.
        The owner must be the vehicle's current owner; the vehicle's active
        plate, if any, becomes TRANSFERRED_OUT.
        """
        try:
            vehicle = active_vehicle_or_404(db, data.vehicleId)
            owner = active_owner_or_404(db, data.ownerId)

            record = ownership_service.current_ownership_of(db, vehicle, lock=True)
            if record.ownerId != owner.id:
                raise ValidationException(
                    f"Owner ID {owner.id} is not the current owner of vehicle ID {vehicle.id}.",
                    field="ownerId",
                )

            existing = plate_service.find_by_string(db, data.plateNumber)
            already_mounted = (
                existing is not None
                and existing.status == PlateStatus.IN_USE
                and existing.vehicleId == vehicle.id
                and existing.ownerId == owner.id
            )
            if not already_mounted and plate_service.active_plate_of(db, vehicle.id) is not None:
                plate_service.retire_active_plates_on(db, vehicle)

            plate = plate_service.issue(db, data.plateNumber, owner, vehicle)
            db.commit()
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            logger.warning(f"Plate issue for vehicle {data.vehicleId} lost a concurrent update: {e}")
            raise ConflictException() from e
        except Exception:
            db.rollback()
            raise

        db.refresh(plate)
        logger.info(f"Plate {plate.plateNumber} issued to vehicle {plate.vehicleId} for owner {plate.ownerId}")
        return serialize_plate(plate)


transfer_service = TransferService()
