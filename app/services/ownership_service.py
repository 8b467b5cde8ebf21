import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Query, Session

from app.models.owner import Owner
from app.models.ownership import Ownership
from app.models.vehicle import Vehicle
from app.utils.exceptions import ConflictException, ValidationException

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored as UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class OwnershipService:
    """
    Append-only ledger of who held which vehicle, and when.
    The only update ever issued is closing the open record of a vehicle.
    """

    def current_ownership_of(self, db: Session, vehicle: Vehicle, lock: bool = False) -> Ownership:
        """
        The single open record of `vehicle`. With lock=True the row is read
        FOR UPDATE so a concurrent transfer of the same vehicle waits.

        A locked read that comes back empty while an open record is visible
        to a fresh read means another transfer closed the row we waited on
        and committed its replacement: that is a lost race, not bad data.
        """
        records = self._open_records(db, vehicle.id, lock)

        if not records:
            if lock and self.current_owner_id_of(db, vehicle.id) is not None:
                logger.warning(f"Vehicle {vehicle.id} changed owner while waiting for its ownership lock")
                raise ConflictException()
            raise ValidationException(
                f"Vehicle ID {vehicle.id} has no current active ownership record. Cannot transfer."
            )
        if len(records) > 1:
            logger.error(f"Vehicle {vehicle.id} has {len(records)} open ownership records")
            raise ValidationException(
                f"Vehicle ID {vehicle.id} has more than one open ownership record. Data inconsistency."
            )
        return records[0]

    def _open_records(self, db: Session, vehicle_id: int, lock: bool) -> list[Ownership]:
        q = db.query(Ownership).filter(
            Ownership.vehicleId == vehicle_id,
            Ownership.endDate.is_(None),
        ).order_by(Ownership.startDate.desc())
        if lock:
            q = q.with_for_update()
        return q.all()

    def current_owner_id_of(self, db: Session, vehicle_id: int) -> int | None:
        record = db.query(Ownership).filter(
            Ownership.vehicleId == vehicle_id,
            Ownership.endDate.is_(None),
        ).first()
        return record.ownerId if record else None

    def open_first(
        self,
        db: Session,
        vehicle: Vehicle,
        owner: Owner,
        amount: Decimal,
        now: datetime,
    ) -> Ownership:
        """Opening record of a newly registered vehicle."""
        if self.current_owner_id_of(db, vehicle.id) is not None:
            raise ValidationException(f"Vehicle ID {vehicle.id} already has an open ownership record.")

        record = Ownership(
            vehicle=vehicle,
            owner=owner,
            startDate=now,
            endDate=None,
            transferAmount=amount,
        )
        db.add(record)
        db.flush()
        logger.info(f"Opened ownership {record.id}: vehicle {vehicle.id} -> owner {owner.id}")
        return record

    def close_and_open(
        self,
        db: Session,
        vehicle: Vehicle,
        closing: Ownership,
        new_owner: Owner,
        amount: Decimal,
        now: datetime,
    ) -> Ownership:
        """
        Close `closing` at `now` and open the new owner's record at the same
        instant. Both writes belong to the caller's transaction.
        """
        if closing.vehicleId != vehicle.id:
            raise ValidationException(
                f"Ownership record {closing.id} does not belong to vehicle {vehicle.id}."
            )
        if closing.endDate is not None:
            raise ValidationException(f"Ownership record {closing.id} is already closed.")
        if _as_utc(now) < _as_utc(closing.startDate):
            raise ValidationException(
                f"Transfer time {now.isoformat()} is earlier than the start of the current ownership."
            )

        # Close first: the open-record index would reject two open rows
        closing.endDate = now
        db.flush()

        record = Ownership(
            vehicle=vehicle,
            owner=new_owner,
            startDate=now,
            endDate=None,
            transferAmount=amount,
        )
        db.add(record)
        db.flush()
        logger.info(
            f"Ownership of vehicle {vehicle.id}: closed {closing.id} (owner {closing.ownerId}), "
            f"opened {record.id} (owner {new_owner.id})"
        )
        return record

    def history_of(self, db: Session, vehicle: Vehicle) -> Query:
        """Every record of the vehicle, newest first. Iterate as often as needed."""
        return db.query(Ownership).filter(Ownership.vehicleId == vehicle.id)\
                 .order_by(Ownership.startDate.desc(), Ownership.id.desc())


ownership_service = OwnershipService()
