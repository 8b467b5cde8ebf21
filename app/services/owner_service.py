import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.owner import Owner
from app.models.ownership import Ownership
from app.models.user import RoleName, User, UserStatus
from app.schemas.owner import OwnerCreateRequest
from app.utils.exceptions import DuplicateEntryException, NotFoundException
from app.utils.serializers import serialize_owner

logger = logging.getLogger(__name__)


class OwnerService:

    # ─── List ─────────────────────────────────────────────────────────────────
    def list_owners(self, db: Session, page: int, limit: int, search: str | None) -> tuple[list[dict], int]:
        q = db.query(Owner).join(Owner.user).filter(Owner.isActive == True)
        if search:
            kw = f"%{search}%"
            q = q.filter(or_(
                User.firstName.ilike(kw),
                User.lastName.ilike(kw),
                User.email.ilike(kw),
                User.nationalId.ilike(kw),
            ))
        total = q.count()
        owners = q.order_by(Owner.id).offset((page - 1) * limit).limit(limit).all()
        return [serialize_owner(o) for o in owners], total

    # ─── Get by ID ────────────────────────────────────────────────────────────
    def get_owner(self, db: Session, owner_id: int) -> dict:
        o = db.query(Owner).filter(Owner.id == owner_id).first()
        if not o:
            raise NotFoundException("Owner")
        return serialize_owner(o)

    # ─── Register ─────────────────────────────────────────────────────────────
    def register_owner(self, db: Session, data: OwnerCreateRequest) -> dict:
        if db.query(User).filter(User.email == data.email).first():
            raise DuplicateEntryException("Email already registered", field="email")
        if db.query(User).filter(User.phoneNumber == data.phoneNumber).first():
            raise DuplicateEntryException("Phone number already registered", field="phoneNumber")
        if db.query(User).filter(User.nationalId == data.nationalId).first():
            raise DuplicateEntryException("National ID already registered", field="nationalId")

        try:
            u = User(
                firstName=data.firstName,
                lastName=data.lastName,
                email=data.email,
                phoneNumber=data.phoneNumber,
                nationalId=data.nationalId,
                role=RoleName.OWNER,
                status=UserStatus.PENDING,
                enabled=False,
            )
            o = Owner(user=u, isActive=True)
            db.add(o)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Owner registration for {data.email} hit a uniqueness constraint: {e}")
            raise DuplicateEntryException("Owner identity already registered") from e

        db.refresh(o)
        logger.info(f"Owner {o.id} registered (user {u.id}, {u.email})")
        return serialize_owner(o)

    # ─── Deactivate ───────────────────────────────────────────────────────────
    def deactivate_owner(self, db: Session, owner_id: int) -> None:
        """
        Soft-delete. The owner can no longer receive vehicles or plates;
        vehicles they still hold stay theirs until transferred away.
        """
        o = db.query(Owner).filter(Owner.id == owner_id).first()
        if not o:
            raise NotFoundException("Owner")

        held = db.query(Ownership).filter(Ownership.ownerId == o.id, Ownership.endDate.is_(None)).count()
        if held:
            logger.warning(f"Deactivating owner {o.id} who still holds {held} vehicle(s)")
        o.isActive = False
        db.commit()
        logger.info(f"Owner {o.id} deactivated")


owner_service = OwnerService()
