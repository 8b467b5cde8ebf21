from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_any_authenticated, get_admin_user
from app.models.user import User
from app.schemas.common import ERROR_RESPONSES, paginated_response, success_response
from app.schemas.plate_number import IssuePlateRequest, PlateStatusRequest
from app.services.ownership_service import ownership_service
from app.services.plate_service import plate_service
from app.services.transfer_service import transfer_service

router = APIRouter(prefix="/plates", responses=ERROR_RESPONSES)


@router.post("/issue", status_code=status.HTTP_201_CREATED, summary="Issue a new plate to a vehicle (Admin)")
def issue_plate(
    body: IssuePlateRequest,
    db:   Session = Depends(get_db),
    _:    User    = Depends(get_admin_user),
):
    return success_response("Plate issued successfully", transfer_service.reissue_plate(db, body))


@router.get("/by-owner/{owner_id}", summary="Plates registered to an owner (paginated)")
def list_owner_plates(
    owner_id: int,
    page:     int     = Query(1, ge=1),
    limit:    int     = Query(20, ge=1, le=100),
    db:       Session = Depends(get_db),
    _:        User    = Depends(get_any_authenticated),
):
    data, total = plate_service.list_owner_plates(db, owner_id, page, limit)
    return paginated_response("Plates retrieved successfully", data, total, page, limit)


@router.get("/{plate_id}", summary="Get plate by ID")
def get_plate(plate_id: int, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Plate retrieved", plate_service.get_plate(db, plate_id))


@router.patch("/{plate_id}/status", summary="Change plate status (Admin)")
def set_plate_status(
    plate_id: int,
    body:     PlateStatusRequest,
    db:       Session = Depends(get_db),
    _:        User    = Depends(get_admin_user),
):
    data = plate_service.set_status(
        db, plate_id, body.status, owner_of_vehicle=ownership_service.current_owner_id_of
    )
    return success_response("Plate status updated", data)
