from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_any_authenticated, get_admin_user
from app.models.user import User
from app.schemas.common import ERROR_RESPONSES, paginated_response, success_response
from app.schemas.owner import OwnerCreateRequest
from app.services.owner_service import owner_service
from app.services.vehicle_service import vehicle_service

router = APIRouter(prefix="/owners", responses=ERROR_RESPONSES)


@router.get("", summary="List active owners (paginated)")
def list_owners(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    db:     Session       = Depends(get_db),
    _:      User          = Depends(get_any_authenticated),
):
    data, total = owner_service.list_owners(db, page, limit, search)
    return paginated_response("Owners retrieved successfully", data, total, page, limit)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register owner (Admin)")
def register_owner(
    body: OwnerCreateRequest,
    db:   Session = Depends(get_db),
    _:    User    = Depends(get_admin_user),
):
    return success_response("Owner registered successfully", owner_service.register_owner(db, body))


@router.get("/national-id/{national_id}/vehicles", summary="Vehicles currently held by an owner")
def vehicles_of_owner(national_id: str, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Vehicles retrieved", vehicle_service.vehicles_of_owner(db, national_id))


@router.get("/{owner_id}", summary="Get owner by ID")
def get_owner(owner_id: int, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Owner retrieved", owner_service.get_owner(db, owner_id))


@router.delete("/{owner_id}", summary="Deactivate owner (Admin)")
def deactivate_owner(owner_id: int, db: Session = Depends(get_db), _: User = Depends(get_admin_user)):
    owner_service.deactivate_owner(db, owner_id)
    return success_response("Owner deactivated successfully")
