from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_any_authenticated, get_admin_user
from app.models.user import User
from app.schemas.common import ERROR_RESPONSES, ErrorResponse, success_response
from app.schemas.ownership import TransferRequest
from app.services.transfer_service import transfer_service
from app.services.vehicle_service import vehicle_service

router = APIRouter(prefix="/ownerships", responses=ERROR_RESPONSES)


@router.post(
    "/transfer",
    summary="Transfer a vehicle to a new owner with a new plate (Admin)",
    responses={409: {"model": ErrorResponse, "description": "Concurrent transfer of the same vehicle"}},
)
def transfer_ownership(
    body:             TransferRequest,
    background_tasks: BackgroundTasks,
    db:               Session = Depends(get_db),
    _:                User    = Depends(get_admin_user),
):
    data = transfer_service.transfer_ownership(db, body, background_tasks)
    return success_response("Vehicle ownership transferred successfully", data)


@router.get("/vehicles/{vehicle_id}/history", summary="Ownership history by vehicle ID")
def history_by_vehicle(vehicle_id: int, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Ownership history retrieved", vehicle_service.history_by_vehicle_id(db, vehicle_id))


@router.get("/chassis/{chassis_number}/history", summary="Ownership history by chassis number")
def history_by_chassis(chassis_number: str, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Ownership history retrieved", vehicle_service.history_by_chassis(db, chassis_number))


@router.get("/plates/{plate_number}/history", summary="Ownership history by plate number")
def history_by_plate(plate_number: str, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Ownership history retrieved", vehicle_service.history_by_plate(db, plate_number))
