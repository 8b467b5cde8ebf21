from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_any_authenticated, get_admin_user
from app.models.user import User
from app.schemas.common import ERROR_RESPONSES, paginated_response, success_response
from app.schemas.vehicle import VehicleRegisterRequest, VehicleUpdateRequest
from app.services.plate_service import plate_service
from app.services.vehicle_registration_service import vehicle_registration_service
from app.services.vehicle_service import vehicle_service

router = APIRouter(prefix="/vehicles", responses=ERROR_RESPONSES)


@router.get("", summary="List registered vehicles (paginated)")
def list_vehicles(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Chassis, model or manufacturer"),
    db:     Session       = Depends(get_db),
    _:      User          = Depends(get_any_authenticated),
):
    data, total = vehicle_service.list_vehicles(db, page, limit, search)
    return paginated_response("Vehicles retrieved successfully", data, total, page, limit)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register vehicle with its first plate (Admin)")
def register_vehicle(
    body: VehicleRegisterRequest,
    db:   Session = Depends(get_db),
    _:    User    = Depends(get_admin_user),
):
    data = vehicle_registration_service.register_vehicle(db, body)
    return success_response("Vehicle registered successfully", data)


@router.get("/chassis/{chassis_number}", summary="Find vehicle by chassis number")
def find_by_chassis(chassis_number: str, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Vehicle retrieved", vehicle_service.find_by_chassis(db, chassis_number))


@router.get("/plate/{plate_number}", summary="Find vehicle by its IN_USE plate")
def find_by_plate(plate_number: str, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Vehicle retrieved", vehicle_service.find_by_plate(db, plate_number))


@router.get("/{vehicle_id}", summary="Current vehicle state")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Vehicle retrieved", vehicle_service.get_vehicle_state(db, vehicle_id))


@router.get("/{vehicle_id}/plates", summary="Every plate the vehicle has carried")
def list_vehicle_plates(vehicle_id: int, db: Session = Depends(get_db), _: User = Depends(get_any_authenticated)):
    return success_response("Plates retrieved", plate_service.list_vehicle_plates(db, vehicle_id))


@router.put("/{vehicle_id}", summary="Update vehicle details (Admin)")
def update_vehicle(
    vehicle_id: int,
    body:       VehicleUpdateRequest,
    db:         Session = Depends(get_db),
    _:          User    = Depends(get_admin_user),
):
    data = vehicle_registration_service.update_vehicle(db, vehicle_id, body)
    return success_response("Vehicle updated successfully", data)


@router.delete("/{vehicle_id}", summary="Remove vehicle from the register (Admin)")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db), _: User = Depends(get_admin_user)):
    vehicle_registration_service.soft_delete_vehicle(db, vehicle_id)
    return success_response("Vehicle deleted successfully")
