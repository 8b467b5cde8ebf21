from decimal import Decimal

from app.models.owner import Owner
from app.models.ownership import Ownership
from app.models.plate_number import PlateNumber
from app.models.vehicle import Vehicle


def _money(v: Decimal | None) -> str | None:
    return str(v) if v is not None else None


def _iso(dt) -> str | None:
    return dt.isoformat() if dt else None


def serialize_owner_name(o: Owner | None) -> dict | None:
    if o is None:
        return None
    return {"id": o.id, "firstName": o.firstName, "lastName": o.lastName}


def serialize_owner(o: Owner) -> dict:
    return {
        "id":          o.id,
        "userId":      o.userId,
        "firstName":   o.firstName,
        "lastName":    o.lastName,
        "email":       o.email,
        "phoneNumber": o.user.phoneNumber,
        "nationalId":  o.nationalId,
        "isActive":    o.isActive,
        "createdAt":   _iso(o.createdAt),
    }


def serialize_plate(p: PlateNumber | None) -> dict | None:
    if p is None:
        return None
    return {
        "id":          p.id,
        "plateNumber": p.plateNumber,
        "status":      p.status.value,
        "ownerId":     p.ownerId,
        "vehicleId":   p.vehicleId,
        "issuedDate":  _iso(p.issuedDate),
    }


def serialize_vehicle_summary(v: Vehicle) -> dict:
    return {"id": v.id, "chassisNumber": v.chassisNumber, "modelName": v.modelName}


def serialize_vehicle(v: Vehicle, current_plate: PlateNumber | None, current_owner: Owner | None) -> dict:
    return {
        "id":                  v.id,
        "chassisNumber":       v.chassisNumber,
        "modelName":           v.modelName,
        "manufacturerCompany": v.manufacturerCompany,
        "manufacturedYear":    v.manufacturedYear,
        "price":               _money(v.price),
        "isActive":            v.isActive,
        "currentPlate":        serialize_plate(current_plate),
        "currentOwner":        serialize_owner_name(current_owner),
        "createdAt":           _iso(v.createdAt),
        "updatedAt":           _iso(v.updatedAt),
    }


def serialize_ownership(o: Ownership) -> dict:
    return {
        "id":             o.id,
        "vehicle":        serialize_vehicle_summary(o.vehicle),
        "owner":          serialize_owner_name(o.owner),
        "startDate":      _iso(o.startDate),
        "endDate":        _iso(o.endDate),
        "transferAmount": _money(o.transferAmount),
        "isActive":       o.endDate is None,
    }
