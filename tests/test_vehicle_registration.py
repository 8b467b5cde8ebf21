# tests/test_vehicle_registration.py
"""Registering, editing and removing vehicles."""

from decimal import Decimal

import pytest

from app.models.ownership import Ownership
from app.models.plate_number import PlateNumber, PlateStatus
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleRegisterRequest, VehicleUpdateRequest
from app.services.vehicle_registration_service import vehicle_registration_service
from app.utils.exceptions import ErrorCode, NotFoundException, ValidationException
from tests.factories import make_owner, register_vehicle


def _request(owner_id: int, chassis: str = "JTDBR32E720012345", plate: str = "RAD 123 B") -> VehicleRegisterRequest:
    return VehicleRegisterRequest(
        chassisNumber=chassis,
        modelName="RAV4",
        manufacturerCompany="Toyota",
        manufacturedYear=2021,
        price=Decimal("32000000"),
        ownerId=owner_id,
        plateNumber=plate,
    )


class TestRegisterVehicle:
    def test_creates_vehicle_plate_and_first_record(self, db):
        a = make_owner(db)

        data = vehicle_registration_service.register_vehicle(db, _request(a.id))

        assert data["chassisNumber"] == "JTDBR32E720012345"
        assert data["currentPlate"]["plateNumber"] == "RAD 123 B"
        assert data["currentPlate"]["status"] == "IN_USE"
        assert data["currentOwner"]["id"] == a.id
        assert Decimal(data["price"]) == Decimal("32000000")

        record = db.query(Ownership).filter(Ownership.vehicleId == data["id"]).one()
        assert record.endDate is None
        assert record.transferAmount == Decimal("32000000")

    def test_duplicate_chassis_rejected_without_new_rows(self, db):
        a = make_owner(db)
        vehicle_registration_service.register_vehicle(db, _request(a.id, plate="RAD 111 B"))

        with pytest.raises(ValidationException) as exc:
            vehicle_registration_service.register_vehicle(db, _request(a.id, plate="RAD 222 B"))

        assert exc.value.field == "chassisNumber"
        assert exc.value.error_code == ErrorCode.DUPLICATE_ENTRY
        assert db.query(Vehicle).count() == 1
        assert db.query(PlateNumber).filter(PlateNumber.plateNumber == "RAD 222 B").first() is None

    def test_existing_plate_string_rejected(self, db):
        a = make_owner(db)
        register_vehicle(db, a, plate="RAD 333 B")

        with pytest.raises(ValidationException) as exc:
            vehicle_registration_service.register_vehicle(db, _request(a.id, chassis="OTHERCHASSIS01", plate="RAD 333 B"))

        assert exc.value.field == "plateNumber"
        assert db.query(Vehicle).count() == 1

    def test_unknown_owner(self, db):
        with pytest.raises(NotFoundException):
            vehicle_registration_service.register_vehicle(db, _request(404))

    def test_request_normalises_identifiers(self):
        req = _request(1, chassis="  jtdbr32e720099999 ", plate="rad   456  c")
        assert req.chassisNumber == "JTDBR32E720099999"
        assert req.plateNumber == "RAD 456 C"

    @pytest.mark.parametrize("field,value", [
        ("price", Decimal("0")),
        ("manufacturedYear", 1850),
        ("plateNumber", "R!"),
        ("chassisNumber", "ABC"),
    ])
    def test_request_rejects_bad_values(self, field, value):
        payload = _request(1).model_dump()
        payload[field] = value
        with pytest.raises(ValueError):
            VehicleRegisterRequest(**payload)


class TestUpdateVehicle:
    def test_details_change_identity_does_not(self, db):
        a = make_owner(db)
        vehicle = register_vehicle(db, a, plate="RAE 123 B")

        data = vehicle_registration_service.update_vehicle(
            db, vehicle.id, VehicleUpdateRequest(modelName="Land Cruiser", price=Decimal("45000000"))
        )

        assert data["modelName"] == "Land Cruiser"
        assert Decimal(data["price"]) == Decimal("45000000")
        assert data["chassisNumber"] == vehicle.chassisNumber
        assert data["currentPlate"]["plateNumber"] == "RAE 123 B"
        assert data["currentOwner"]["id"] == a.id


class TestSoftDelete:
    def test_vehicle_leaves_register_plate_returns_to_owner(self, db):
        a = make_owner(db)
        vehicle = register_vehicle(db, a, plate="RAF 123 B")

        vehicle_registration_service.soft_delete_vehicle(db, vehicle.id)

        db.expire_all()
        assert db.get(Vehicle, vehicle.id).isActive is False
        plate = db.query(PlateNumber).filter(PlateNumber.plateNumber == "RAF 123 B").one()
        assert plate.status == PlateStatus.AVAILABLE
        assert plate.ownerId == a.id
        assert db.query(Ownership).filter(Ownership.vehicleId == vehicle.id).count() == 1

    def test_second_delete_is_not_found(self, db):
        a = make_owner(db)
        vehicle = register_vehicle(db, a)
        vehicle_registration_service.soft_delete_vehicle(db, vehicle.id)

        with pytest.raises(NotFoundException):
            vehicle_registration_service.soft_delete_vehicle(db, vehicle.id)
