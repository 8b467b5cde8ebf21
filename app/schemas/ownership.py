from pydantic import BaseModel, Field, field_validator
from decimal import Decimal

from app.schemas.plate_number import normalize_plate


class TransferRequest(BaseModel):
    vehicleId:      int
    currentOwnerId: int     # confirmation only; checked against the ledger
    newOwnerId:     int
    transferAmount: Decimal = Field(max_digits=15, decimal_places=2)
    newPlateNumber: str

    @field_validator("transferAmount")
    @classmethod
    def check_amount(cls, v):
        if v <= 0: raise ValueError("Transfer amount must be greater than 0")
        return v

    @field_validator("newPlateNumber")
    @classmethod
    def check_plate(cls, v): return normalize_plate(v)
