from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional

from app.schemas.plate_number import normalize_plate


def _check_year(v):
    if v is not None and not (1900 <= v <= 2100): raise ValueError("Year must be between 1900 and 2100")
    return v


def _check_price(v):
    if v is not None and v <= 0: raise ValueError("Price must be positive")
    return v


# ─── Requests ─────────────────────────────────────────────────────────────────
class VehicleRegisterRequest(BaseModel):
    chassisNumber:       str
    modelName:           str
    manufacturerCompany: Optional[str] = None
    manufacturedYear:    int
    price:               Decimal = Field(max_digits=15, decimal_places=2)
    ownerId:             int
    plateNumber:         str

    @field_validator("chassisNumber")
    @classmethod
    def check_chassis(cls, v):
        v = v.strip().upper()
        if not (5 <= len(v) <= 50): raise ValueError("Chassis number must be between 5 and 50 characters")
        return v

    @field_validator("modelName")
    @classmethod
    def check_model(cls, v):
        if len(v.strip()) < 2: raise ValueError("Model name must be at least 2 characters")
        return v.strip()

    @field_validator("manufacturedYear")
    @classmethod
    def check_year(cls, v): return _check_year(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v): return _check_price(v)

    @field_validator("plateNumber")
    @classmethod
    def check_plate(cls, v): return normalize_plate(v)


class VehicleUpdateRequest(BaseModel):
    # chassisNumber is deliberately absent: it never changes
    modelName:           Optional[str]     = None
    manufacturerCompany: Optional[str]     = None
    manufacturedYear:    Optional[int]     = None
    price:               Optional[Decimal] = Field(None, max_digits=15, decimal_places=2)

    @field_validator("manufacturedYear")
    @classmethod
    def check_year(cls, v): return _check_year(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v): return _check_price(v)
