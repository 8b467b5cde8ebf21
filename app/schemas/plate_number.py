from pydantic import BaseModel, field_validator
import re

from app.models.plate_number import PlateStatus


PLATE_PATTERN = re.compile(r"[A-Z0-9][A-Z0-9 \-]{1,18}[A-Z0-9]")


def normalize_plate(v: str) -> str:
    """Upper-case, collapse inner whitespace and check the printable plate format."""
    v = " ".join(v.split()).upper()
    if not PLATE_PATTERN.fullmatch(v):
        raise ValueError("Plate number must be 3-20 letters, digits, spaces or dashes")
    return v


# ─── Requests ─────────────────────────────────────────────────────────────────
class IssuePlateRequest(BaseModel):
    vehicleId:   int
    ownerId:     int
    plateNumber: str

    @field_validator("plateNumber")
    @classmethod
    def check_plate(cls, v): return normalize_plate(v)


class PlateStatusRequest(BaseModel):
    status: PlateStatus
