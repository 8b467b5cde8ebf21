"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Parent tables are imported before child tables.
"""

from app.models.user import User, RoleName, UserStatus
from app.models.owner import Owner
from app.models.vehicle import Vehicle
from app.models.plate_number import PlateNumber, PlateStatus
from app.models.ownership import Ownership

__all__ = [
    "User",
    "RoleName",
    "UserStatus",
    "Owner",
    "Vehicle",
    "PlateNumber",
    "PlateStatus",
    "Ownership",
]
