import enum
from sqlalchemy import Column, Integer, String, Enum, ForeignKey, Index, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class PlateStatus(str, enum.Enum):
    AVAILABLE       = "AVAILABLE"        # Held by its owner, not mounted on a vehicle
    IN_USE          = "IN_USE"           # The single active plate of its vehicle
    TRANSFERRED_OUT = "TRANSFERRED_OUT"  # Left its vehicle when the vehicle changed hands
    DAMAGED         = "DAMAGED"
    RETIRED         = "RETIRED"          # Terminal


class PlateNumber(Base):
    __tablename__ = "plate_numbers"

    id          = Column(Integer, primary_key=True, index=True)
    plateNumber = Column(String(20), unique=True, nullable=False, index=True)
    ownerId     = Column(Integer, ForeignKey("owners.id"), nullable=False, index=True)
    vehicleId   = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    status      = Column(Enum(PlateStatus), default=PlateStatus.IN_USE, nullable=False, index=True)
    issuedDate  = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                         onupdate=func.now(), nullable=False)

    # At most one IN_USE plate per vehicle
    __table_args__ = (
        Index(
            "uq_plate_numbers_vehicle_in_use",
            vehicleId,
            unique=True,
            postgresql_where=(status == PlateStatus.IN_USE),
            sqlite_where=(status == PlateStatus.IN_USE),
        ),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    owner   = relationship("Owner", back_populates="plates")
    vehicle = relationship("Vehicle", back_populates="plates")

    def __repr__(self):
        return f"<PlateNumber id={self.id} plate={self.plateNumber} status={self.status}>"
