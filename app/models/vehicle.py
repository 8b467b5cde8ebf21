from sqlalchemy import Column, Integer, String, Boolean, Numeric, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id                  = Column(Integer, primary_key=True, index=True)
    chassisNumber       = Column(String(50), unique=True, nullable=False, index=True)
    modelName           = Column(String(100), nullable=False)
    manufacturerCompany = Column(String(100), nullable=True)
    manufacturedYear    = Column(Integer, nullable=False)
    price               = Column(Numeric(15, 2), nullable=False)
    isActive            = Column(Boolean, default=True, nullable=False)  # False = soft-deleted
    createdAt           = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt           = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                                 onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    # History rows are never deleted with the vehicle; soft delete only flips isActive.
    plates     = relationship("PlateNumber", back_populates="vehicle")
    ownerships = relationship("Ownership", back_populates="vehicle")

    def __repr__(self):
        return f"<Vehicle id={self.id} chassis={self.chassisNumber}>"
