from sqlalchemy import Column, Integer, Numeric, ForeignKey, Index, TIMESTAMP
from sqlalchemy.orm import relationship
from app.database import Base


class Ownership(Base):
    """
    One interval during which an owner held a vehicle.
    Rows are appended, never deleted; the only mutation is closing endDate.
    """
    __tablename__ = "ownerships"

    id             = Column(Integer, primary_key=True, index=True)
    vehicleId      = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    ownerId        = Column(Integer, ForeignKey("owners.id"), nullable=False, index=True)
    startDate      = Column(TIMESTAMP(timezone=True), nullable=False)
    endDate        = Column(TIMESTAMP(timezone=True), nullable=True)   # NULL = current owner
    transferAmount = Column(Numeric(15, 2), nullable=True)
    version        = Column(Integer, nullable=False, default=1)

    # At most one open record per vehicle
    __table_args__ = (
        Index(
            "uq_ownerships_vehicle_open",
            vehicleId,
            unique=True,
            postgresql_where=endDate.is_(None),
            sqlite_where=endDate.is_(None),
        ),
    )

    # UPDATE ... WHERE version = :expected; a concurrent close raises StaleDataError
    __mapper_args__ = {"version_id_col": version}

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle = relationship("Vehicle", back_populates="ownerships")
    owner   = relationship("Owner", back_populates="ownerships")

    def __repr__(self):
        return f"<Ownership id={self.id} vehicleId={self.vehicleId} ownerId={self.ownerId} endDate={self.endDate}>"
