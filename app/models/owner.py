from sqlalchemy import Column, Integer, Boolean, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Owner(Base):
    """
    A registered vehicle owner. Holds a reference to its User identity
    rather than extending it; plates and ownership records hang off the owner.
    """
    __tablename__ = "owners"

    id        = Column(Integer, primary_key=True, index=True)
    userId    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                       unique=True, nullable=False)
    isActive  = Column(Boolean, default=True, nullable=False)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user       = relationship("User", back_populates="owner_profile")
    plates     = relationship("PlateNumber", back_populates="owner")
    ownerships = relationship("Ownership", back_populates="owner")

    # ─── Identity accessors ────────────────────────────────────────────────────
    @property
    def firstName(self) -> str:
        return self.user.firstName

    @property
    def lastName(self) -> str:
        return self.user.lastName

    @property
    def fullName(self) -> str:
        return self.user.fullName

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def nationalId(self) -> str:
        return self.user.nationalId

    def __repr__(self):
        return f"<Owner id={self.id} userId={self.userId} isActive={self.isActive}>"
