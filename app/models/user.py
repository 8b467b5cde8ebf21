import enum
from sqlalchemy import Column, Integer, String, Boolean, Enum, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class RoleName(str, enum.Enum):
    ADMIN = "ADMIN"
    OWNER = "OWNER"


class UserStatus(str, enum.Enum):
    PENDING  = "PENDING"
    ACTIVE   = "ACTIVE"
    DISABLED = "DISABLED"


class User(Base):
    """Identity record shared by administrators and vehicle owners."""
    __tablename__ = "users"

    id          = Column(Integer, primary_key=True, index=True)
    firstName   = Column(String(100), nullable=False)
    lastName    = Column(String(100), nullable=False)
    email       = Column(String(255), unique=True, nullable=False, index=True)
    phoneNumber = Column(String(20), unique=True, nullable=False)
    nationalId  = Column(String(16), unique=True, nullable=False, index=True)
    role        = Column(Enum(RoleName), default=RoleName.OWNER, nullable=False)
    status      = Column(Enum(UserStatus), default=UserStatus.PENDING, nullable=False)
    enabled     = Column(Boolean, default=False, nullable=False)
    isActive    = Column(Boolean, default=True, nullable=False)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                         onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    owner_profile = relationship("Owner", back_populates="user", uselist=False)

    @property
    def fullName(self) -> str:
        return f"{self.firstName} {self.lastName}"

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
