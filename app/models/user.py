"""
User Model: the employee directory.
Each user may report to a manager (another user); the manager links form
the organization hierarchy used by the performance module.
"""
import enum
import uuid

from sqlalchemy import Column, String, Enum, DateTime, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class UserRole(str, enum.Enum):
    """
    User roles with hierarchical permissions.

    - SUPER_ADMIN: Platform-wide access
    - HR_ADMIN: Full HR access (directory, contracts, evaluation cycles)
    - HR_MANAGER: HR operations without system administration
    - MANAGER: Team manager (reviews for direct reports)
    - EMPLOYEE: Self-service access
    """
    SUPER_ADMIN = "SUPER_ADMIN"
    HR_ADMIN = "HR_ADMIN"
    HR_MANAGER = "HR_MANAGER"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    employee_code = Column(String, unique=True, index=True, nullable=True)

    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)

    # Weak self reference: no cycle prevention at write time
    manager_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    position_id = Column(String(36), ForeignKey("positions.id", ondelete="SET NULL"), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    manager = relationship("User", remote_side=[id], back_populates="subordinates")
    subordinates = relationship("User", back_populates="manager")
    position = relationship("Position", back_populates="holders")
    employee_profile = relationship("EmployeeProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    contracts = relationship("Contract", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_hr(self) -> bool:
        """Check if user has any HR role."""
        return self.role in [UserRole.HR_ADMIN, UserRole.HR_MANAGER]

    @property
    def is_manager(self) -> bool:
        """Check if user is a manager (any level)."""
        return self.role in [UserRole.HR_ADMIN, UserRole.HR_MANAGER, UserRole.MANAGER]
