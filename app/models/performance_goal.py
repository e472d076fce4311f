import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Numeric, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class GoalCategory(str, enum.Enum):
    INDIVIDUAL = "INDIVIDUAL"
    TEAM = "TEAM"
    DEPARTMENTAL = "DEPARTMENTAL"
    ORGANIZATIONAL = "ORGANIZATIONAL"

class GoalStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"

class GoalPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

class PerformanceGoal(Base):
    __tablename__ = "performance_goals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Usually the manager
    setter_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(GoalCategory), nullable=False, default=GoalCategory.INDIVIDUAL)
    priority = Column(Enum(GoalPriority), nullable=False, default=GoalPriority.MEDIUM)

    measurement_criteria = Column(Text, nullable=True)
    target_value = Column(Numeric(10, 2), nullable=True)
    current_value = Column(Numeric(10, 2), nullable=True)
    unit = Column(String, nullable=True)

    deadline = Column(DateTime(timezone=True), nullable=False)
    progress = Column(Numeric(5, 2), nullable=False, default=0)
    status = Column(Enum(GoalStatus), nullable=False, default=GoalStatus.ACTIVE)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    comments = Column(Text, nullable=True)

    parent_goal_id = Column(String(36), ForeignKey("performance_goals.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("User", foreign_keys=[employee_id])
    setter = relationship("User", foreign_keys=[setter_id])
    parent_goal = relationship("PerformanceGoal", remote_side=[id])
