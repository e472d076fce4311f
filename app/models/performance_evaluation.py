import enum
import uuid

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Enum, JSON, Numeric, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class EvaluationType(str, enum.Enum):
    SELF = "SELF"
    MANAGER = "MANAGER"
    PEER = "PEER"
    SUBORDINATE = "SUBORDINATE"
    CLIENT = "CLIENT"  # Manually created only; never generated by publish


class EvaluationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PerformanceEvaluation(Base):
    __tablename__ = "performance_evaluations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # The person being evaluated
    employee_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # The person evaluating
    evaluator_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    evaluation_type = Column(Enum(EvaluationType), nullable=False, default=EvaluationType.SELF)

    # Null for evaluations created directly rather than by a cycle publish
    cycle_id = Column(String(36), ForeignKey("evaluation_cycles.id", ondelete="CASCADE"), nullable=True, index=True)

    period = Column(String, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Value copy of the template categories: [{name, description, weight, criteria: [{title, description, rating, comments}]}]
    categories = Column(JSON, nullable=False, default=list)

    overall_rating = Column(Numeric(4, 2), nullable=True)
    overall_comments = Column(Text, nullable=True)
    strengths = Column(Text, nullable=True)
    weaknesses = Column(Text, nullable=True)
    improvement_goals = Column(Text, nullable=True)

    status = Column(Enum(EvaluationStatus), nullable=False, default=EvaluationStatus.DRAFT)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    manager_comments = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("User", foreign_keys=[employee_id])
    evaluator = relationship("User", foreign_keys=[evaluator_id])
    cycle = relationship("EvaluationCycle", back_populates="evaluations")
