import enum
import uuid

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, JSON, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class CycleStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"

class EvaluationCycle(Base):
    __tablename__ = "evaluation_cycles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    template_id = Column(String(36), ForeignKey("evaluation_templates.id"), nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    submission_deadline = Column(Date, nullable=True)

    # Ordered list of EvaluationType values; generation follows this order
    evaluation_types = Column(JSON, nullable=False)

    # Plain string column so the publish claim can compare it in a conditional UPDATE
    status = Column(String(20), nullable=False, default=CycleStatus.DRAFT.value)

    published_at = Column(DateTime(timezone=True), nullable=True)
    published_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    template = relationship("EvaluationTemplate", back_populates="cycles")
    published_by = relationship("User")
    evaluations = relationship("PerformanceEvaluation", back_populates="cycle", passive_deletes=True)

    @property
    def period(self) -> str:
        """Period tag shared by every evaluation generated from this cycle."""
        return f"{self.start_date.isoformat()}_{self.end_date.isoformat()}"
