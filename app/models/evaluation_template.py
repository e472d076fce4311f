import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, JSON, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class EvaluationTemplate(Base):
    """
    Reusable question structure: ordered weighted categories, each holding
    ordered criteria. Stored as a JSON document; evaluations receive a copy.
    """
    __tablename__ = "evaluation_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    categories = Column(JSON, nullable=False, default=list)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    created_by = relationship("User")
    cycles = relationship("EvaluationCycle", back_populates="template")
