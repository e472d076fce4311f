"""
Position Model with Hierarchy Support.
Positions form the organization chart; users hold positions.
"""
import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Position(Base):
    __tablename__ = "positions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    level = Column(Integer, nullable=False, default=1)
    department = Column(String, nullable=True, index=True)

    parent_id = Column(String(36), ForeignKey("positions.id"), nullable=True)

    order = Column(Integer, nullable=False, default=0)
    color_scheme = Column(Integer, nullable=True)

    # Chart layout; null means automatic placement
    x = Column(Float, nullable=True)
    y = Column(Float, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    parent = relationship("Position", remote_side=[id], back_populates="children")
    children = relationship("Position", back_populates="parent")
    holders = relationship("User", back_populates="position")
    assignments = relationship("Assignment", back_populates="position")

    def __repr__(self):
        return f"<Position {self.title} (L{self.level})>"
