import uuid

from sqlalchemy import Column, String, Date, DateTime, Boolean, ForeignKey, Text, JSON, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class EmployeeProfile(Base):
    __tablename__ = "employee_profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    national_id = Column(String, unique=True, nullable=False, index=True)
    birth_date = Column(Date, nullable=False)
    hire_date = Column(Date, nullable=False)
    gender = Column(String, nullable=True)
    marital_status = Column(String, nullable=True)

    department = Column(String, nullable=True, index=True)
    job_title = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # Structured sub-records kept as JSON documents
    address = Column(JSON, nullable=True)             # {street, city, state, postalCode, country}
    emergency_contact = Column(JSON, nullable=True)   # {name, relationship, phone}
    education = Column(JSON, nullable=True)           # [{degree, institution, field, graduationYear, gpa}]
    previous_jobs = Column(JSON, nullable=True)       # [{company, title, startDate, endDate, description, salary}]

    base_salary = Column(Numeric(15, 2), nullable=True)
    bank_name = Column(String, nullable=True)
    bank_account = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="employee_profile")
