from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from app.core.schemas import CamelModel, PartialUpdate
from app.models.contract import ContractStatus, ContractType
from app.schemas.performance import UserSummary


# --- Positions ---

class PositionCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    level: int = Field(1, ge=1)
    department: Optional[str] = None
    parent_id: Optional[str] = None
    order: int = 0
    color_scheme: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None
    is_active: bool = True


class PositionUpdate(PartialUpdate):
    required_fields = ("title", "level", "order", "is_active")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    level: Optional[int] = Field(None, ge=1)
    department: Optional[str] = None
    order: Optional[int] = None
    color_scheme: Optional[int] = None
    is_active: Optional[bool] = None


class PositionParentUpdate(CamelModel):
    parent_id: Optional[str] = None


class PositionCoordinatesUpdate(CamelModel):
    x: float
    y: float


class PositionResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    level: int
    department: Optional[str] = None
    parent_id: Optional[str] = None
    order: int
    color_scheme: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PositionTreeNode(PositionResponse):
    children: List["PositionTreeNode"] = Field(default_factory=list)


PositionTreeNode.model_rebuild()


# --- Employee profiles ---

class Address(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class EmergencyContact(CamelModel):
    name: str
    relationship: Optional[str] = None
    phone: str


class Education(CamelModel):
    degree: str
    institution: str
    field: Optional[str] = None
    graduation_year: Optional[int] = None
    gpa: Optional[float] = None


class PreviousJob(CamelModel):
    company: str
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    salary: Optional[float] = None


class EmployeeProfileCreate(CamelModel):
    user_id: str
    national_id: str = Field(..., min_length=1)
    birth_date: date
    hire_date: date
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    emergency_contact: Optional[EmergencyContact] = None
    education: Optional[List[Education]] = None
    previous_jobs: Optional[List[PreviousJob]] = None
    base_salary: Optional[float] = Field(None, ge=0)
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


class EmployeeProfileUpdate(PartialUpdate):
    required_fields = ("national_id", "birth_date", "hire_date", "is_active")

    national_id: Optional[str] = Field(None, min_length=1)
    birth_date: Optional[date] = None
    hire_date: Optional[date] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    emergency_contact: Optional[EmergencyContact] = None
    education: Optional[List[Education]] = None
    previous_jobs: Optional[List[PreviousJob]] = None
    base_salary: Optional[float] = Field(None, ge=0)
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class EmployeeProfileResponse(CamelModel):
    id: str
    user_id: str
    user: Optional[UserSummary] = None
    national_id: str
    birth_date: date
    hire_date: date
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    education: Optional[List[Dict[str, Any]]] = None
    previous_jobs: Optional[List[Dict[str, Any]]] = None
    base_salary: Optional[float] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Contracts ---

class ContractCreate(CamelModel):
    user_id: str
    contract_type: ContractType = ContractType.FULL_TIME
    start_date: date
    end_date: Optional[date] = None
    file_url: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must be on or after startDate")
        return self


class ContractUpdate(PartialUpdate):
    required_fields = ("contract_type", "start_date")

    contract_type: Optional[ContractType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    file_url: Optional[str] = None


class ContractStatusUpdate(CamelModel):
    status: ContractStatus


class PositionSummary(CamelModel):
    id: str
    title: str
    department: Optional[str] = None


class AssignmentSummary(CamelModel):
    id: str
    position_id: str
    workload_percentage: float
    is_primary: bool


class ContractResponse(CamelModel):
    id: str
    user_id: str
    user: Optional[UserSummary] = None
    contract_type: ContractType
    start_date: date
    end_date: Optional[date] = None
    status: ContractStatus
    file_url: Optional[str] = None
    assignments: List[AssignmentSummary] = Field(default_factory=list)
    total_workload: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Assignments ---

class AssignmentCreate(CamelModel):
    contract_id: str
    position_id: str
    workload_percentage: float = Field(..., ge=1, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_primary: bool = False


class AssignmentUpdate(PartialUpdate):
    required_fields = ("position_id", "workload_percentage", "is_primary")

    position_id: Optional[str] = None
    workload_percentage: Optional[float] = Field(None, ge=1, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_primary: Optional[bool] = None


class AssignmentResponse(CamelModel):
    id: str
    contract_id: str
    position_id: str
    position: Optional[PositionSummary] = None
    workload_percentage: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_primary: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Seeder ---

class SeedResult(CamelModel):
    positions: int = 0
    users: int = 0
    contracts: int = 0
    assignments: int = 0
    goals: int = 0
    templates: int = 0
    errors: List[str] = Field(default_factory=list)
