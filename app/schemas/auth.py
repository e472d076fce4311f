from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.schemas import CamelModel, PartialUpdate
from app.models.user import UserRole


class UserBase(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    employee_code: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    manager_id: Optional[str] = None
    position_id: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    is_active: bool = True


class UserUpdate(PartialUpdate):
    required_fields = ("email", "first_name", "last_name", "role", "is_active")

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    employee_code: Optional[str] = None
    role: Optional[UserRole] = None
    manager_id: Optional[str] = None
    position_id: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    employee_code: Optional[str] = None
    role: UserRole
    manager_id: Optional[str] = None
    position_id: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
    user: Optional[UserResponse] = None


class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
