from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.schemas import PaginatedResponse, PaginationQuery
from app.database import get_db
from app.dependencies import get_pagination, require_hr
from app.schemas.hr import EmployeeProfileCreate, EmployeeProfileResponse, EmployeeProfileUpdate
from app.services.employee_profile_service import EmployeeProfileService

router = APIRouter(
    prefix="/hr/employee-profiles",
    tags=["employee-profiles"],
    dependencies=[Depends(require_hr())],
)


@router.post("", response_model=EmployeeProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(data: EmployeeProfileCreate, db: Session = Depends(get_db)):
    return EmployeeProfileService(db).create(data)


@router.get("", response_model=PaginatedResponse[EmployeeProfileResponse])
def list_profiles(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return EmployeeProfileService(db).find_all(params)


@router.get("/active", response_model=List[EmployeeProfileResponse])
def list_active_profiles(db: Session = Depends(get_db)):
    return EmployeeProfileService(db).find_active()


@router.get("/by-user/{user_id}", response_model=EmployeeProfileResponse)
def get_profile_by_user(user_id: str, db: Session = Depends(get_db)):
    return EmployeeProfileService(db).find_by_user(user_id)


@router.get("/{profile_id}", response_model=EmployeeProfileResponse)
def get_profile(profile_id: str, db: Session = Depends(get_db)):
    return EmployeeProfileService(db).find_one(profile_id)


@router.put("/{profile_id}", response_model=EmployeeProfileResponse)
def update_profile(profile_id: str, data: EmployeeProfileUpdate, db: Session = Depends(get_db)):
    return EmployeeProfileService(db).update(profile_id, data)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(profile_id: str, db: Session = Depends(get_db)):
    EmployeeProfileService(db).remove(profile_id)
