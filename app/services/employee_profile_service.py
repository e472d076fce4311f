from typing import List

from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.employee_profile import EmployeeProfile
from app.models.user import User
from app.schemas.hr import EmployeeProfileCreate, EmployeeProfileUpdate
from app.services.base import BaseService


class EmployeeProfileService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def create(self, data: EmployeeProfileCreate) -> EmployeeProfile:
        if not self.db.query(User).filter(User.id == data.user_id).first():
            raise NotFoundError("User not found")
        if self.db.query(EmployeeProfile).filter(EmployeeProfile.user_id == data.user_id).first():
            raise ConflictError("Employee profile already exists for this user")
        self._check_national_id(data.national_id)

        # Nested sub-records are stored as plain JSON documents
        profile = EmployeeProfile(**data.model_dump(mode="json"))
        profile.birth_date = data.birth_date
        profile.hire_date = data.hire_date
        self.db.add(profile)
        self.commit()
        self._logger.info(f"Employee profile created for user {data.user_id}")
        return self.find_one(profile.id)

    def find_all(self, params: PaginationQuery) -> dict:
        query = (
            self.db.query(EmployeeProfile)
            .join(User, EmployeeProfile.user_id == User.id)
            .options(joinedload(EmployeeProfile.user))
        )
        return self.paginate(
            query,
            EmployeeProfile,
            params,
            search_columns=[
                User.first_name,
                User.last_name,
                User.email,
                EmployeeProfile.national_id,
                EmployeeProfile.department,
                EmployeeProfile.job_title,
            ],
        )

    def find_active(self) -> List[EmployeeProfile]:
        return (
            self.db.query(EmployeeProfile)
            .options(joinedload(EmployeeProfile.user))
            .filter(EmployeeProfile.is_active.is_(True))
            .order_by(EmployeeProfile.created_at.desc())
            .all()
        )

    def find_one(self, profile_id: str) -> EmployeeProfile:
        profile = (
            self.db.query(EmployeeProfile)
            .options(joinedload(EmployeeProfile.user))
            .filter(EmployeeProfile.id == profile_id)
            .first()
        )
        if not profile:
            raise NotFoundError(f"Employee profile with ID {profile_id} not found")
        return profile

    def find_by_user(self, user_id: str) -> EmployeeProfile:
        profile = (
            self.db.query(EmployeeProfile)
            .options(joinedload(EmployeeProfile.user))
            .filter(EmployeeProfile.user_id == user_id)
            .first()
        )
        if not profile:
            raise NotFoundError(f"Employee profile for user {user_id} not found")
        return profile

    def update(self, profile_id: str, data: EmployeeProfileUpdate) -> EmployeeProfile:
        profile = self.find_one(profile_id)
        changes = data.model_dump(mode="json", exclude_unset=True)

        if changes.get("national_id") and changes["national_id"] != profile.national_id:
            self._check_national_id(changes["national_id"])

        for field in ("birth_date", "hire_date"):
            if field in changes:
                changes[field] = getattr(data, field)

        for field, value in changes.items():
            setattr(profile, field, value)

        self.commit()
        return self.find_one(profile_id)

    def remove(self, profile_id: str) -> None:
        profile = self.find_one(profile_id)
        self.db.delete(profile)
        self.commit()
        self._logger.info(f"Employee profile {profile_id} deleted")

    def _check_national_id(self, national_id: str) -> None:
        if self.db.query(EmployeeProfile).filter(EmployeeProfile.national_id == national_id).first():
            raise ConflictError(f"National ID {national_id} is already registered")
