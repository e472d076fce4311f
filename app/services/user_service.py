from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.position import Position
from app.models.user import User
from app.schemas.auth import UserCreate, UserUpdate
from app.services import auth as auth_service
from app.services.base import BaseService


class UserService(BaseService):
    """Employee directory CRUD."""

    def __init__(self, db: Session):
        super().__init__(db)

    def create(self, data: UserCreate) -> User:
        self._check_unique(email=data.email, employee_code=data.employee_code)
        if data.manager_id:
            self.find_by_id(data.manager_id)
        if data.position_id:
            self._require_position(data.position_id)

        payload = data.model_dump(exclude={"password"})
        user = User(**payload, hashed_password=auth_service.get_password_hash(data.password))
        self.db.add(user)
        self.commit()
        self._logger.info(f"User created: {user.email}", extra={"user_id": user.id})
        return user

    def find_all(self, params: PaginationQuery) -> dict:
        return self.paginate(
            self.db.query(User),
            User,
            params,
            search_columns=[User.first_name, User.last_name, User.email, User.employee_code],
        )

    def find_by_id(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def update(self, user_id: str, data: UserUpdate) -> User:
        user = self.find_by_id(user_id)
        changes = data.model_dump(exclude_unset=True)

        self._check_unique(
            email=changes.get("email"),
            employee_code=changes.get("employee_code"),
            exclude_id=user_id,
        )
        if changes.get("manager_id"):
            if changes["manager_id"] == user_id:
                raise BadRequestError("A user cannot be their own manager")
            self.find_by_id(changes["manager_id"])
        if changes.get("position_id"):
            self._require_position(changes["position_id"])

        password = changes.pop("password", None)
        if password:
            user.hashed_password = auth_service.get_password_hash(password)

        for field, value in changes.items():
            setattr(user, field, value)

        self.commit()
        return user

    def remove(self, user_id: str) -> None:
        user = self.find_by_id(user_id)
        self.db.delete(user)
        self.commit()
        self._logger.info(f"User {user_id} deleted")

    def _check_unique(self, email=None, employee_code=None, exclude_id=None):
        if email:
            query = self.db.query(User).filter(User.email == email)
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ConflictError(f"Email {email} is already registered")
        if employee_code:
            query = self.db.query(User).filter(User.employee_code == employee_code)
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ConflictError(f"Employee code {employee_code} is already in use")

    def _require_position(self, position_id: str) -> Position:
        position = self.db.query(Position).filter(Position.id == position_id).first()
        if not position:
            raise NotFoundError("Position not found")
        return position
