"""
Assignments: fractional allocation of a contract to a position.

A contract's assignments may never add up to more than 100% workload.
"""
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import BadRequestError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.assignment import Assignment
from app.models.contract import Contract, ContractStatus
from app.models.position import Position
from app.models.user import User
from app.schemas.hr import AssignmentCreate, AssignmentUpdate
from app.services.base import BaseService

MAX_WORKLOAD = 100


class AssignmentService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def current_workload(self, contract_id: str, exclude_assignment_id: Optional[str] = None) -> float:
        query = self.db.query(func.coalesce(func.sum(Assignment.workload_percentage), 0)).filter(
            Assignment.contract_id == contract_id
        )
        if exclude_assignment_id:
            query = query.filter(Assignment.id != exclude_assignment_id)
        return float(query.scalar())

    def check_capacity(self, contract_id: str, requested: float, exclude_assignment_id: Optional[str] = None) -> None:
        current = self.current_workload(contract_id, exclude_assignment_id)
        if current + requested > MAX_WORKLOAD:
            scope = "Current (excluding this)" if exclude_assignment_id else "Current"
            self._logger.info(
                f"Workload rejected for contract {contract_id}: {current}% + {requested}%",
                extra={"contract_id": contract_id, "current": current, "requested": requested},
            )
            raise BadRequestError(
                f"Total workload exceeds 100%. {scope}: {current:g}%, Requested: {requested:g}%",
                error_code="WORKLOAD_EXCEEDED",
                details={"current": current, "requested": requested},
            )

    def create(self, data: AssignmentCreate) -> Assignment:
        contract = self.db.query(Contract).filter(Contract.id == data.contract_id).first()
        if not contract:
            raise NotFoundError("Contract not found")
        if contract.status != ContractStatus.ACTIVE:
            raise BadRequestError("Cannot create assignment for inactive contract")

        position = self.db.query(Position).filter(Position.id == data.position_id).first()
        if not position:
            raise NotFoundError("Position not found")

        self.check_capacity(contract.id, data.workload_percentage)

        assignment = Assignment(**data.model_dump())
        self.db.add(assignment)
        self.commit()
        self._logger.info(f"Assignment created: {assignment.id}")
        return self.find_one(assignment.id)

    def find_all(self, params: PaginationQuery, contract_id: Optional[str] = None) -> dict:
        query = (
            self.db.query(Assignment)
            .join(Contract, Assignment.contract_id == Contract.id)
            .join(User, Contract.user_id == User.id)
            .join(Position, Assignment.position_id == Position.id)
            .options(joinedload(Assignment.contract), joinedload(Assignment.position))
        )
        if contract_id:
            query = query.filter(Assignment.contract_id == contract_id)
        return self.paginate(
            query,
            Assignment,
            params,
            search_columns=[User.first_name, User.last_name, Position.title, Position.department],
        )

    def find_one(self, assignment_id: str) -> Assignment:
        assignment = (
            self.db.query(Assignment)
            .options(joinedload(Assignment.contract), joinedload(Assignment.position))
            .filter(Assignment.id == assignment_id)
            .first()
        )
        if not assignment:
            raise NotFoundError(f"Assignment with ID {assignment_id} not found")
        return assignment

    def update(self, assignment_id: str, data: AssignmentUpdate) -> Assignment:
        assignment = self.find_one(assignment_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("position_id"):
            if not self.db.query(Position).filter(Position.id == changes["position_id"]).first():
                raise NotFoundError("Position not found")

        if changes.get("workload_percentage") is not None:
            self.check_capacity(
                assignment.contract_id,
                changes["workload_percentage"],
                exclude_assignment_id=assignment_id,
            )

        for field, value in changes.items():
            setattr(assignment, field, value)

        self.commit()
        return self.find_one(assignment_id)

    def remove(self, assignment_id: str) -> None:
        assignment = self.find_one(assignment_id)
        self.db.delete(assignment)
        self.commit()
        self._logger.info(f"Assignment {assignment_id} removed.")
