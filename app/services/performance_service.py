"""
Performance Service Layer

Evaluations and goals. Evaluations generated by a cycle publish are also
stored and bulk-deleted through this service.
"""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, aliased, joinedload

from app.core.exceptions import ConflictError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.performance_evaluation import EvaluationStatus, PerformanceEvaluation
from app.models.performance_goal import GoalStatus, PerformanceGoal
from app.models.user import User
from app.schemas.performance import EvaluationCreate, EvaluationUpdate, GoalCreate, GoalUpdate
from app.services.base import BaseService

_REVIEW_STATES = (EvaluationStatus.REVIEWED, EvaluationStatus.APPROVED)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PerformanceService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    # ------------------------------------------------------------------
    # Evaluations
    # ------------------------------------------------------------------

    def create_evaluation(self, data: EvaluationCreate) -> PerformanceEvaluation:
        self._require_user(data.employee_id, "Employee")
        self._require_user(data.evaluator_id, "Evaluator")

        existing = self.db.query(PerformanceEvaluation).filter(
            PerformanceEvaluation.employee_id == data.employee_id,
            PerformanceEvaluation.evaluator_id == data.evaluator_id,
            PerformanceEvaluation.evaluation_type == data.evaluation_type,
            PerformanceEvaluation.period == data.period,
        ).first()
        if existing:
            raise ConflictError("Evaluation already exists for this employee, evaluator, type and period")

        payload = data.model_dump(exclude={"categories", "status"})
        evaluation = PerformanceEvaluation(
            **payload,
            categories=[c.model_dump() for c in data.categories],
            status=data.status or EvaluationStatus.DRAFT,
        )
        self.db.add(evaluation)
        self.commit()
        self._logger.info(f"Evaluation created: {evaluation.id}")
        return self.find_evaluation_by_id(evaluation.id)

    def find_all_evaluations(
        self,
        params: PaginationQuery,
        employee_id: Optional[str] = None,
        evaluator_id: Optional[str] = None,
        cycle_id: Optional[str] = None,
    ) -> dict:
        employee = aliased(User)
        evaluator = aliased(User)
        query = (
            self.db.query(PerformanceEvaluation)
            .outerjoin(employee, PerformanceEvaluation.employee_id == employee.id)
            .outerjoin(evaluator, PerformanceEvaluation.evaluator_id == evaluator.id)
            .options(
                joinedload(PerformanceEvaluation.employee),
                joinedload(PerformanceEvaluation.evaluator),
            )
        )

        if employee_id:
            query = query.filter(PerformanceEvaluation.employee_id == employee_id)
        if evaluator_id:
            query = query.filter(PerformanceEvaluation.evaluator_id == evaluator_id)
        if cycle_id:
            query = query.filter(PerformanceEvaluation.cycle_id == cycle_id)

        return self.paginate(
            query,
            PerformanceEvaluation,
            params,
            search_columns=[
                PerformanceEvaluation.period,
                employee.first_name,
                employee.last_name,
                evaluator.first_name,
                evaluator.last_name,
            ],
        )

    def find_evaluation_by_id(self, evaluation_id: str) -> PerformanceEvaluation:
        evaluation = (
            self.db.query(PerformanceEvaluation)
            .options(
                joinedload(PerformanceEvaluation.employee),
                joinedload(PerformanceEvaluation.evaluator),
            )
            .filter(PerformanceEvaluation.id == evaluation_id)
            .first()
        )
        if not evaluation:
            raise NotFoundError(f"Performance evaluation with ID {evaluation_id} not found")
        return evaluation

    def update_evaluation(self, evaluation_id: str, data: EvaluationUpdate) -> PerformanceEvaluation:
        evaluation = self.find_evaluation_by_id(evaluation_id)
        changes = data.model_dump(exclude_unset=True)
        now = datetime.now(timezone.utc)

        new_status = changes.get("status")
        if new_status == EvaluationStatus.SUBMITTED and evaluation.status != EvaluationStatus.SUBMITTED:
            evaluation.submitted_at = now
        if new_status in _REVIEW_STATES and evaluation.status not in _REVIEW_STATES:
            evaluation.reviewed_at = now

        if "categories" in changes:
            evaluation.categories = [c.model_dump() for c in data.categories or []]
            changes.pop("categories")

        for field, value in changes.items():
            setattr(evaluation, field, value)

        self.commit()
        self._logger.info(f"Evaluation updated: {evaluation_id}")
        return self.find_evaluation_by_id(evaluation_id)

    def delete_evaluation(self, evaluation_id: str) -> None:
        evaluation = self.find_evaluation_by_id(evaluation_id)
        self.db.delete(evaluation)
        self.commit()
        self._logger.info(f"Evaluation {evaluation_id} deleted")

    def delete_evaluations_for_cycle(self, cycle_id: str) -> int:
        """
        Remove every evaluation generated under `cycle_id`, whatever its status.
        Does not commit; the caller owns the transaction.
        """
        return (
            self.db.query(PerformanceEvaluation)
            .filter(PerformanceEvaluation.cycle_id == cycle_id)
            .delete()
        )

    def get_employee_evaluations(self, employee_id: str, period: Optional[str] = None) -> List[PerformanceEvaluation]:
        query = (
            self.db.query(PerformanceEvaluation)
            .options(
                joinedload(PerformanceEvaluation.employee),
                joinedload(PerformanceEvaluation.evaluator),
            )
            .filter(PerformanceEvaluation.employee_id == employee_id)
        )
        if period:
            query = query.filter(PerformanceEvaluation.period == period)
        return query.order_by(PerformanceEvaluation.created_at.desc()).all()

    def get_evaluation_statistics(self, employee_id: str) -> dict:
        evaluations = self.get_employee_evaluations(employee_id)
        if not evaluations:
            return {"average_rating": 0, "total_evaluations": 0, "last_evaluation_date": None}

        ratings = [float(e.overall_rating) for e in evaluations if e.overall_rating]
        average = sum(ratings) / len(ratings) if ratings else 0

        return {
            "average_rating": round(average, 2),
            "total_evaluations": len(evaluations),
            "last_evaluation_date": max(e.created_at for e in evaluations),
        }

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def create_goal(self, data: GoalCreate) -> PerformanceGoal:
        self._require_user(data.employee_id, "Employee")
        if data.setter_id:
            self._require_user(data.setter_id, "Goal setter")
        if data.parent_goal_id:
            self.find_goal_by_id(data.parent_goal_id)

        goal = PerformanceGoal(**data.model_dump())
        self.db.add(goal)
        self.commit()
        self._logger.info(f"Goal created: {goal.id}")
        return self.find_goal_by_id(goal.id)

    def find_all_goals(
        self,
        params: PaginationQuery,
        employee_id: Optional[str] = None,
        status: Optional[GoalStatus] = None,
    ) -> dict:
        query = (
            self.db.query(PerformanceGoal)
            .outerjoin(User, PerformanceGoal.employee_id == User.id)
            .options(joinedload(PerformanceGoal.employee), joinedload(PerformanceGoal.setter))
        )
        if employee_id:
            query = query.filter(PerformanceGoal.employee_id == employee_id)
        if status:
            query = query.filter(PerformanceGoal.status == status)

        return self.paginate(
            query,
            PerformanceGoal,
            params,
            search_columns=[
                PerformanceGoal.title,
                PerformanceGoal.description,
                User.first_name,
                User.last_name,
            ],
        )

    def find_goal_by_id(self, goal_id: str) -> PerformanceGoal:
        goal = (
            self.db.query(PerformanceGoal)
            .options(joinedload(PerformanceGoal.employee), joinedload(PerformanceGoal.setter))
            .filter(PerformanceGoal.id == goal_id)
            .first()
        )
        if not goal:
            raise NotFoundError(f"Performance goal with ID {goal_id} not found")
        return goal

    def update_goal(self, goal_id: str, data: GoalUpdate) -> PerformanceGoal:
        goal = self.find_goal_by_id(goal_id)
        changes = data.model_dump(exclude_unset=True)
        now = datetime.now(timezone.utc)

        if changes.get("progress") == 100 and goal.status == GoalStatus.ACTIVE:
            changes["status"] = GoalStatus.COMPLETED
            changes["completed_at"] = now
        elif goal.status == GoalStatus.ACTIVE and now > _as_utc(goal.deadline):
            changes["status"] = GoalStatus.OVERDUE

        for field, value in changes.items():
            setattr(goal, field, value)

        self.commit()
        self._logger.info(f"Goal updated: {goal_id}")
        return self.find_goal_by_id(goal_id)

    def delete_goal(self, goal_id: str) -> None:
        goal = self.find_goal_by_id(goal_id)
        self.db.delete(goal)
        self.commit()
        self._logger.info(f"Goal {goal_id} deleted")

    # ------------------------------------------------------------------

    def _require_user(self, user_id: str, label: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"{label} not found")
        return user
