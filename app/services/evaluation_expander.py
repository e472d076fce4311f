"""
Evaluation cycle publishing.

Publishing expands a cycle ("evaluate every target employee with these
relationship types") into concrete evaluation records, one per
(employee, evaluator, type), each carrying its own copy of the template
categories.

Order of operations inside one transaction:
1. preconditions (cycle exists and is DRAFT, template exists)
2. claim the cycle with a conditional UPDATE ... WHERE status = 'DRAFT';
   a concurrent caller that lost the race sees 0 rows and fails here
   with a 409 CYCLE_PUBLISH_CONFLICT
3. generate and flush evaluations one at a time
4. commit

Any failure after the claim rolls the whole transaction back, so the cycle
returns to DRAFT with no partial evaluations.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.evaluation_cycle import CycleStatus, EvaluationCycle
from app.models.evaluation_template import EvaluationTemplate
from app.models.performance_evaluation import EvaluationStatus, EvaluationType, PerformanceEvaluation
from app.models.user import User
from app.services.base import BaseService
from app.services.organization import OrganizationGraph
from app.services.performance_service import PerformanceService
from app.services.template_service import clone_categories


class EvaluationExpander(BaseService):
    def __init__(self, db: Session, graph: Optional[OrganizationGraph] = None):
        super().__init__(db)
        self.graph = graph or OrganizationGraph(db)
        self.evaluations = PerformanceService(db)

    def publish(
        self,
        cycle_id: str,
        target_employee_ids: Optional[List[str]] = None,
        published_by: Optional[str] = None,
    ) -> dict:
        """
        Generate the cycle's evaluations and mark it PUBLISHED.
        Valid only from DRAFT. Returns {"cycle", "evaluations_created"}.
        """
        cycle = self._load_cycle(cycle_id)

        if cycle.status == CycleStatus.PUBLISHED:
            raise BadRequestError(
                "Cycle is already published. Use republish instead.",
                error_code="CYCLE_ALREADY_PUBLISHED",
            )
        if cycle.status == CycleStatus.CLOSED:
            raise BadRequestError(
                "Cycle is closed and cannot be published.",
                error_code="CYCLE_CLOSED",
            )

        template = self._load_template(cycle.template_id)

        try:
            self._claim(cycle.id, published_by)
            created = self._generate(cycle, template, target_employee_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self._result(cycle, created)

    def republish(
        self,
        cycle_id: str,
        target_employee_ids: Optional[List[str]] = None,
        published_by: Optional[str] = None,
    ) -> dict:
        """
        Discard every evaluation of the cycle (ratings included) and publish
        again from scratch. Valid from any status.
        """
        cycle = self._load_cycle(cycle_id)
        template = self._load_template(cycle.template_id)

        try:
            # Resetting the row first takes its lock before anything is deleted
            self.db.query(EvaluationCycle).filter(EvaluationCycle.id == cycle.id).update(
                {
                    EvaluationCycle.status: CycleStatus.DRAFT.value,
                    EvaluationCycle.published_at: None,
                    EvaluationCycle.published_by_id: None,
                },
                synchronize_session=False,
            )
            removed = self.evaluations.delete_evaluations_for_cycle(cycle.id)
            self._logger.info(
                f"Republishing cycle {cycle.id}: removed {removed} existing evaluations",
                extra={"cycle_id": cycle.id, "removed": removed},
            )

            self._claim(cycle.id, published_by)
            created = self._generate(cycle, template, target_employee_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self._result(cycle, created)

    # ------------------------------------------------------------------

    def _load_cycle(self, cycle_id: str) -> EvaluationCycle:
        cycle = self.db.query(EvaluationCycle).filter(EvaluationCycle.id == cycle_id).first()
        if not cycle:
            raise NotFoundError(f"Evaluation cycle with ID {cycle_id} not found")
        return cycle

    def _load_template(self, template_id: str) -> EvaluationTemplate:
        template = self.db.query(EvaluationTemplate).filter(EvaluationTemplate.id == template_id).first()
        if not template:
            raise NotFoundError(f"Evaluation template with ID {template_id} not found")
        return template

    def _claim(self, cycle_id: str, published_by: Optional[str]) -> None:
        """Atomic DRAFT -> PUBLISHED transition; exactly one caller wins."""
        claimed = (
            self.db.query(EvaluationCycle)
            .filter(
                EvaluationCycle.id == cycle_id,
                EvaluationCycle.status == CycleStatus.DRAFT.value,
            )
            .update(
                {
                    EvaluationCycle.status: CycleStatus.PUBLISHED.value,
                    EvaluationCycle.published_at: datetime.now(timezone.utc),
                    EvaluationCycle.published_by_id: published_by,
                },
                synchronize_session=False,
            )
        )
        if claimed != 1:
            raise ConflictError(
                "Cycle was published by a concurrent request. Use republish instead.",
                error_code="CYCLE_PUBLISH_CONFLICT",
            )

    def _resolve_targets(self, target_employee_ids: Optional[List[str]]) -> List[User]:
        if target_employee_ids:
            return (
                self.db.query(User)
                .filter(User.id.in_(target_employee_ids), User.is_active.is_(True))
                .order_by(User.created_at.asc(), User.id.asc())
                .all()
            )
        return self.graph.employees_under_hierarchy()

    def _resolve_evaluators(self, employee: User, evaluation_type: EvaluationType) -> Iterable[str]:
        if evaluation_type == EvaluationType.SELF:
            return [employee.id]
        if evaluation_type == EvaluationType.MANAGER:
            return [employee.manager_id] if employee.manager_id else []
        if evaluation_type == EvaluationType.SUBORDINATE:
            return [s.id for s in self.graph.subordinates_of(employee.id)]
        if evaluation_type == EvaluationType.PEER:
            return [p.id for p in self.graph.peers_of(employee.id)]
        # CLIENT evaluations are created by hand
        return []

    def _generate(
        self,
        cycle: EvaluationCycle,
        template: EvaluationTemplate,
        target_employee_ids: Optional[List[str]],
    ) -> int:
        employees = self._resolve_targets(target_employee_ids)
        evaluation_types = [EvaluationType(t) for t in cycle.evaluation_types]
        period = cycle.period
        created = 0

        for employee in employees:
            for evaluation_type in evaluation_types:
                for evaluator_id in self._resolve_evaluators(employee, evaluation_type):
                    self.db.add(PerformanceEvaluation(
                        employee_id=employee.id,
                        evaluator_id=evaluator_id,
                        evaluation_type=evaluation_type,
                        cycle_id=cycle.id,
                        period=period,
                        start_date=cycle.start_date,
                        end_date=cycle.end_date,
                        categories=clone_categories(template.categories),
                        status=EvaluationStatus.DRAFT,
                    ))
                    self.db.flush()
                    created += 1

        return created

    def _result(self, cycle: EvaluationCycle, created: int) -> dict:
        self.db.refresh(cycle)
        self._logger.info(
            f"Cycle {cycle.id} published: {created} evaluations created",
            extra={"cycle_id": cycle.id, "evaluations_created": created},
        )
        return {"cycle": cycle, "evaluations_created": created}
