"""
Evaluation cycle store: CRUD and lifecycle transitions other than publishing
(see evaluation_expander for publish/republish).
"""
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import BadRequestError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.evaluation_cycle import CycleStatus, EvaluationCycle
from app.models.evaluation_template import EvaluationTemplate
from app.schemas.performance import CycleCreate, CycleUpdate
from app.services.base import BaseService
from app.services.performance_service import PerformanceService


class CycleService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.evaluations = PerformanceService(db)

    def create(self, data: CycleCreate) -> EvaluationCycle:
        self._require_template(data.template_id)

        cycle = EvaluationCycle(
            title=data.title,
            description=data.description,
            template_id=data.template_id,
            start_date=data.start_date,
            end_date=data.end_date,
            submission_deadline=data.submission_deadline,
            evaluation_types=[t.value for t in data.evaluation_types],
            status=CycleStatus.DRAFT.value,
        )
        self.db.add(cycle)
        self.commit()
        self._logger.info(f"Evaluation cycle created: {cycle.id}")
        return self.find_by_id(cycle.id)

    def find_all(self, params: PaginationQuery) -> dict:
        query = self.db.query(EvaluationCycle).options(
            joinedload(EvaluationCycle.template),
            joinedload(EvaluationCycle.published_by),
        )
        return self.paginate(
            query,
            EvaluationCycle,
            params,
            search_columns=[EvaluationCycle.title, EvaluationCycle.description, EvaluationCycle.status],
        )

    def find_by_id(self, cycle_id: str) -> EvaluationCycle:
        cycle = (
            self.db.query(EvaluationCycle)
            .options(
                joinedload(EvaluationCycle.template),
                joinedload(EvaluationCycle.published_by),
            )
            .filter(EvaluationCycle.id == cycle_id)
            .first()
        )
        if not cycle:
            raise NotFoundError(f"Evaluation cycle with ID {cycle_id} not found")
        return cycle

    def update(self, cycle_id: str, data: CycleUpdate) -> EvaluationCycle:
        cycle = self.find_by_id(cycle_id)
        if cycle.status != CycleStatus.DRAFT:
            raise BadRequestError(
                "Only draft cycles can be edited. Use republish to regenerate a published cycle.",
                error_code="CYCLE_NOT_EDITABLE",
            )

        changes = data.model_dump(exclude_unset=True)
        if changes.get("template_id"):
            self._require_template(changes["template_id"])
        if "evaluation_types" in changes:
            changes["evaluation_types"] = [t.value for t in data.evaluation_types]

        start = changes.get("start_date", cycle.start_date)
        end = changes.get("end_date", cycle.end_date)
        if start > end:
            raise BadRequestError("startDate must be on or before endDate")

        for field, value in changes.items():
            setattr(cycle, field, value)

        self.commit()
        return self.find_by_id(cycle_id)

    def close(self, cycle_id: str) -> EvaluationCycle:
        cycle = self.find_by_id(cycle_id)
        if cycle.status != CycleStatus.PUBLISHED:
            raise BadRequestError(
                f"Only published cycles can be closed (current status: {cycle.status})",
                error_code="CYCLE_NOT_PUBLISHED",
            )
        cycle.status = CycleStatus.CLOSED.value
        self.commit()
        self._logger.info(f"Evaluation cycle {cycle_id} closed")
        return self.find_by_id(cycle_id)

    def remove(self, cycle_id: str) -> int:
        """Delete the cycle together with its generated evaluations."""
        cycle = self.find_by_id(cycle_id)
        removed = self.evaluations.delete_evaluations_for_cycle(cycle.id)
        self.db.delete(cycle)
        self.commit()
        self._logger.info(f"Evaluation cycle {cycle_id} deleted with {removed} evaluations")
        return removed

    def find_cycle_evaluations(self, cycle_id: str, params: PaginationQuery) -> dict:
        self.find_by_id(cycle_id)
        return self.evaluations.find_all_evaluations(params, cycle_id=cycle_id)

    def _require_template(self, template_id: str) -> EvaluationTemplate:
        template = self.db.query(EvaluationTemplate).filter(EvaluationTemplate.id == template_id).first()
        if not template:
            raise NotFoundError(f"Evaluation template with ID {template_id} not found")
        return template
