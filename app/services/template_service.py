"""
Evaluation template store.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_template import EvaluationTemplate
from app.schemas.performance import TemplateCreate, TemplateUpdate
from app.services.base import BaseService


def clone_categories(categories: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Structural copy of a category/criterion list.

    Every dict and list is rebuilt, so the result shares no mutable state with
    the source. Scalar values (weights, ratings) keep their exact type.
    """
    return [
        {
            "name": category.get("name"),
            "description": category.get("description"),
            "weight": category.get("weight", 1.0),
            "criteria": [
                {
                    "title": criterion.get("title"),
                    "description": criterion.get("description"),
                    "rating": criterion.get("rating"),
                    "comments": criterion.get("comments"),
                }
                for criterion in category.get("criteria") or []
            ],
        }
        for category in categories or []
    ]


class TemplateService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def create(self, data: TemplateCreate, created_by_id: Optional[str] = None) -> EvaluationTemplate:
        template = EvaluationTemplate(
            title=data.title,
            description=data.description,
            categories=[c.model_dump() for c in data.categories],
            is_active=data.is_active if data.is_active is not None else True,
            created_by_id=created_by_id,
        )
        self.db.add(template)
        self.commit()
        self.db.refresh(template)
        self._logger.info(f"Evaluation template created: {template.id}")
        return template

    def find_all(self, params: PaginationQuery) -> dict:
        query = self.db.query(EvaluationTemplate)
        return self.paginate(
            query,
            EvaluationTemplate,
            params,
            search_columns=[EvaluationTemplate.title, EvaluationTemplate.description],
        )

    def find_by_id(self, template_id: str) -> EvaluationTemplate:
        template = self.db.query(EvaluationTemplate).filter(EvaluationTemplate.id == template_id).first()
        if not template:
            raise NotFoundError(f"Evaluation template with ID {template_id} not found")
        return template

    def update(self, template_id: str, data: TemplateUpdate) -> EvaluationTemplate:
        template = self.find_by_id(template_id)
        changes = data.model_dump(exclude_unset=True)

        if "categories" in changes:
            # Assign a new list so the JSON column is flagged dirty
            template.categories = [c.model_dump() for c in data.categories or []]
            changes.pop("categories")

        for field, value in changes.items():
            setattr(template, field, value)

        self.commit()
        self.db.refresh(template)
        return template

    def remove(self, template_id: str) -> None:
        template = self.find_by_id(template_id)
        in_use = self.db.query(EvaluationCycle).filter(EvaluationCycle.template_id == template_id).count()
        if in_use:
            raise ConflictError(
                f"Template is referenced by {in_use} evaluation cycle(s) and cannot be deleted",
                details={"cycles": in_use},
            )
        self.db.delete(template)
        self.commit()
        self._logger.info(f"Evaluation template {template_id} deleted")
