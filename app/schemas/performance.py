from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from app.core.schemas import CamelModel, PartialUpdate
from app.models.evaluation_cycle import CycleStatus
from app.models.performance_evaluation import EvaluationStatus, EvaluationType
from app.models.performance_goal import GoalCategory, GoalPriority, GoalStatus


class UserSummary(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str


# --- Template structure ---

class EvaluationCriterionSchema(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    rating: Optional[float] = Field(None, ge=1, le=5)
    comments: Optional[str] = None


class EvaluationCategorySchema(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    weight: float = Field(1.0, ge=0, le=100)
    criteria: List[EvaluationCriterionSchema] = Field(default_factory=list)


class TemplateCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    categories: List[EvaluationCategorySchema] = Field(default_factory=list)
    is_active: Optional[bool] = True


class TemplateUpdate(PartialUpdate):
    required_fields = ("title", "categories", "is_active")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    categories: Optional[List[EvaluationCategorySchema]] = None
    is_active: Optional[bool] = None


class TemplateResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    categories: List[EvaluationCategorySchema]
    created_by_id: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateSummary(CamelModel):
    id: str
    title: str


# --- Cycles ---

class CycleCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    template_id: str
    start_date: date
    end_date: date
    submission_deadline: Optional[date] = None
    evaluation_types: List[EvaluationType] = Field(..., min_length=1)

    @field_validator("evaluation_types")
    @classmethod
    def dedupe_types(cls, value: List[EvaluationType]) -> List[EvaluationType]:
        # A set of types, kept in the order given
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date > self.end_date:
            raise ValueError("startDate must be on or before endDate")
        return self


class CycleUpdate(PartialUpdate):
    required_fields = ("title", "template_id", "start_date", "end_date", "evaluation_types")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    template_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    submission_deadline: Optional[date] = None
    evaluation_types: Optional[List[EvaluationType]] = Field(None, min_length=1)

    @field_validator("evaluation_types")
    @classmethod
    def dedupe_types(cls, value: Optional[List[EvaluationType]]) -> Optional[List[EvaluationType]]:
        if value is None:
            return value
        return list(dict.fromkeys(value))


class CycleResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    template_id: str
    template: Optional[TemplateSummary] = None
    start_date: date
    end_date: date
    submission_deadline: Optional[date] = None
    evaluation_types: List[EvaluationType]
    status: CycleStatus
    published_at: Optional[datetime] = None
    published_by_id: Optional[str] = None
    published_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublishCycleRequest(CamelModel):
    target_employee_ids: Optional[List[str]] = None


class PublishResultResponse(CamelModel):
    cycle: CycleResponse
    evaluations_created: int


# --- Evaluations ---

class EvaluationCreate(CamelModel):
    employee_id: str
    evaluator_id: str
    evaluation_type: EvaluationType = EvaluationType.SELF
    period: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    categories: List[EvaluationCategorySchema] = Field(default_factory=list)
    overall_rating: Optional[float] = Field(None, ge=1, le=5)
    overall_comments: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    improvement_goals: Optional[str] = None
    status: Optional[EvaluationStatus] = None


class EvaluationUpdate(PartialUpdate):
    required_fields = ("period", "start_date", "end_date", "categories", "status")

    period: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    categories: Optional[List[EvaluationCategorySchema]] = None
    overall_rating: Optional[float] = Field(None, ge=1, le=5)
    overall_comments: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    improvement_goals: Optional[str] = None
    status: Optional[EvaluationStatus] = None
    manager_comments: Optional[str] = None


class EvaluationResponse(CamelModel):
    id: str
    employee_id: str
    employee: Optional[UserSummary] = None
    evaluator_id: str
    evaluator: Optional[UserSummary] = None
    evaluation_type: EvaluationType
    cycle_id: Optional[str] = None
    period: str
    start_date: date
    end_date: date
    categories: List[EvaluationCategorySchema]
    overall_rating: Optional[float] = None
    overall_comments: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    improvement_goals: Optional[str] = None
    status: EvaluationStatus
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    manager_comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EvaluationStatistics(CamelModel):
    average_rating: float
    total_evaluations: int
    last_evaluation_date: Optional[datetime] = None


# --- Goals ---

class GoalCreate(CamelModel):
    employee_id: str
    setter_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str
    category: GoalCategory = GoalCategory.INDIVIDUAL
    priority: GoalPriority = GoalPriority.MEDIUM
    measurement_criteria: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    unit: Optional[str] = None
    deadline: datetime
    progress: float = Field(0, ge=0, le=100)
    status: GoalStatus = GoalStatus.ACTIVE
    comments: Optional[str] = None
    parent_goal_id: Optional[str] = None


class GoalUpdate(PartialUpdate):
    required_fields = (
        "title", "description", "category", "priority", "deadline", "progress", "status",
    )

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[GoalCategory] = None
    priority: Optional[GoalPriority] = None
    measurement_criteria: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    unit: Optional[str] = None
    deadline: Optional[datetime] = None
    progress: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[GoalStatus] = None
    comments: Optional[str] = None


class GoalResponse(CamelModel):
    id: str
    employee_id: str
    employee: Optional[UserSummary] = None
    setter_id: Optional[str] = None
    setter: Optional[UserSummary] = None
    title: str
    description: str
    category: GoalCategory
    priority: GoalPriority
    measurement_criteria: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    unit: Optional[str] = None
    deadline: datetime
    progress: float
    status: GoalStatus
    completed_at: Optional[datetime] = None
    comments: Optional[str] = None
    parent_goal_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
