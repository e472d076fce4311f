"""
Performance management endpoints: templates, evaluation cycles (including
publish and republish), evaluations and goals.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.schemas import PaginatedResponse, PaginationQuery
from app.database import get_db
from app.dependencies import get_current_user, get_pagination, require_hr
from app.models.performance_goal import GoalStatus
from app.models.user import User
from app.schemas.performance import (
    CycleCreate,
    CycleResponse,
    CycleUpdate,
    EvaluationCreate,
    EvaluationResponse,
    EvaluationStatistics,
    EvaluationUpdate,
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    PublishCycleRequest,
    PublishResultResponse,
    TemplateCreate,
    TemplateResponse,
    TemplateUpdate,
)
from app.services.cycle_service import CycleService
from app.services.evaluation_expander import EvaluationExpander
from app.services.performance_service import PerformanceService
from app.services.template_service import TemplateService

router = APIRouter(
    prefix="/hr/performance",
    tags=["performance"],
    dependencies=[Depends(get_current_user)],
)


# --- Templates ---

@router.post("/templates", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    data: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_hr()),
):
    return TemplateService(db).create(data, created_by_id=current_user.id)


@router.get("/templates", response_model=PaginatedResponse[TemplateResponse])
def list_templates(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return TemplateService(db).find_all(params)


@router.get("/templates/{template_id}", response_model=TemplateResponse)
def get_template(template_id: str, db: Session = Depends(get_db)):
    return TemplateService(db).find_by_id(template_id)


@router.put("/templates/{template_id}", response_model=TemplateResponse, dependencies=[Depends(require_hr())])
def update_template(template_id: str, data: TemplateUpdate, db: Session = Depends(get_db)):
    return TemplateService(db).update(template_id, data)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_hr())])
def delete_template(template_id: str, db: Session = Depends(get_db)):
    TemplateService(db).remove(template_id)


# --- Cycles ---

@router.post("/cycles", response_model=CycleResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_hr())])
def create_cycle(data: CycleCreate, db: Session = Depends(get_db)):
    return CycleService(db).create(data)


@router.get("/cycles", response_model=PaginatedResponse[CycleResponse])
def list_cycles(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return CycleService(db).find_all(params)


@router.get("/cycles/{cycle_id}", response_model=CycleResponse)
def get_cycle(cycle_id: str, db: Session = Depends(get_db)):
    return CycleService(db).find_by_id(cycle_id)


@router.put("/cycles/{cycle_id}", response_model=CycleResponse, dependencies=[Depends(require_hr())])
def update_cycle(cycle_id: str, data: CycleUpdate, db: Session = Depends(get_db)):
    return CycleService(db).update(cycle_id, data)


@router.post("/cycles/{cycle_id}/publish", response_model=PublishResultResponse)
def publish_cycle(
    cycle_id: str,
    body: Optional[PublishCycleRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_hr()),
):
    """Generate evaluations for the cycle. Fails unless the cycle is DRAFT."""
    targets = body.target_employee_ids if body else None
    return EvaluationExpander(db).publish(cycle_id, targets, published_by=current_user.id)


@router.post("/cycles/{cycle_id}/republish", response_model=PublishResultResponse)
def republish_cycle(
    cycle_id: str,
    body: Optional[PublishCycleRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_hr()),
):
    """Discard the cycle's evaluations, ratings included, and generate them again."""
    targets = body.target_employee_ids if body else None
    return EvaluationExpander(db).republish(cycle_id, targets, published_by=current_user.id)


@router.post("/cycles/{cycle_id}/close", response_model=CycleResponse, dependencies=[Depends(require_hr())])
def close_cycle(cycle_id: str, db: Session = Depends(get_db)):
    return CycleService(db).close(cycle_id)


@router.get("/cycles/{cycle_id}/evaluations", response_model=PaginatedResponse[EvaluationResponse])
def list_cycle_evaluations(
    cycle_id: str,
    params: PaginationQuery = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return CycleService(db).find_cycle_evaluations(cycle_id, params)


@router.delete("/cycles/{cycle_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_hr())])
def delete_cycle(cycle_id: str, db: Session = Depends(get_db)):
    CycleService(db).remove(cycle_id)


# --- Evaluations ---

@router.post("/evaluations", response_model=EvaluationResponse, status_code=status.HTTP_201_CREATED)
def create_evaluation(data: EvaluationCreate, db: Session = Depends(get_db)):
    return PerformanceService(db).create_evaluation(data)


@router.get("/evaluations", response_model=PaginatedResponse[EvaluationResponse])
def list_evaluations(
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    evaluator_id: Optional[str] = Query(None, alias="evaluatorId"),
    cycle_id: Optional[str] = Query(None, alias="cycleId"),
    params: PaginationQuery = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return PerformanceService(db).find_all_evaluations(
        params, employee_id=employee_id, evaluator_id=evaluator_id, cycle_id=cycle_id
    )


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
def get_evaluation(evaluation_id: str, db: Session = Depends(get_db)):
    return PerformanceService(db).find_evaluation_by_id(evaluation_id)


@router.put("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
def update_evaluation(evaluation_id: str, data: EvaluationUpdate, db: Session = Depends(get_db)):
    return PerformanceService(db).update_evaluation(evaluation_id, data)


@router.delete("/evaluations/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_hr())])
def delete_evaluation(evaluation_id: str, db: Session = Depends(get_db)):
    PerformanceService(db).delete_evaluation(evaluation_id)


@router.get("/employees/{employee_id}/evaluations", response_model=List[EvaluationResponse])
def get_employee_evaluations(
    employee_id: str,
    period: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return PerformanceService(db).get_employee_evaluations(employee_id, period)


@router.get("/employees/{employee_id}/statistics", response_model=EvaluationStatistics)
def get_employee_statistics(employee_id: str, db: Session = Depends(get_db)):
    return PerformanceService(db).get_evaluation_statistics(employee_id)


# --- Goals ---

@router.post("/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(data: GoalCreate, db: Session = Depends(get_db)):
    return PerformanceService(db).create_goal(data)


@router.get("/goals", response_model=PaginatedResponse[GoalResponse])
def list_goals(
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    goal_status: Optional[GoalStatus] = Query(None, alias="status"),
    params: PaginationQuery = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return PerformanceService(db).find_all_goals(params, employee_id=employee_id, status=goal_status)


@router.get("/goals/{goal_id}", response_model=GoalResponse)
def get_goal(goal_id: str, db: Session = Depends(get_db)):
    return PerformanceService(db).find_goal_by_id(goal_id)


@router.put("/goals/{goal_id}", response_model=GoalResponse)
def update_goal(goal_id: str, data: GoalUpdate, db: Session = Depends(get_db)):
    return PerformanceService(db).update_goal(goal_id, data)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, db: Session = Depends(get_db)):
    PerformanceService(db).delete_goal(goal_id)
