from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.schemas import PaginatedResponse, PaginationQuery
from app.database import get_db
from app.dependencies import get_pagination, require_hr
from app.schemas.hr import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    ContractCreate,
    ContractResponse,
    ContractStatusUpdate,
    ContractUpdate,
)
from app.services.assignment_service import AssignmentService
from app.services.contract_service import ContractService

router = APIRouter(
    prefix="/hr",
    tags=["contracts"],
    dependencies=[Depends(require_hr())],
)


# --- Contracts ---

@router.post("/contracts", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
def create_contract(data: ContractCreate, db: Session = Depends(get_db)):
    return ContractService(db).create(data)


@router.get("/contracts", response_model=PaginatedResponse[ContractResponse])
def list_contracts(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return ContractService(db).find_all(params)


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(contract_id: str, db: Session = Depends(get_db)):
    return ContractService(db).find_one(contract_id)


@router.patch("/contracts/{contract_id}/status", response_model=ContractResponse)
def update_contract_status(contract_id: str, data: ContractStatusUpdate, db: Session = Depends(get_db)):
    return ContractService(db).update_status(contract_id, data.status)


@router.put("/contracts/{contract_id}", response_model=ContractResponse)
def update_contract(contract_id: str, data: ContractUpdate, db: Session = Depends(get_db)):
    return ContractService(db).update(contract_id, data)


@router.delete("/contracts/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(contract_id: str, db: Session = Depends(get_db)):
    ContractService(db).remove(contract_id)


# --- Assignments ---

@router.post("/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(data: AssignmentCreate, db: Session = Depends(get_db)):
    return AssignmentService(db).create(data)


@router.get("/assignments", response_model=PaginatedResponse[AssignmentResponse])
def list_assignments(
    contract_id: Optional[str] = Query(None, alias="contractId"),
    params: PaginationQuery = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).find_all(params, contract_id=contract_id)


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: str, db: Session = Depends(get_db)):
    return AssignmentService(db).find_one(assignment_id)


@router.put("/assignments/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(assignment_id: str, data: AssignmentUpdate, db: Session = Depends(get_db)):
    return AssignmentService(db).update(assignment_id, data)


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db)):
    AssignmentService(db).remove(assignment_id)
