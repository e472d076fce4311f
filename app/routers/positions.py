from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.schemas import MessageResponse, PaginatedResponse, PaginationQuery
from app.database import get_db
from app.dependencies import get_current_user, get_pagination, require_admin
from app.schemas.hr import (
    PositionCoordinatesUpdate,
    PositionCreate,
    PositionParentUpdate,
    PositionResponse,
    PositionTreeNode,
    PositionUpdate,
)
from app.services.position_service import PositionService

router = APIRouter(
    prefix="/admin/positions",
    tags=["positions"],
    dependencies=[Depends(get_current_user)],
)


@router.post("", response_model=PositionResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin())])
def create_position(data: PositionCreate, db: Session = Depends(get_db)):
    return PositionService(db).create(data)


@router.get("", response_model=PaginatedResponse[PositionResponse])
def list_positions(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return PositionService(db).find_all(params)


@router.get("/flat", response_model=List[PositionResponse])
def list_positions_flat(db: Session = Depends(get_db)):
    return PositionService(db).find_flat()


@router.get("/tree", response_model=List[PositionTreeNode])
def get_position_tree(db: Session = Depends(get_db)):
    return PositionService(db).find_tree()


@router.post("/reset-layout", response_model=MessageResponse, dependencies=[Depends(require_admin())])
def reset_layout(db: Session = Depends(get_db)):
    count = PositionService(db).reset_layout()
    return {"message": f"Layout reset for {count} positions"}


@router.get("/{position_id}", response_model=PositionResponse)
def get_position(position_id: str, db: Session = Depends(get_db)):
    return PositionService(db).find_one(position_id)


@router.put("/{position_id}", response_model=PositionResponse, dependencies=[Depends(require_admin())])
def update_position(position_id: str, data: PositionUpdate, db: Session = Depends(get_db)):
    return PositionService(db).update(position_id, data)


@router.patch("/{position_id}/parent", response_model=PositionResponse, dependencies=[Depends(require_admin())])
def move_position(position_id: str, data: PositionParentUpdate, db: Session = Depends(get_db)):
    return PositionService(db).update_parent(position_id, data.parent_id)


@router.patch("/{position_id}/coordinates", response_model=PositionResponse,
              dependencies=[Depends(require_admin())])
def update_coordinates(position_id: str, data: PositionCoordinatesUpdate, db: Session = Depends(get_db)):
    return PositionService(db).update_coordinates(position_id, data.x, data.y)


@router.delete("/{position_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin())])
def delete_position(position_id: str, db: Session = Depends(get_db)):
    PositionService(db).remove(position_id)
