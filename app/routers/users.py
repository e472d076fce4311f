"""
Employee directory endpoints, including the hierarchy reads used by the
performance module.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.schemas import PaginatedResponse, PaginationQuery
from app.database import get_db
from app.dependencies import get_pagination, require_admin, require_hr
from app.schemas.auth import UserCreate, UserResponse, UserUpdate
from app.services.organization import OrganizationGraph
from app.services.user_service import UserService

router = APIRouter(
    prefix="/admin/users",
    tags=["users"],
)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin())])
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create(data)


@router.get("", response_model=PaginatedResponse[UserResponse], dependencies=[Depends(require_hr())])
def list_users(params: PaginationQuery = Depends(get_pagination), db: Session = Depends(get_db)):
    return UserService(db).find_all(params)


@router.get("/hierarchy", response_model=List[UserResponse], dependencies=[Depends(require_hr())])
def get_hierarchy(
    root_id: Optional[str] = Query(None, alias="rootId"),
    db: Session = Depends(get_db),
):
    """Active employees under `rootId` (root first), or every active employee."""
    return OrganizationGraph(db).employees_under_hierarchy(root_id)


@router.get("/hierarchy/cycles", response_model=List[List[str]], dependencies=[Depends(require_hr())])
def get_manager_cycles(db: Session = Depends(get_db)):
    return OrganizationGraph(db).find_manager_cycles()


@router.get("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_hr())])
def get_user(user_id: str, db: Session = Depends(get_db)):
    return UserService(db).find_by_id(user_id)


@router.get("/{user_id}/subordinates", response_model=List[UserResponse], dependencies=[Depends(require_hr())])
def get_subordinates(user_id: str, recursive: bool = False, db: Session = Depends(get_db)):
    graph = OrganizationGraph(db)
    if recursive:
        return graph.all_subordinates_recursive(user_id)
    return graph.subordinates_of(user_id)


@router.get("/{user_id}/peers", response_model=List[UserResponse], dependencies=[Depends(require_hr())])
def get_peers(user_id: str, db: Session = Depends(get_db)):
    return OrganizationGraph(db).peers_of(user_id)


@router.put("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_admin())])
def update_user(user_id: str, data: UserUpdate, db: Session = Depends(get_db)):
    return UserService(db).update(user_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin())])
def delete_user(user_id: str, db: Session = Depends(get_db)):
    UserService(db).remove(user_id)
