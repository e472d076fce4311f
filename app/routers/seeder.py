from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from app.core.schemas import CamelModel
from app.database import get_db
from app.dependencies import require_admin
from app.schemas.hr import SeedResult
from app.services.seeder_service import SeederService

router = APIRouter(
    prefix="/hr/seeder",
    tags=["seeder"],
    dependencies=[Depends(require_admin())],
)


class SeedRequest(CamelModel):
    user_count: int = Field(20, ge=1, le=500)
    position_count: Optional[int] = Field(None, ge=1)


@router.post("/seed", response_model=SeedResult)
def seed_demo_data(body: Optional[SeedRequest] = None, db: Session = Depends(get_db)):
    body = body or SeedRequest()
    return SeederService(db).seed(user_count=body.user_count, position_count=body.position_count)


@router.delete("/clear", response_model=SeedResult)
def clear_demo_data(db: Session = Depends(get_db)):
    return SeederService(db).clear()


@router.get("/stats")
def seeder_stats(db: Session = Depends(get_db)):
    return SeederService(db).stats()
