import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError
from app.core.limiter import limiter
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user
from app.schemas.auth import LoginRequest, Token, UserResponse
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=Token)
@limiter.limit("10/minute")
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    # JSON body instead of form-data for frontend compatibility
    user = db.query(User).filter(User.email == login_data.email).first()
    if not user or not auth_service.verify_password(login_data.password, user.hashed_password):
        logger.info("Failed login", extra={"email": login_data.email, "reason": "invalid_credentials"})
        raise AuthenticationError("Incorrect email or password")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")

    access_token = auth_service.create_access_token(
        data={"sub": user.email, "role": user.role.value, "user_id": user.id}
    )
    logger.info("Login", extra={"user_id": user.id})

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
