from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.db import get_db
from backend.schemas.auth_schemas import AuthResponse, LoginUserRequest, RegisterUserRequest, UserOut
from backend.services import auth_service
from backend.utils.security import get_current_user_id

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/register", response_model=AuthResponse)
def register(body: RegisterUserRequest, db: Session = Depends(get_db)):
    return auth_service.register_user(db, body)


@auth_router.post("/login", response_model=AuthResponse)
def login(body: LoginUserRequest, db: Session = Depends(get_db)):
    return auth_service.login_user(db, body)


@auth_router.get("/me", response_model=UserOut)
def me(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return auth_service.get_user_profile(db, user_id)
