from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.models import User
from backend.schemas.auth_schemas import AuthResponse, LoginUserRequest, RegisterUserRequest, UserOut
from backend.services.category_service import seed_default_categories
from backend.utils.exceptions import ConflictException, UnauthorizedException
from backend.utils.logger import get_logger
from backend.utils.security import create_access_token, hash_password, verify_password

logger = get_logger("auth")


def _find_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def _auth_response(user: User) -> AuthResponse:
    token, expires_at = create_access_token(user)
    return AuthResponse(token=token, expires_at=expires_at, user=UserOut.model_validate(user))


def register_user(db: Session, req: RegisterUserRequest) -> AuthResponse:
    if _find_by_email(db, req.email):
        raise ConflictException("User", "email already registered")

    user = User(
        email=req.email,
        first_name=req.first_name,
        last_name=req.last_name,
        password_hash=hash_password(req.password),
    )
    db.add(user)
    db.flush()

    seed_default_categories(db, user.id)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} registered")
    return _auth_response(user)


def login_user(db: Session, req: LoginUserRequest) -> AuthResponse:
    user = _find_by_email(db, req.email)
    if not user or not verify_password(req.password, user.password_hash):
        raise UnauthorizedException("Invalid email or password.")
    return _auth_response(user)


def get_user_profile(db: Session, user_id: int) -> UserOut:
    user = db.query(User).filter_by(id=user_id).first()
    if not user:
        raise UnauthorizedException("Access denied", technical_message=f"User {user_id} no longer exists")
    return UserOut.model_validate(user)
