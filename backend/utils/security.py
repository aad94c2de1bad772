import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from backend.utils.config import (
    JWT_SECRET_KEY,
    JWT_ALGORITHM,
    JWT_ISSUER,
    JWT_AUDIENCE,
    JWT_EXPIRE_HOURS,
)
from backend.utils.exceptions import UnauthorizedException
from backend.utils.logger import get_logger

logger = get_logger("security")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

if JWT_SECRET_KEY == "super-secret-key-change-me":
    logger.warning("JWT_SECRET_KEY is not set, using the development default")


# Password hashing
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        # Malformed or unknown hash format
        return False


# Tokens
def create_access_token(user, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Issue a signed token for ``user``; returns (token, expires_at)."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(hours=JWT_EXPIRE_HOURS)

    claims = {
        "sub": str(user.id),
        "email": user.email,
        "given_name": user.first_name,
        "family_name": user.last_name,
        "jti": uuid.uuid4().hex,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
    }
    token = jwt.encode(claims, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    return token, expires_at


def decode_access_token(token: str) -> int:
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError) as e:
        raise UnauthorizedException("Could not validate credentials", technical_message=str(e))


def get_current_user_id(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> int:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Authentication required")
    return decode_access_token(credentials.credentials)
