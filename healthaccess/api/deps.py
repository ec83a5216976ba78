from datetime import datetime
from typing import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.core import security
from healthaccess.core.config import settings
from healthaccess.db.session import SessionLocal
from healthaccess.models.user import User, UserRole
from healthaccess.schemas.user import SessionContext, TokenPayload
from healthaccess.utils.timezone import utcnow

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_now() -> datetime:
    """Request clock. Overridden in tests to pin the time."""
    return utcnow()


def user_from_token(db: Session, token: str) -> User:
    try:
        payload = security.decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    user = crud.user.get(db, id=token_data.sub)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return user


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> User:
    return user_from_token(db, token)


def get_current_session(current_user: User = Depends(get_current_user)) -> SessionContext:
    return SessionContext(
        user_id=current_user.id,
        role=UserRole(current_user.role),
        full_name=current_user.full_name,
    )


def require_roles(*roles: UserRole) -> Callable[..., SessionContext]:
    def dependency(session: SessionContext = Depends(get_current_session)) -> SessionContext:
        if session.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return session

    return dependency


get_current_doctor = require_roles(UserRole.DOCTOR)
get_current_patient = require_roles(UserRole.PATIENT)
get_current_pharmacist = require_roles(UserRole.PHARMACIST, UserRole.ADMIN)
get_current_staff = require_roles(UserRole.ADMIN, UserRole.DOCTOR, UserRole.LHW, UserRole.PHARMACIST)
