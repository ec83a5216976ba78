import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.core import security
from healthaccess.models.user import User, UserRole
from healthaccess.schemas.user import Token, User as UserSchema, UserCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create new user.
    """
    if user_in.role == UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin accounts cannot self-register")
    user = crud.user.get_by_email(db, email=user_in.email)
    if user:
        raise HTTPException(
            status_code=400,
            detail="A user with this email already exists.",
        )
    user = crud.user.create(db, obj_in=user_in)
    logger.info(f"Registered {user.role} {user.id}")
    return user


@router.post("/login", response_model=Token)
def login(
    db: Session = Depends(deps.get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = crud.user.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return Token(
        access_token=security.create_access_token(user.id, role=user.role),
        role=user.role,
        user_id=user.id,
    )


@router.get("/me", response_model=UserSchema)
def read_me(current_user: User = Depends(deps.get_current_user)) -> Any:
    return current_user
