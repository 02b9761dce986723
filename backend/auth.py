import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordRequestForm
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session
from starlette import status

from database import get_db
from models.users import User, UserRole
from utils.auth_utils import create_access_token, get_current_user, ADMIN

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("auth")

bycrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class CreateUserRequest(BaseModel):
    username: str
    password: str
    name: Optional[str] = None
    role: UserRole = UserRole.USER


class Token(BaseModel):
    access_token: str
    token_type: str
    role: str


db_dependency = Annotated[Session, Depends(get_db)]


def _token_for(user: User) -> Token:
    access_token = create_access_token(data={"sub": user.username, "role": user.role.value, "uid": user.id})
    return Token(access_token=access_token, token_type="bearer", role=user.role.value)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register_user(
    user: CreateUserRequest,
    request: Request,
    db: db_dependency
):
    """
    Register a user. The very first user becomes the admin; afterwards only
    an admin may register users.
    """
    role = user.role
    if db.query(User).count() == 0:
        role = UserRole.ADMIN
    else:
        caller = get_current_user(request)
        if caller.get("role") != ADMIN:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only an admin can register users")

    existing_user = db.query(User).filter(User.username == user.username).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    hashed_password = bycrypt_context.hash(user.password)
    new_user = User(username=user.username, name=user.name, hashed_password=hashed_password, role=role)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"User '{new_user.username}' registered with role {role.value}")

    return _token_for(new_user)


@router.post("/login", response_model=Token)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: db_dependency
):
    db_user = db.query(User).filter(User.username == form_data.username).first()
    if not db_user or not db_user.is_active or not bycrypt_context.verify(form_data.password, db_user.hashed_password):
        logger.warning(f"Failed login attempt for '{form_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_for(db_user)
