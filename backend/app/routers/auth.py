import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app import models
from app.core.logging import bind_actor, get_logger
from app.core.rate_limit import RATE_LIMITS, limiter
from app.core.security import (
    create_access_token,
    decode_user_id,
    hash_password,
    verify_password,
)
from app.db import get_db
from app.schemas import Token, UserCreate, UserRead, UserRole
from app.services import Actor

router = APIRouter(prefix="/api/auth", tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")
logger = get_logger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["register_operations"])
def register_user(request: Request, payload: UserCreate, db: Session = Depends(get_db)) -> UserRead:
    existing = (
        db.query(models.User)
        .filter(or_(models.User.email == payload.email, models.User.username == payload.username))
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="User with this email or username already exists")

    user = models.User(
        email=payload.email,
        username=payload.username,
        full_name=payload.full_name,
        hashed_password=hash_password(payload.password),
        role=UserRole.MEMBER.value,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_registered", user_id=user.id)
    return UserRead.model_validate(user, from_attributes=True)


@router.post("/token", response_model=Token)
@limiter.limit(RATE_LIMITS["auth_operations"])
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Token:
    user = db.query(models.User).filter(models.User.email == form_data.username).first()
    if not user or not user.is_active or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Incorrect email or password")
    access_token = create_access_token(user.id)
    return Token(access_token=access_token, token_type="bearer")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user_pk = decode_user_id(token)
    except (jwt.PyJWTError, ValueError):
        raise credentials_exception

    user = db.get(models.User, user_pk)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


async def get_current_actor(current_user: models.User = Depends(get_current_user)) -> Actor:
    actor = Actor.from_user(current_user)
    bind_actor(actor.id, actor.role.value)
    return actor


@router.get("/me", response_model=UserRead)
async def read_users_me(current_user: models.User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user, from_attributes=True)
