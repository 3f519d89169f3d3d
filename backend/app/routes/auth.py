import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.limiter import limiter
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    get_current_user,
    set_session_cookie,
    clear_session_cookie,
)
from app.models.user import User
from app.schemas.auth import UserRegister, UserLogin, Token, UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(
    request: Request,
    response: Response,
    user_data: UserRegister,
    db: Session = Depends(get_db),
):
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )

    user = User(
        first_name=user_data.first_name,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    # Registration signs the user in, same as a login
    set_session_cookie(response, create_access_token(data={"sub": str(user.id)}))
    logger.info("User registered", extra={"user_id": str(user.id)})
    return user


@router.post("/login", response_model=Token)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    user_data: UserLogin,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.email == user_data.email).first()
    if not user or not verify_password(user_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    access_token = create_access_token(data={"sub": str(user.id)})
    set_session_cookie(response, access_token)

    return {"access_token": access_token, "token_type": "bearer", "user": user}


@router.post("/logout")
def logout(response: Response, current_user: User = Depends(get_current_user)):
    clear_session_cookie(response)
    logger.info("User logged out", extra={"user_id": str(current_user.id)})
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user
