from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from database import get_session
from models.auth import User, Token, TokenUser, UserRole
from .schemas.auth import LoginRequest, LoginResponse, SignupRequest, UserResponse
from helpers.auth import get_auth_token, require_user
from settings import logger

import hashlib
from datetime import datetime, timedelta, timezone
from models.helper import id_generator

router = APIRouter(prefix="/auth", tags=["authentication"])

TOKEN_LIFETIME = timedelta(hours=24)


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


def issue_token(user: User, db_session: Session) -> LoginResponse:
    """Create a bearer token for ``user`` and link it to them."""
    access_token = id_generator('tkn', 32)()
    refresh_token = id_generator('ref', 32)()
    expires_at = datetime.now(timezone.utc) + TOKEN_LIFETIME

    new_token = Token(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_at=expires_at
    )
    db_session.add(new_token)
    db_session.commit()
    db_session.refresh(new_token)

    token_user = TokenUser(token_id=new_token.id, user_id=user.id)
    db_session.add(token_user)
    db_session.commit()

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_at=expires_at,
        user=UserResponse.model_validate(user)
    )


@router.get("/has-users")
async def has_users(
    db_session: Session = Depends(get_session)
) -> dict:
    """Check if any users exist in the system (for onboarding)."""
    users = db_session.exec(select(User)).all()
    return {"has_users": len(users) > 0}


@router.post("/signup")
async def signup(
    signup_data: SignupRequest,
    db_session: Session = Depends(get_session)
) -> LoginResponse:
    """Initial admin signup (only works when no users exist in system)."""

    existing_users = db_session.exec(select(User)).all()
    if len(existing_users) > 0:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Users already exist. Signup is disabled."
        )

    new_user = User(
        username=signup_data.username,
        email=signup_data.email,
        hashed_password=hash_password(signup_data.password),
        role=UserRole.ADMIN,
        is_active=True
    )

    db_session.add(new_user)
    db_session.commit()
    db_session.refresh(new_user)

    logger.info("Initial admin created", extra={"user_id": new_user.id})
    return issue_token(new_user, db_session)


@router.post("/token")
async def login(
    login_data: LoginRequest,
    db_session: Session = Depends(get_session)
) -> LoginResponse:
    """Login for admin panel users."""

    user_statement = select(User).where(
        User.username == login_data.username,
        User.is_active == True  # Only allow login for active users
    )
    user = db_session.exec(user_statement).first()

    # Don't reveal whether username or password was wrong
    if not user or user.hashed_password != hash_password(login_data.password):
        logger.warning("Failed login attempt", extra={"username": login_data.username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return issue_token(user, db_session)


@router.get("/me")
async def me(
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> UserResponse:
    """Return the user behind the current token."""
    user = await require_user(token=token, db_session=db_session)
    return UserResponse.model_validate(user)
