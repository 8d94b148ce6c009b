from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session, select

from database import get_session
from models.auth import Token, TokenUser, User, UserRole


async def get_auth_token(
    authorization: Optional[str] = Header(default=None),
    db_session: Session = Depends(get_session)
) -> Token:
    """Resolve the bearer token of the request; 401 if it is missing, unknown, revoked or expired."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"}
        )

    access_token = authorization[len("Bearer "):].strip()
    token_statement = select(Token).where(Token.access_token == access_token)
    token = db_session.exec(token_statement).first()

    if not token or token.is_revoked:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or revoked token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    # SQLite hands datetimes back without tzinfo
    expires_at = token.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= datetime.now(timezone.utc):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return token


async def require_user(token: Token, db_session: Session) -> User:
    """Return the active user owning the token."""
    statement = select(User).join(TokenUser, TokenUser.user_id == User.id).where(TokenUser.token_id == token.id)
    user = db_session.exec(statement).first()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not associated with an active user"
        )

    return user


async def require_admin(token: Token, db_session: Session) -> User:
    """Return the token's user if it is an admin, 403 otherwise."""
    user = await require_user(token=token, db_session=db_session)

    if user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return user
