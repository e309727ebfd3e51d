import logging
from typing import Optional
from uuid import uuid4

from fastapi import Cookie, Depends, Response
from sqlalchemy.orm import Session

from aspyr.config import get_db, settings
from aspyr.models.models import Profile, User
from aspyr.schemas.user_schemas import User as UserSchema
from aspyr.utils.jwt import get_password_hash, issue_token, verify_password, verify_token
from learning.entities import Theme
from learning.errors import AuthRequired

logger = logging.getLogger("aspyr.auth")


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> UserSchema:
    payload = verify_token(access_token)
    user = db.query(User).filter(User.id == payload.uid).first()
    if user is None or user.email != payload.sub:
        raise AuthRequired("User not found")
    return UserSchema(id=user.id, email=user.email, preferences=user.preferences)

def set_auth_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key="access_token",
        value=issue_token(user.id, user.email),
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )

def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def get_user_by_email(email: str, db: Session) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()

def create_user(email: str, password: str, db: Session) -> User:
    """Create the account and its profile row in one transaction."""
    email = email.strip().lower()
    user = User(id=str(uuid4()), email=email, hashed_password=get_password_hash(password), preferences={})
    db.add(user)
    db.add(
        Profile(
            id=user.id,
            username=email.split("@", 1)[0],
            tagline="Lifelong learner",
            theme=Theme.DARK.value,
            learning_mood="Feeling Curious",
            streak_days=0,
        )
    )
    db.commit()
    db.refresh(user)
    logger.info("created user id=%s", user.id)
    return user

def authenticate_user(email: str, password: str, db: Session) -> User | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
