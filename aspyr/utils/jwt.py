from jose import JWTError
from jose.jwt import encode, decode
import bcrypt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from aspyr.config import settings
from aspyr.schemas.auth_schemas import AuthTokenPayload
from learning.errors import AuthRequired

ALGORITHM = "HS256"

logger = logging.getLogger("aspyr.auth")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.warning("password check failed: %s", e)
        return False

def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def create_access_token(data: AuthTokenPayload) -> str:
    """Create a JWT access token."""
    claims = data.model_dump(exclude_none=True)
    return encode(claims, settings.secret_key, algorithm=ALGORITHM)

def issue_token(user_id: str, email: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    return create_access_token(AuthTokenPayload(sub=email, uid=user_id, exp=exp))

def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise AuthRequired("Missing token")
    try:
        payload = decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.info("rejected token: %s", e)
        raise AuthRequired("Invalid token") from None
