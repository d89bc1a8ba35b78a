from datetime import datetime, timedelta
from jose import JWTError, jwt, ExpiredSignatureError
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Callable, List, Optional
from streamcms.config import settings
from streamcms.models.user import ADMIN_ROLES, User
from streamcms.database import get_db
from streamcms.exceptions import AuthenticationError, AuthorizationError
from .constants import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
import logging

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer tokens are optional; the session cookie is the primary credential
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (email) in token data.")

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the email in the token's 'sub' claim."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Token expired")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {str(e)}")
        raise AuthenticationError("Invalid token")

    email: Optional[str] = payload.get("sub")
    if email is None:
        logger.warning("Token is missing 'sub' claim")
        raise AuthenticationError("Token does not contain 'sub' field.")
    return email


def extract_token(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or bearer_token


async def get_optional_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Resolve the caller from the session cookie or bearer token.

    Returns None for anonymous callers and for stale or invalid tokens,
    so public pages keep working when a cookie has expired.
    """
    token = extract_token(request, bearer_token)
    if not token:
        return None

    try:
        email = decode_access_token(token)
    except AuthenticationError:
        return None

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if user is not None:
        request.state.user = user
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


def get_current_user_with_role(required_roles: List[str]) -> Callable[..., User]:
    async def _current_user_with_role(user: User = Depends(get_current_user)) -> User:
        if not user.role or user.role.name not in required_roles:
            logger.warning(f"User {user.id} with role '{user.role.name if user.role else None}' denied")
            raise AuthorizationError(
                f"Role '{user.role.name if user.role else 'None'}' does not have access to this resource.",
                required_role=",".join(required_roles),
            )
        return user

    return _current_user_with_role


require_admin = get_current_user_with_role(ADMIN_ROLES)
