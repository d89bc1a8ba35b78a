from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth import create_access_token, get_current_user
from ..config import settings
from ..constants import ACCESS_TOKEN_EXPIRE_MINUTES
from ..database import get_db
from ..exceptions import InvalidCredentialsError
from ..models import User
from ..schemas import Token, UserResponse
from ..services.auth_service import authenticate_user
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_token(user: User) -> str:
    return create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"error": None, "email": ""})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Sign in from the login form.

    Sets the session cookie and redirects to the admin area; invalid
    credentials re-render the form with an error.
    """
    try:
        user = await authenticate_user(email, password, db)
    except InvalidCredentialsError as e:
        logger.warning(f"Login failed for email: {email}")
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": e.message, "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    response = RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=_issue_token(user),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info(f"User signed in: {user.email}")
    return response


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Bearer token for API clients that cannot hold the session cookie."""
    user = await authenticate_user(form_data.username, form_data.password, db)
    logger.info(f"Access token created for user: {user.email}")
    return Token(access_token=_issue_token(user), token_type="bearer")


@router.post("/logout")
async def logout():
    response = RedirectResponse("/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
