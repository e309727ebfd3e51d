"""
Authentication endpoints. Sign-in and sign-out drive the dashboard session store.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from aspyr.bootstrap import get_dashboard
from aspyr.config import get_db
from aspyr.schemas.auth_schemas import LoginRequest, LoginResponse, LogoutResponse, RegisterRequest, RegisterResponse
from aspyr.schemas.user_schemas import User
from aspyr.services.dashboard_service import DashboardService
from aspyr.utils.auth import (
    authenticate_user,
    clear_auth_cookie,
    create_user,
    get_current_user,
    get_user_by_email,
    set_auth_cookie,
)
from aspyr.utils.jwt import verify_token
from learning.errors import AuthRequired

auth_routes = APIRouter()
logger = logging.getLogger("aspyr.auth")


@auth_routes.post("/login")
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_dashboard),
) -> LoginResponse:
    """Authenticate user and set HTTP-only cookie with token."""
    user = authenticate_user(request.email, request.password, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    set_auth_cookie(response, user)
    dashboard.sign_in(user.id, user.email)
    return LoginResponse(message="Login successful", token_set=True)


@auth_routes.post("/register")
def register(
    request: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_dashboard),
) -> RegisterResponse:
    """Register a new user and sign them in."""
    if request.password != request.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match"
        )
    if get_user_by_email(request.email, db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    user = create_user(request.email, request.password, db)
    set_auth_cookie(response, user)
    dashboard.sign_in(user.id, user.email)
    return RegisterResponse(message="Registration successful")


@auth_routes.post("/logout")
def logout(
    response: Response,
    access_token: Optional[str] = Cookie(None),
    dashboard: DashboardService = Depends(get_dashboard),
) -> LogoutResponse:
    """Clear the authentication cookie and tear down the dashboard session."""
    try:
        payload = verify_token(access_token)
    except AuthRequired:
        payload = None
    if payload is not None:
        dashboard.sign_out(payload.uid)
    clear_auth_cookie(response)
    return LogoutResponse(message="Logged out successfully")


@auth_routes.get("/me")
def get_current_user_info(current_user: User = Depends(get_current_user)) -> User:
    return current_user
