import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from portfolio.config import Settings
from portfolio.dependencies import get_app_settings, get_current_user, get_storage
from portfolio.schemas import ActionResult, LoginRequest, LoginResponse, SessionResponse, SessionUser
from portfolio.security import issue_token
from portfolio.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    data: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    """
    Check username/password and set the signed auth cookie.
    The error is the same whether or not the username exists.
    """
    user = storage.validate_user(data.username, data.password)
    if not user:
        logger.info("Failed login attempt for username '%s'", data.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=issue_token(user, settings),
        max_age=settings.token_ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )
    logger.info("User '%s' logged in", user.username)

    return LoginResponse(
        success=True,
        user=SessionUser(id=user.id, username=user.username, is_admin=user.is_admin),
    )


@router.post("/logout", response_model=ActionResult)
@router.post("/auth/logout", response_model=ActionResult, include_in_schema=False)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    """Drop the auth cookie. Safe to call when not logged in."""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return ActionResult(success=True, message="Logged out successfully")


@router.get("/session", response_model=SessionResponse, response_model_exclude_none=True)
def session(user: Optional[SessionUser] = Depends(get_current_user)):
    if not user:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, user=user)
