# portfolio/dependencies.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from portfolio.config import Settings
from portfolio.schemas import SessionUser
from portfolio.security import read_token
from portfolio.storage.base import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> Optional[SessionUser]:
    """Identity proven by the auth cookie, or None for an anonymous request."""
    return read_token(request.cookies.get(settings.auth_cookie_name), settings)


def require_admin(
    request: Request, user: Optional[SessionUser] = Depends(get_current_user)
) -> SessionUser:
    # 1. No cookie, bad signature or expired token
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    # 2. Valid token, but not an admin
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    request.state.user = user
    return user
