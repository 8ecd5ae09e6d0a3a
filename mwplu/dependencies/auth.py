from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from ..config import settings
from ..services.auth import AuthError, AuthService, AuthUser


def _raw_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.cookie_name)


def optional_user(request: Request) -> Optional[AuthUser]:
    raw_token = _raw_token(request)
    if not raw_token:
        return None
    try:
        user = AuthService().verify_token(raw_token)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    request.state.user_id = str(user.id)
    return user


def require_user(user: Optional[AuthUser] = Depends(optional_user)) -> AuthUser:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user
