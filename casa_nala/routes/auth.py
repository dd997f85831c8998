"""
Login and Session Routes for Casa Nala
======================================

Endpoints:
----------
- GET /login: Login prompt; echoes ``redirectedFrom`` from the admin gate
- POST /login: Verify email/password, open a session, set the auth cookie
- POST /logout: Close the session and clear the cookie
- GET /me: The caller's resolved session context

Cookie:
-------
The session token is stored in an HttpOnly, SameSite=Lax cookie named by
AUTH_COOKIE_NAME. Set AUTH_COOKIE_SECURE=true behind HTTPS.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from .. import config
from ..auth import (
    SessionContext,
    authenticate,
    create_session,
    delete_session,
    get_session_context,
    resolve_role,
)
from ..db import get_db
from ..schemas.users import LoginPrompt, LoginRequest, LoginResponse, SessionOut


logger = logging.getLogger(__name__)

auth_router = APIRouter(tags=["Auth"])


def _safe_redirect(path: Optional[str]) -> Optional[str]:
    # Only local paths, never another host
    if path and path.startswith("/") and not path.startswith("//"):
        return path
    return None


@auth_router.get("/login", response_model=LoginPrompt)
def login_prompt(redirected_from: Optional[str] = Query(None, alias="redirectedFrom")) -> LoginPrompt:
    return LoginPrompt(
        message="Inicia sesión para continuar.",
        redirected_from=_safe_redirect(redirected_from),
    )


@auth_router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    redirected_from: Optional[str] = Query(None, alias="redirectedFrom"),
    db: Session = Depends(get_db),
) -> LoginResponse:
    user = authenticate(db, payload.email, payload.password)
    if user is None:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Correo o contraseña incorrectos.",
        )

    token = create_session(db, user)
    response.set_cookie(
        key=config.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=config.AUTH_COOKIE_SECURE,
        path="/",
    )
    return LoginResponse(
        user_id=user.id,
        role=resolve_role(db, user.id),
        redirect_to=_safe_redirect(redirected_from) or "/admin",
    )


@auth_router.post("/logout", status_code=204)
def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> None:
    delete_session(db, request.cookies.get(config.AUTH_COOKIE_NAME))
    response.delete_cookie(config.AUTH_COOKIE_NAME, path="/")
    return None


@auth_router.get("/me", response_model=SessionOut)
def me(ctx: SessionContext = Depends(get_session_context)) -> SessionOut:
    return SessionOut(
        authenticated=ctx.has_session,
        user_id=ctx.user_id,
        email=ctx.email,
        role=ctx.role,
    )
