"""
Admin Console Routes for Casa Nala
==================================

Endpoints:
----------
- GET /admin: Console sections the caller's role may open (any staff role)
- GET /admin/users: List user profiles (admin)
- POST /admin/users: Create a user profile (admin)
- PUT /admin/users/{id}/role: Change a user's role (admin)

Sections by Role:
-----------------
- admin: every section
- cocina: kitchen board
- mesero: delivery board, pickup board and table orders
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import config
from ..auth import SessionContext, create_user, require_admin, require_staff
from ..db import get_db
from ..models import UserProfile
from ..schemas.users import AdminConsoleOut, AdminSectionOut, RoleUpdate, UserCreate, UserOut


logger = logging.getLogger(__name__)

admin_console_router = APIRouter(prefix="/admin", tags=["Admin - Console"])


@admin_console_router.get("", response_model=AdminConsoleOut)
def admin_console(ctx: SessionContext = Depends(require_staff)) -> AdminConsoleOut:
    sections = [
        AdminSectionOut(title=s["title"], path=s["path"], description=s["description"])
        for s in config.ADMIN_SECTIONS
        if ctx.role.value in s["roles"]
    ]
    return AdminConsoleOut(role=ctx.role, sections=sections)


@admin_console_router.get("/users", response_model=List[UserOut])
def list_users(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> List[UserOut]:
    users = db.query(UserProfile).order_by(UserProfile.email.asc()).all()
    return [UserOut.model_validate(u) for u in users]


@admin_console_router.post("/users", response_model=UserOut, status_code=201)
def add_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> UserOut:
    try:
        user = create_user(
            db,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            display_name=payload.display_name,
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Ya existe un usuario con ese correo.")
    return UserOut.model_validate(user)


@admin_console_router.put("/users/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: str,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(require_admin),
) -> UserOut:
    user = db.get(UserProfile, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="Usuario no encontrado.")
    user.role = payload.role.value
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s by %s", user.id, user.role, ctx.user_id)
    return UserOut.model_validate(user)
