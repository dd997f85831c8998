"""
Authentication and Access Guard for Casa Nala
=============================================

This module handles identity and role-based access for the staff console.

Sessions:
---------
Staff log in with email and password. A successful login creates an
``AuthSession`` row and stores its opaque token in an HttpOnly cookie
(``AUTH_COOKIE_NAME``). Every request resolves the cookie once into a
``SessionContext`` that is passed explicitly to guards and views.

Roles:
------
A user's role comes from their profile record and is one of the closed
``Role`` values: admin, cocina, mesero, cliente. Unknown or missing roles,
and lookup failures, resolve to ``cliente``.

Access Guard:
-------------
``RoleGuard(allowed_roles)`` decides whether a session may use a page or
endpoint:

- session not resolved yet      -> loading (no content, no decision)
- resolved and role allowed     -> allowed
- anything else                 -> denied, with a link home (and to the
                                   login page when there is no session)

The same guard protects the data endpoints behind each page, so what a role
can see in the console is exactly what it can read and change.

Usage:
------
    from casa_nala.auth import RoleGuard
    from casa_nala.enums import Role

    @router.get("/admin/kitchen")
    def kitchen(ctx: SessionContext = Depends(RoleGuard(Role.ADMIN, Role.COCINA))):
        ...

Password Storage:
-----------------
Passwords are hashed with ``werkzeug.security`` (salted, method prefix stored
in the hash) and only ever compared through ``check_password_hash``.
"""

import enum
import logging
import secrets
from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from . import config
from .db import get_db
from .enums import Role
from .models import AuthSession, UserProfile

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    """Check a password against a stored hash. Unknown or malformed hashes never match."""
    if not stored_hash:
        return False
    try:
        return check_password_hash(stored_hash, password)
    except ValueError:
        return False


# =============================================================================
# Users and Sessions
# =============================================================================

def create_user(
    db: Session,
    email: str,
    password: str,
    role: Role = Role.CLIENTE,
    display_name: Optional[str] = None,
) -> UserProfile:
    user = UserProfile(
        email=email.strip().lower(),
        display_name=display_name,
        role=Role.parse(role).value,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[UserProfile]:
    """Return the active user for these credentials, or None."""
    user = (
        db.query(UserProfile)
        .filter(UserProfile.email == (email or "").strip().lower())
        .first()
    )
    if user is None or not user.is_active:
        return None
    if not verify_password(password or "", user.password_hash):
        return None
    return user


def create_session(db: Session, user: UserProfile) -> str:
    token = secrets.token_urlsafe(32)
    db.add(AuthSession(token=token, user_id=user.id))
    db.commit()
    logger.info("Session opened for user %s", user.id)
    return token


def delete_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    db.query(AuthSession).filter(AuthSession.token == token).delete()
    db.commit()


def resolve_session(db: Session, token: Optional[str]) -> Optional[UserProfile]:
    """Return the active user owning ``token``, or None."""
    if not token:
        return None
    try:
        session = db.get(AuthSession, token)
    except SQLAlchemyError:
        logger.exception("Error resolving session")
        return None
    if session is None or session.user is None or not session.user.is_active:
        return None
    return session.user


def resolve_role(db: Session, user_id: Optional[str]) -> Role:
    """Role from the user's profile record. Defaults to cliente."""
    if not user_id:
        return Role.CLIENTE
    try:
        user = db.get(UserProfile, user_id)
    except SQLAlchemyError:
        logger.exception("Error resolving role for user %s", user_id)
        return Role.CLIENTE
    if user is None:
        return Role.CLIENTE
    return Role.parse(user.role)


# =============================================================================
# Session Context
# =============================================================================

@dataclass(frozen=True)
class SessionContext:
    """
    Identity of the caller for one request.

    ``resolved`` is False only while the role lookup has not finished.
    """
    user_id: Optional[str] = None
    role: Role = Role.CLIENTE
    resolved: bool = True
    email: Optional[str] = None

    @property
    def has_session(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()

    @classmethod
    def pending(cls) -> "SessionContext":
        return cls(resolved=False)


def get_session_context(request: Request, db: Session = Depends(get_db)) -> SessionContext:
    """FastAPI dependency: resolve the auth cookie into a SessionContext."""
    cached = getattr(request.state, "session_context", None)
    if cached is not None:
        return cached

    user = resolve_session(db, request.cookies.get(config.AUTH_COOKIE_NAME))
    if user is None:
        ctx = SessionContext.anonymous()
    else:
        ctx = SessionContext(user_id=user.id, role=resolve_role(db, user.id), email=user.email)
    request.state.session_context = ctx
    return ctx


# =============================================================================
# Role Guard
# =============================================================================

class AccessOutcome(str, enum.Enum):
    LOADING = "loading"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass
class AccessDecision:
    outcome: AccessOutcome
    links: Dict[str, str] = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.ALLOWED


class AccessDenied(Exception):
    """Raised by RoleGuard when used as a dependency and access is refused."""

    def __init__(self, decision: AccessDecision):
        self.decision = decision
        super().__init__("Acceso denegado")


class RoleGuard:
    """Allow a page or endpoint only for the given roles."""

    def __init__(self, *allowed_roles: Role):
        self.allowed_roles = frozenset(Role.parse(r) for r in allowed_roles)

    def decide(self, ctx: SessionContext) -> AccessDecision:
        if not ctx.resolved:
            return AccessDecision(AccessOutcome.LOADING)
        if ctx.has_session and ctx.role in self.allowed_roles:
            return AccessDecision(AccessOutcome.ALLOWED)

        links = {"home": "/"}
        if not ctx.has_session:
            links["login"] = "/login"
        return AccessDecision(AccessOutcome.DENIED, links)

    def __call__(self, ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
        decision = self.decide(ctx)
        if not decision.allowed:
            logger.info("Access denied for role %s (allowed: %s)",
                        ctx.role.value, ", ".join(sorted(r.value for r in self.allowed_roles)))
            raise AccessDenied(decision)
        return ctx


# Guards shared by the console routes
require_admin = RoleGuard(Role.ADMIN)
require_staff = RoleGuard(Role.ADMIN, Role.COCINA, Role.MESERO)
require_kitchen = RoleGuard(Role.ADMIN, Role.COCINA)
require_floor = RoleGuard(Role.ADMIN, Role.MESERO)
