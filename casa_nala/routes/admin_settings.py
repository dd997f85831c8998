"""
Admin Settings Routes for Casa Nala
===================================

Endpoints:
----------
- GET /admin/settings: Weekly hours and all promotions (defaults until saved)
- PUT /admin/settings: Replace weekly hours and promotions

Authentication:
---------------
All endpoints require an admin session.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_admin
from ..db import get_db
from ..schemas.settings import SiteSettingsOut, SiteSettingsUpdate
from ..services.site_settings import SettingsStoreError, get_site_settings, update_site_settings


logger = logging.getLogger(__name__)

admin_settings_router = APIRouter(prefix="/admin/settings", tags=["Admin - Settings"])


@admin_settings_router.get("", response_model=SiteSettingsOut)
def read_settings(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> SiteSettingsOut:
    try:
        return get_site_settings(db)
    except SettingsStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@admin_settings_router.put("", response_model=SiteSettingsOut)
def save_settings(
    payload: SiteSettingsUpdate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> SiteSettingsOut:
    try:
        return update_site_settings(db, payload)
    except SettingsStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
