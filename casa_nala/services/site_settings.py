"""
Site settings service: weekly hours and promotions.

The settings live in a single ``site_settings`` row. Until an admin saves
them, readers get the default schedule.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import SiteSettings
from ..schemas.settings import SiteSettingsOut, SiteSettingsUpdate, WeeklyHours

logger = logging.getLogger(__name__)

SETTINGS_KEY = "siteSettings"


class SettingsStoreError(Exception):
    """The settings record could not be read or written."""


def default_weekly_hours() -> WeeklyHours:
    closed = {"is_open": False, "open": "09:00", "close": "17:00"}
    return WeeklyHours(
        lunes=closed,
        martes=closed,
        miercoles=closed,
        jueves=closed,
        viernes=closed,
        sabado={"is_open": True, "open": "10:00", "close": "22:00"},
        domingo={"is_open": True, "open": "10:00", "close": "20:00"},
    )


def get_site_settings(db: Session) -> SiteSettingsOut:
    try:
        row = db.get(SiteSettings, SETTINGS_KEY)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching site settings")
        raise SettingsStoreError("No se pudo obtener la configuración del sitio.") from exc

    if row is None:
        logger.debug("Site settings not saved yet, returning defaults")
        return SiteSettingsOut(weekly_hours=default_weekly_hours(), promotions=[])

    return SiteSettingsOut(
        weekly_hours=row.weekly_hours or default_weekly_hours(),
        promotions=row.promotions or [],
        last_updated=row.last_updated,
    )


def update_site_settings(db: Session, data: SiteSettingsUpdate) -> SiteSettingsOut:
    """Replace hours and promotions. Creates the record on first save."""
    row = db.get(SiteSettings, SETTINGS_KEY)
    if row is None:
        row = SiteSettings(key=SETTINGS_KEY)
        db.add(row)

    row.weekly_hours = data.weekly_hours.model_dump()
    row.promotions = [p.model_dump() for p in data.promotions]
    row.last_updated = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error updating site settings")
        raise SettingsStoreError("Error al actualizar la configuración.") from exc

    logger.info("Site settings updated (%d promotions)", len(data.promotions))
    return get_site_settings(db)
