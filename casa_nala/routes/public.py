"""
Public Routes for Casa Nala
===========================

Read-only endpoints for the storefront. No authentication required.

Endpoints:
----------
- GET /menu: Menu items ordered by category then name
- GET /settings: Weekly hours and active promotions
- GET /delivery-zone?lat=..&lng=..: Whether a point is inside the delivery radius
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..geo import check_delivery_zone
from ..models import MenuItem
from ..schemas.menu import MenuItemOut
from ..schemas.settings import SiteSettingsOut
from ..services.site_settings import SettingsStoreError, get_site_settings


logger = logging.getLogger(__name__)

public_router = APIRouter(tags=["Public"])


class DeliveryZoneOut(BaseModel):
    latitude: float
    longitude: float
    distance_km: float
    radius_km: float
    within_zone: bool


@public_router.get("/menu", response_model=List[MenuItemOut])
def public_menu(db: Session = Depends(get_db)) -> List[MenuItemOut]:
    items = db.query(MenuItem).order_by(MenuItem.category.asc(), MenuItem.name.asc()).all()
    return [MenuItemOut.model_validate(m) for m in items]


@public_router.get("/settings", response_model=SiteSettingsOut)
def public_settings(db: Session = Depends(get_db)) -> SiteSettingsOut:
    """Opening hours and the promotions currently marked active."""
    try:
        settings = get_site_settings(db)
    except SettingsStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    settings.promotions = [p for p in settings.promotions if p.is_active]
    return settings


@public_router.get("/delivery-zone", response_model=DeliveryZoneOut)
def delivery_zone(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> DeliveryZoneOut:
    check = check_delivery_zone(lat, lng)
    return DeliveryZoneOut(
        latitude=check.latitude,
        longitude=check.longitude,
        distance_km=check.distance_km,
        radius_km=check.radius_km,
        within_zone=check.within_zone,
    )
