"""
Delivery zone check.

The restaurant delivers within ``DELIVERY_RADIUS_KM`` of its location,
measured as great-circle distance.
"""

import math
from dataclasses import dataclass

from . import config

EARTH_RADIUS_KM = 6371.0


@dataclass
class DeliveryZoneCheck:
    latitude: float
    longitude: float
    distance_km: float
    radius_km: float

    @property
    def within_zone(self) -> bool:
        return self.distance_km <= self.radius_km


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def check_delivery_zone(latitude: float, longitude: float) -> DeliveryZoneCheck:
    distance = haversine_km(
        config.RESTAURANT_LATITUDE, config.RESTAURANT_LONGITUDE, latitude, longitude
    )
    return DeliveryZoneCheck(
        latitude=latitude,
        longitude=longitude,
        distance_km=round(distance, 3),
        radius_km=config.DELIVERY_RADIUS_KM,
    )


def is_within_delivery_zone(latitude: float, longitude: float) -> bool:
    return check_delivery_zone(latitude, longitude).within_zone
