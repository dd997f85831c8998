"""
Site Settings Schemas for Casa Nala
===================================

Weekly opening hours and promotions, stored as a single settings record.

Endpoint Coverage:
------------------
- GET /settings: Public hours and active promotions
- GET /admin/settings: Full settings for editing
- PUT /admin/settings: Replace hours and promotions

Hours Format:
-------------
Times are 24h "HH:MM" strings. A day marked open must have both an opening
and a closing time; closed days may omit them.

Example:
--------
    {
        "weekly_hours": {
            "lunes": {"is_open": false, "open": "09:00", "close": "17:00"},
            ...
            "domingo": {"is_open": true, "open": "10:00", "close": "20:00"}
        },
        "promotions": [
            {"id": "2x1-martes", "description": "2x1 en tacos los martes", "is_active": true}
        ]
    }
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

WEEK_DAYS = ("lunes", "martes", "miercoles", "jueves", "viernes", "sabado", "domingo")

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class DayHours(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(validation_alias=AliasChoices("isOpen", "is_open"))
    open: Optional[str] = None
    close: Optional[str] = None

    @field_validator("open", "close")
    @classmethod
    def valid_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not _TIME_RE.match(v):
            raise ValueError("Formato de hora inválido (HH:MM)")
        return v

    @model_validator(mode="after")
    def open_days_need_times(self) -> "DayHours":
        if self.is_open and not (self.open and self.close):
            raise ValueError("Se requiere hora de apertura y cierre si el día está abierto")
        return self


class WeeklyHours(BaseModel):
    lunes: DayHours
    martes: DayHours
    miercoles: DayHours
    jueves: DayHours
    viernes: DayHours
    sabado: DayHours
    domingo: DayHours


class Promotion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    description: str = Field(min_length=5)
    start_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("endDate", "end_date"))
    is_active: bool = Field(validation_alias=AliasChoices("isActive", "is_active"))


class SiteSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weekly_hours: WeeklyHours = Field(validation_alias=AliasChoices("weeklyHours", "weekly_hours"))
    promotions: List[Promotion] = []


class SiteSettingsOut(BaseModel):
    weekly_hours: WeeklyHours
    promotions: List[Promotion]
    last_updated: Optional[datetime] = None


class UpdateResponse(BaseModel):
    success: bool
    message: str
