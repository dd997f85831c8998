"""
Tests for the site settings service.
"""
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from casa_nala.models import SiteSettings
from casa_nala.schemas.settings import WEEK_DAYS, DayHours, SiteSettingsUpdate
from casa_nala.services.site_settings import (
    SETTINGS_KEY,
    SettingsStoreError,
    default_weekly_hours,
    get_site_settings,
    update_site_settings,
)


def _update(promotions=()):
    return SiteSettingsUpdate(
        weekly_hours={day: {"is_open": True, "open": "08:00", "close": "18:00"} for day in WEEK_DAYS},
        promotions=list(promotions),
    )


def test_default_hours_open_weekends_only():
    hours = default_weekly_hours()
    assert [getattr(hours, day).is_open for day in WEEK_DAYS] == [False] * 5 + [True, True]
    assert hours.domingo.close == "20:00"


def test_get_returns_defaults_without_row(db_session):
    settings = get_site_settings(db_session)
    assert settings.weekly_hours == default_weekly_hours()
    assert settings.promotions == []
    assert db_session.get(SiteSettings, SETTINGS_KEY) is None


def test_first_update_creates_single_row(db_session):
    update_site_settings(db_session, _update())
    update_site_settings(db_session, _update([{"id": "p1", "description": "Postre gratis", "is_active": True}]))

    assert db_session.query(SiteSettings).count() == 1
    settings = get_site_settings(db_session)
    assert settings.weekly_hours.lunes.open == "08:00"
    assert [p.id for p in settings.promotions] == ["p1"]
    assert settings.last_updated is not None


def test_update_replaces_promotions(db_session):
    update_site_settings(db_session, _update([
        {"id": "a", "description": "Promo uno", "isActive": True},
        {"id": "b", "description": "Promo dos", "isActive": False, "startDate": "2026-12-01"},
    ]))
    update_site_settings(db_session, _update([]))

    assert get_site_settings(db_session).promotions == []


def test_store_failure_on_save(db_session):
    with patch.object(db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("x"))):
        with pytest.raises(SettingsStoreError) as exc_info:
            update_site_settings(db_session, _update())
    assert str(exc_info.value) == "Error al actualizar la configuración."


def test_store_failure_on_read(db_session):
    with patch.object(db_session, "get", side_effect=OperationalError("SELECT", {}, Exception("x"))):
        with pytest.raises(SettingsStoreError):
            get_site_settings(db_session)


class TestDayHours:

    def test_closed_day_may_omit_times(self):
        day = DayHours(is_open=False)
        assert day.open is None and day.close is None

    def test_open_day_needs_both_times(self):
        with pytest.raises(ValidationError):
            DayHours(is_open=True, open="10:00")

    @pytest.mark.parametrize("value", ["24:00", "7:30", "10:60", "10h"])
    def test_rejects_bad_time(self, value):
        with pytest.raises(ValidationError):
            DayHours(is_open=True, open=value, close="20:00")

    def test_camel_case_alias(self):
        assert DayHours.model_validate({"isOpen": True, "open": "00:00", "close": "23:59"}).is_open
