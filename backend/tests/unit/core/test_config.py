"""
Unit tests for environment-driven configuration.
"""

from zoneinfo import ZoneInfo

import pytest

from clinic_booking.core import config


@pytest.mark.unit
class TestConfig:
    def test_clinic_timezone_from_env(self, monkeypatch):
        monkeypatch.setenv("CLINIC_TZ", "Asia/Kolkata")
        assert config.get_clinic_timezone() == ZoneInfo("Asia/Kolkata")

    def test_invalid_timezone_falls_back_to_utc(self, monkeypatch):
        monkeypatch.setenv("CLINIC_TZ", "Mars/Olympus_Mons")
        assert config.get_clinic_timezone() == ZoneInfo("UTC")

    def test_cache_ttl(self, monkeypatch):
        monkeypatch.delenv("SPECIAL_DATE_CACHE_TTL", raising=False)
        assert config.get_special_date_cache_ttl() == 300
        monkeypatch.setenv("SPECIAL_DATE_CACHE_TTL", "0")
        assert config.get_special_date_cache_ttl() == 0
        monkeypatch.setenv("SPECIAL_DATE_CACHE_TTL", "soon")
        assert config.get_special_date_cache_ttl() == 300

    def test_disabled_dates_range(self, monkeypatch):
        monkeypatch.delenv("DISABLED_DATES_RANGE_DAYS", raising=False)
        assert config.get_disabled_dates_range_days() == 60
        monkeypatch.setenv("DISABLED_DATES_RANGE_DAYS", "14")
        assert config.get_disabled_dates_range_days() == 14

    @pytest.mark.parametrize(
        "raw,expected",
        [("PHONE", "phone"), ("both", "both"), ("none", "none"), ("fax", "either")],
    )
    def test_required_contact_policy(self, monkeypatch, raw, expected):
        monkeypatch.setenv("APPOINTMENT_REQUIRED_CONTACT", raw)
        assert config.get_required_contact_policy() == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [("confirmed", "CONFIRMED"), ("SCHEDULED", "SCHEDULED"), ("COMPLETED", "SCHEDULED")],
    )
    def test_initial_status(self, monkeypatch, raw, expected):
        monkeypatch.setenv("APPOINTMENT_INITIAL_STATUS", raw)
        assert config.get_initial_appointment_status() == expected

    def test_webhook_url(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_URL", "  ")
        assert config.get_webhook_url() is None
        monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com")
        assert config.get_webhook_url() == "https://hooks.example.com"
