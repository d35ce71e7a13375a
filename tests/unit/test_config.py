"""Tests for configuration settings."""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from src.core.config import Constants, Settings


@pytest.mark.unit
class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Defaults run the daily check shortly after midnight UTC."""
        monkeypatch.delenv("TIMEZONE", raising=False)
        monkeypatch.delenv("SCHEDULE_CHECK_HOUR", raising=False)
        monkeypatch.delenv("SCHEDULE_CHECK_MINUTE", raising=False)

        settings = Settings(_env_file=None)

        assert settings.timezone == "UTC"
        assert settings.tz == ZoneInfo("UTC")
        assert (settings.schedule_check_hour, settings.schedule_check_minute) == (0, 5)
        assert settings.enable_scheduler is True

    def test_timezone_from_environment(self, monkeypatch):
        """The local calendar timezone can be configured."""
        monkeypatch.setenv("TIMEZONE", "America/New_York")

        settings = Settings(_env_file=None)

        assert settings.tz == ZoneInfo("America/New_York")

    def test_unknown_timezone_rejected(self):
        """Unknown zones fail at load time."""
        with pytest.raises(ValidationError, match="Unknown timezone"):
            Settings(_env_file=None, timezone="Mars/Olympus_Mons")

    def test_schedule_hour_bounds(self):
        """Hours outside 0-23 are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, schedule_check_hour=24)


@pytest.mark.unit
def test_milliseconds_per_day():
    """A day is exactly 86,400,000 ms."""
    assert Constants.MILLISECONDS_PER_DAY == 86_400_000


@pytest.mark.unit
def test_room_palette_has_distinct_colors():
    """The palette holds 17 distinct colors."""
    assert len(set(Constants.ROOM_COLORS)) == len(Constants.ROOM_COLORS) == 17
