"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from weather_widget.config import Settings


class TestDisplayTimezone:
    """Tests for display timezone validation."""

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(display_timezone="Mars/Olympus_Mons")

        assert "Unknown timezone" in str(exc_info.value)

    def test_malformed_timezone_rejected(self):
        with pytest.raises(ValidationError):
            Settings(display_timezone="../etc/passwd")

    def test_blank_timezone_means_server_local(self):
        assert Settings(display_timezone="").display_timezone is None

    def test_unset_by_default(self):
        assert Settings().display_timezone is None


class TestGeolocation:
    """Tests for the fixed geolocation switch."""

    def test_unsupported_without_coordinates(self):
        assert Settings(geolocation_lat=33.2).geolocation_supported is False

    def test_supported_with_both_coordinates(self):
        assert Settings(geolocation_lat=33.2, geolocation_lon=-96.6).geolocation_supported is True
