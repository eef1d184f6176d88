"""Unit tests for display formatting."""

from datetime import timezone

import pytest

from weather_widget.models.weather import DayForecast, HourForecast, WeatherSnapshot
from weather_widget.services.formatting import (
    classify_background,
    coords_display,
    decorate_daily,
    decorate_hourly,
    format_speed,
    format_temperature,
    format_unix_time,
    format_visibility,
    icon_url,
    location_display,
)


class TestFormatTemperature:
    """Tests for temperature display."""

    def test_fahrenheit_rounds_converted_value(self):
        # 15.2°C = 59.36°F
        assert format_temperature(15.2, True) == 59

    def test_celsius_rounds(self):
        assert format_temperature(15.2, False) == 15

    def test_missing_value_is_placeholder(self):
        assert format_temperature(None, True) == "--"
        assert format_temperature(None, False) == "--"

    def test_zero_is_a_real_temperature(self):
        assert format_temperature(0, False) == 0
        assert format_temperature(0, True) == 32

    def test_ties_round_away_from_zero(self):
        assert format_temperature(2.5, False) == 3
        assert format_temperature(-2.5, False) == -3
        # -17.5°C = 0.5°F
        assert format_temperature(-17.5, True) == 1


class TestFormatSpeed:
    """Tests for wind speed display."""

    def test_imperial_converts_to_mph(self):
        # 4.5 m/s * 2.23694 = 10.066 mph
        assert format_speed(4.5, True) == "10.1 mph"

    def test_imperial_zero(self):
        assert format_speed(0, True) == "0.0 mph"

    def test_metric_passes_raw_value(self):
        assert format_speed(4.5, False) == "4.5 m/s"
        assert format_speed(3.25, False) == "3.25 m/s"

    def test_metric_whole_number_has_no_decimal(self):
        assert format_speed(4.0, False) == "4 m/s"
        assert format_speed(7, False) == "7 m/s"

    def test_missing_value_is_placeholder(self):
        assert format_speed(None, True) == "--"
        assert format_speed(None, False) == "--"


class TestFormatVisibility:
    """Tests for visibility display."""

    def test_metric_km_one_decimal(self):
        assert format_visibility(10000, False) == "10.0 km"
        assert format_visibility(1234, False) == "1.2 km"

    def test_imperial_converts_rounded_km(self):
        # 10.0 km * 0.621371 = 6.21 mi
        assert format_visibility(10000, True) == "6.2 mi"
        # 1.2 km (not 1.234) * 0.621371 = 0.746 mi
        assert format_visibility(1234, True) == "0.7 mi"

    def test_half_tenth_rounds_up(self):
        assert format_visibility(1250, False) == "1.3 km"

    @pytest.mark.parametrize("value", [None, 0])
    def test_falsy_is_placeholder(self, value):
        assert format_visibility(value, False) == "--"
        assert format_visibility(value, True) == "--"


class TestFormatUnixTime:
    """Tests for sunrise/sunset clock formatting."""

    # 2024-02-25 09:00 UTC and 20:40 UTC
    SUNRISE = 1708851600
    SUNSET = 1708893600
    MIDNIGHT = 1708819200
    NOON = 1708862400

    def test_twelve_hour_clock(self):
        assert format_unix_time(self.SUNRISE, True, timezone.utc) == "9:00 AM"
        assert format_unix_time(self.SUNSET, True, timezone.utc) == "8:40 PM"

    def test_twelve_hour_midnight_and_noon(self):
        assert format_unix_time(self.MIDNIGHT, True, timezone.utc) == "12:00 AM"
        assert format_unix_time(self.NOON, True, timezone.utc) == "12:00 PM"

    def test_twenty_four_hour_clock_is_zero_padded(self):
        assert format_unix_time(self.SUNRISE, False, timezone.utc) == "09:00"
        assert format_unix_time(self.SUNSET, False, timezone.utc) == "20:40"
        assert format_unix_time(self.MIDNIGHT, False, timezone.utc) == "00:00"

    @pytest.mark.parametrize("value", [None, 0])
    def test_falsy_is_placeholder(self, value):
        assert format_unix_time(value, True, timezone.utc) == "--"
        assert format_unix_time(value, False, timezone.utc) == "--"


class TestClassifyBackground:
    """Tests for background theme selection."""

    def test_night_overrides_sunny_code(self):
        assert classify_background(1, False) == "night"

    def test_missing_day_flag_is_night(self):
        assert classify_background(0, None) == "night"

    @pytest.mark.parametrize(
        "code,expected",
        [
            (0, "sunny"),
            (1, "sunny"),
            (2, "cloudy"),
            (3, "cloudy"),
            (51, "rainy"),
            (61, "rainy"),
            (67, "rainy"),
            (80, "rainy"),
            (82, "rainy"),
            (71, "snowy"),
            (77, "snowy"),
            (85, "snowy"),
            (86, "snowy"),
            (95, "stormy"),
            (99, "stormy"),
            (45, "default"),
            (68, "default"),
            (83, "default"),
            (100, "default"),
        ],
    )
    def test_daytime_codes(self, code, expected):
        assert classify_background(code, True) == expected

    def test_missing_code_by_day_is_default(self):
        assert classify_background(None, True) == "default"


class TestIconsAndDecoration:
    """Tests for icon URLs and forecast decoration."""

    def test_icon_url(self):
        assert icon_url("03d") == "https://openweathermap.org/img/wn/03d@2x.png"

    def test_icon_url_empty(self):
        assert icon_url("") == ""
        assert icon_url(None) == ""

    def test_decorate_daily(self):
        days = [
            DayForecast(day_name="Tue", temp_high=16.0, temp_low=13.0, icon="04d"),
            DayForecast(day_name="Wed", temp_high=None, temp_low=14.0, icon=""),
        ]

        cards = decorate_daily(days, is_fahrenheit=True)

        assert cards[0]["day_name"] == "Tue"
        assert cards[0]["icon_url"] == "https://openweathermap.org/img/wn/04d@2x.png"
        assert cards[0]["temp_high_display"] == 61
        assert cards[0]["temp_low_display"] == 55
        assert cards[1]["icon_url"] == ""
        assert cards[1]["temp_high_display"] == "--"

    def test_decorate_hourly(self):
        hours = [HourForecast(hour_label="3 PM", temp=20.4, icon="01d")]

        entries = decorate_hourly(hours, is_fahrenheit=False)

        assert entries[0]["hour_label"] == "3 PM"
        assert entries[0]["temp_display"] == 20
        assert entries[0]["icon_url"] == "https://openweathermap.org/img/wn/01d@2x.png"


class TestLocationDisplay:
    """Tests for location and coordinate text."""

    def test_name_and_country(self):
        snapshot = WeatherSnapshot(location_name="San Francisco", country="US")
        assert location_display(snapshot) == "San Francisco, US"

    def test_name_only(self):
        assert location_display(WeatherSnapshot(location_name="Atlantis")) == "Atlantis"

    def test_no_snapshot(self):
        assert location_display(None) == ""
        assert coords_display(None) == ""

    def test_western_longitude(self):
        snapshot = WeatherSnapshot(lat=37.77, lon=-122.42)
        assert coords_display(snapshot) == "37.77°N, 122.42°W"

    def test_eastern_longitude(self):
        snapshot = WeatherSnapshot(lat=51.5072, lon=0.0)
        assert coords_display(snapshot) == "51.51°N, 0.00°E"

    def test_southern_latitude_keeps_north_suffix(self):
        snapshot = WeatherSnapshot(lat=-33.8688, lon=151.2093)
        assert coords_display(snapshot) == "-33.87°N, 151.21°E"

    def test_equator_is_treated_as_missing(self):
        snapshot = WeatherSnapshot(lat=0.0, lon=32.58)
        assert coords_display(snapshot) == ""
