"""Display formatting for weather values.

All inputs are the provider's metric units (Celsius, m/s, meters, Unix
seconds). Missing values render as ``PLACEHOLDER``.
"""

from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from weather_widget.models.weather import DayForecast, HourForecast, WeatherSnapshot

ICON_BASE_URL = "https://openweathermap.org/img/wn/"
ICON_SUFFIX = "@2x.png"
PLACEHOLDER = "--"

MPS_TO_MPH = 2.23694
KM_TO_MI = 0.621371

# Condition code ranges per background theme, checked in order after night.
BACKGROUND_RULES: tuple[tuple[str, tuple[tuple[int, int], ...]], ...] = (
    ("sunny", ((0, 1),)),
    ("cloudy", ((2, 3),)),
    ("rainy", ((51, 67), (80, 82))),
    ("snowy", ((71, 77), (85, 86))),
    ("stormy", ((95, 99),)),
)

Number = Union[int, float]


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _to_fixed(value: float, digits: int) -> str:
    """Fixed-point text of the exact binary value, ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return f"{Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP):f}"


def _number_text(value: Number) -> str:
    """Plain number text: whole floats drop the trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_temperature(celsius: Optional[Number], is_fahrenheit: bool) -> Union[int, str]:
    """Whole-degree temperature in the active unit, or the placeholder."""
    if celsius is None:
        return PLACEHOLDER
    if is_fahrenheit:
        return _round_half_away(celsius * 9 / 5 + 32)
    return _round_half_away(celsius)


def format_speed(meters_per_second: Optional[Number], is_fahrenheit: bool) -> str:
    """Wind speed as 'N.N mph' or the raw 'N m/s'."""
    if meters_per_second is None:
        return PLACEHOLDER
    if is_fahrenheit:
        return f"{_to_fixed(meters_per_second * MPS_TO_MPH, 1)} mph"
    return f"{_number_text(meters_per_second)} m/s"


def format_visibility(meters: Optional[Number], is_fahrenheit: bool) -> str:
    """Visibility in km, or in miles converted from the rounded km value.

    Zero visibility renders as the placeholder.
    """
    if not meters:
        return PLACEHOLDER
    km = _to_fixed(meters / 1000, 1)
    if is_fahrenheit:
        return f"{_to_fixed(float(km) * KM_TO_MI, 1)} mi"
    return f"{km} km"


def format_unix_time(
    seconds: Optional[int],
    with_am_pm: bool = True,
    tz: Optional[tzinfo] = None,
) -> str:
    """Clock time of a Unix timestamp.

    Args:
        seconds: Unix timestamp; zero or None renders the placeholder
        with_am_pm: 'H:MM AM/PM' when True, zero-padded 'HH:MM' otherwise
        tz: Display timezone, server local time when None

    Returns:
        Formatted time string
    """
    if not seconds:
        return PLACEHOLDER
    moment = datetime.fromtimestamp(seconds, tz=tz)
    if not with_am_pm:
        return f"{moment.hour:02d}:{moment.minute:02d}"
    suffix = "PM" if moment.hour >= 12 else "AM"
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment.minute:02d} {suffix}"


def classify_background(weather_code: Optional[int], is_day: Optional[bool]) -> str:
    """Theme tag for the widget background.

    Night wins over every condition code; unknown codes fall back to 'default'.
    """
    if not is_day:
        return "night"
    if weather_code is None:
        return "default"
    for theme, ranges in BACKGROUND_RULES:
        if any(low <= weather_code <= high for low, high in ranges):
            return theme
    return "default"


def icon_url(icon: Optional[str]) -> str:
    """Full icon URL for a provider icon code."""
    if not icon:
        return ""
    return ICON_BASE_URL + icon + ICON_SUFFIX


def decorate_daily(days: Iterable[DayForecast], is_fahrenheit: bool) -> list[dict]:
    """Forecast cards: day fields plus icon URL and high/low display text."""
    return [
        {
            **day.model_dump(),
            "icon_url": icon_url(day.icon),
            "temp_high_display": format_temperature(day.temp_high, is_fahrenheit),
            "temp_low_display": format_temperature(day.temp_low, is_fahrenheit),
        }
        for day in days
    ]


def decorate_hourly(hours: Iterable[HourForecast], is_fahrenheit: bool) -> list[dict]:
    """Hourly strip entries: hour fields plus icon URL and temperature text."""
    return [
        {
            **hour.model_dump(),
            "icon_url": icon_url(hour.icon),
            "temp_display": format_temperature(hour.temp, is_fahrenheit),
        }
        for hour in hours
    ]


def location_display(snapshot: Optional[WeatherSnapshot]) -> str:
    if snapshot is None:
        return ""
    if snapshot.country:
        return f"{snapshot.location_name}, {snapshot.country}"
    return snapshot.location_name


def coords_display(snapshot: Optional[WeatherSnapshot]) -> str:
    """Coordinates as '37.77°N, 122.42°W'.

    A latitude of exactly 0 is treated as missing and renders nothing.
    """
    if snapshot is None or not snapshot.lat:
        return ""
    lon = snapshot.lon or 0.0
    hemisphere = "E" if lon >= 0 else "W"
    return f"{_to_fixed(snapshot.lat, 2)}°N, {_to_fixed(abs(lon), 2)}°{hemisphere}"
