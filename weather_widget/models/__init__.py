"""Models package exports."""

from weather_widget.models.state import (
    FetchRequest,
    SearchState,
    UserPreferences,
    ViewState,
)
from weather_widget.models.weather import (
    CURRENT_LOCATION_LABEL,
    CurrentConditions,
    DayForecast,
    ForecastEnvelope,
    HourForecast,
    WeatherSnapshot,
)

__all__ = [
    "CURRENT_LOCATION_LABEL",
    "CurrentConditions",
    "DayForecast",
    "FetchRequest",
    "ForecastEnvelope",
    "HourForecast",
    "SearchState",
    "UserPreferences",
    "ViewState",
    "WeatherSnapshot",
]
