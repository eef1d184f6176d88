"""View model: every display value the widget template binds to."""

from datetime import tzinfo
from typing import Optional, Union

from pydantic import BaseModel, Field

from weather_widget.models.state import ViewState
from weather_widget.models.weather import DayForecast
from weather_widget.services.formatting import (
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

Temperature = Union[int, str]


class WeatherView(BaseModel):
    """Derived display state, rebuilt after every transition."""

    query: str
    loading: bool
    error_message: str = ""
    has_weather_data: bool = False
    has_forecast: bool = False
    has_hourly: bool = False
    show_content: bool = False
    is_day_selected: bool = False
    is_fahrenheit: bool = False

    location_display: str = ""
    coords_display: str = ""
    temp_unit: str = "°C"
    speed_unit: str = "m/s"
    celsius_class: str = "unit-label active"
    fahrenheit_class: str = "unit-label"
    background_class: str = "bg-default"

    description: str = ""
    current_temp: Temperature = "--"
    feels_like: Temperature = "--"
    temp_max: Temperature = "--"
    temp_min: Temperature = "--"
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    current_icon_url: str = ""
    wind_display: str = "--"
    visibility_display: str = "--"
    sunrise_time: str = "--"
    sunset_time: str = "--"

    selected_day: Optional[dict] = None
    selected_day_high: Temperature = "--"
    selected_day_low: Temperature = "--"
    selected_day_wind: str = "--"

    daily: list[dict] = Field(default_factory=list)
    hourly: list[dict] = Field(default_factory=list)

    recent_searches: list[str] = Field(default_factory=list)
    show_recent_searches: bool = False


def selected_day(state: ViewState) -> Optional[DayForecast]:
    """The selected forecast day, or None when nothing valid is selected."""
    index = state.preferences.selected_day_index
    if index is None or state.snapshot is None:
        return None
    if not 0 <= index < len(state.snapshot.daily):
        return None
    return state.snapshot.daily[index]


def build_view(
    state: ViewState,
    use_12_hour_clock: bool = True,
    tz: Optional[tzinfo] = None,
) -> WeatherView:
    """Derive the view model from ``state``.

    Forecast cards are decorated here rather than when the response arrives,
    so toggling units updates them along with the hero section.

    Args:
        state: Current widget state
        use_12_hour_clock: Sunrise/sunset as 'H:MM AM' instead of 'HH:MM'
        tz: Timezone for sunrise/sunset, server local time when None
    """
    fahrenheit = state.preferences.is_fahrenheit
    snapshot = state.snapshot
    current = snapshot.current if snapshot is not None else None
    error = state.search.error or ""
    loading = state.search.loading

    has_weather_data = current is not None and not loading and not error
    daily = snapshot.daily if snapshot is not None else ()
    hourly = (snapshot.hourly or ()) if snapshot is not None else ()
    day = selected_day(state)

    view = WeatherView(
        query=state.search.query,
        loading=loading,
        error_message=error,
        has_weather_data=has_weather_data,
        has_forecast=len(daily) > 0,
        has_hourly=len(hourly) > 0,
        show_content=has_weather_data or loading or bool(error),
        is_day_selected=day is not None,
        is_fahrenheit=fahrenheit,
        location_display=location_display(snapshot),
        coords_display=coords_display(snapshot),
        temp_unit="°F" if fahrenheit else "°C",
        speed_unit="mph" if fahrenheit else "m/s",
        celsius_class="unit-label" if fahrenheit else "unit-label active",
        fahrenheit_class="unit-label active" if fahrenheit else "unit-label",
        background_class=f"bg-{state.background}",
        daily=decorate_daily(daily, fahrenheit),
        hourly=decorate_hourly(hourly, fahrenheit),
        recent_searches=list(state.recent_searches),
        show_recent_searches=state.show_recent_searches,
    )

    if current is not None:
        view.description = current.description
        view.current_temp = format_temperature(current.temp, fahrenheit)
        view.feels_like = format_temperature(current.feels_like, fahrenheit)
        view.temp_max = format_temperature(current.temp_max, fahrenheit)
        view.temp_min = format_temperature(current.temp_min, fahrenheit)
        view.humidity = current.humidity
        view.pressure = current.pressure
        view.current_icon_url = icon_url(current.icon)
        view.wind_display = format_speed(current.wind_speed, fahrenheit)
        view.visibility_display = format_visibility(current.visibility, fahrenheit)
        view.sunrise_time = format_unix_time(current.sunrise, use_12_hour_clock, tz)
        view.sunset_time = format_unix_time(current.sunset, use_12_hour_clock, tz)

    if day is not None:
        view.selected_day = view.daily[state.preferences.selected_day_index]
        view.selected_day_high = format_temperature(day.temp_high, fahrenheit)
        view.selected_day_low = format_temperature(day.temp_low, fahrenheit)
        view.selected_day_wind = format_speed(day.wind_speed, fahrenheit)

    return view
