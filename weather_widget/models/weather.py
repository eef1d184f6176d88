"""Forecast provider payload models.

The proxy answers with camelCase keys (``locationName``, ``feelsLike``,
``errorMessage``); every model accepts those as well as the snake_case field
names. Explicit nulls take the field default and numeric fields are not
range-checked. Models are frozen so a snapshot can never be partially updated.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

CURRENT_LOCATION_LABEL = "Current Location"


class ProviderModel(BaseModel):
    """Base for provider payload models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class CurrentConditions(ProviderModel):
    """Current conditions at the resolved location."""

    temp: Optional[float] = Field(None, description="Temperature in Celsius")
    feels_like: Optional[float] = Field(None, description="Feels-like temperature in Celsius")
    temp_min: Optional[float] = Field(None, description="Minimum temperature in Celsius")
    temp_max: Optional[float] = Field(None, description="Maximum temperature in Celsius")
    humidity: Optional[float] = Field(None, description="Humidity percentage")
    wind_speed: Optional[float] = Field(None, description="Wind speed in m/s")
    description: str = Field("", description="Condition text (e.g., 'scattered clouds')")
    icon: str = Field("", description="Provider icon code (e.g., '03d')")
    main: str = Field("", description="Condition category (e.g., 'Clouds')")
    pressure: Optional[float] = Field(None, description="Pressure in hPa")
    visibility: Optional[float] = Field(None, description="Visibility in meters")
    sunrise: Optional[int] = Field(None, description="Sunrise, Unix seconds")
    sunset: Optional[int] = Field(None, description="Sunset, Unix seconds")
    weather_code: Optional[int] = Field(None, description="Numeric condition code")
    is_day: Optional[bool] = Field(None, description="Whether the sun is up")


class DayForecast(ProviderModel):
    """Forecast for a single day."""

    day_name: str = Field("", description="Short weekday name (e.g., 'Tue')")
    date_str: str = Field("", description="Display date (e.g., 'Feb 25')")
    temp_high: Optional[float] = Field(None, description="High temperature in Celsius")
    temp_low: Optional[float] = Field(None, description="Low temperature in Celsius")
    description: str = ""
    icon: str = ""
    main: str = ""
    humidity: Optional[float] = Field(None, description="Humidity percentage")
    wind_speed: Optional[float] = Field(None, description="Wind speed in m/s")
    pop: Optional[float] = Field(None, description="Precipitation probability")


class HourForecast(ProviderModel):
    """Forecast for a single hour slot."""

    hour_label: str = Field("", description="Display label (e.g., '3 PM')")
    temp: Optional[float] = Field(None, description="Temperature in Celsius")
    icon: str = ""
    description: str = ""


class WeatherSnapshot(ProviderModel):
    """Result of the last successful fetch, replaced as a whole."""

    location_name: str = ""
    country: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    current: Optional[CurrentConditions] = None
    daily: tuple[DayForecast, ...] = ()
    hourly: Optional[tuple[HourForecast, ...]] = None


class ForecastEnvelope(WeatherSnapshot):
    """Discriminated provider response: success with data, or an error message."""

    success: bool = False
    error_message: Optional[str] = None

    def to_snapshot(self) -> WeatherSnapshot:
        """Strip the envelope fields off a successful response."""
        return WeatherSnapshot.model_validate(
            self.model_dump(exclude={"success", "error_message"})
        )
