"""Pytest configuration and fixtures."""

import copy
import os
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Set test environment variables before importing the package
os.environ.setdefault("RECENT_SEARCHES_BACKEND", "memory")
os.environ.setdefault("SEARCH_ON_START", "false")
os.environ.setdefault("FORECAST_API_BASE_URL", "http://proxy.test/weather")

from weather_widget.config import Settings
from weather_widget.models.weather import ForecastEnvelope
from weather_widget.services.recent_search_service import MemoryStorage, RecentSearchService
from weather_widget.services.widget_service import WeatherWidget

MOCK_SUCCESS = {
    "success": True,
    "locationName": "San Francisco",
    "country": "US",
    "lat": 37.77,
    "lon": -122.42,
    "current": {
        "temp": 15.2,
        "feelsLike": 14.5,
        "tempMin": 13.0,
        "tempMax": 17.1,
        "humidity": 72,
        "windSpeed": 4.5,
        "description": "scattered clouds",
        "icon": "03d",
        "main": "Clouds",
        "pressure": 1015,
        "visibility": 10000,
        "sunrise": 1708851600,
        "sunset": 1708893600,
    },
    "daily": [
        {
            "dayName": "Tue",
            "dateStr": "Feb 25",
            "tempHigh": 16.0,
            "tempLow": 13.0,
            "description": "overcast clouds",
            "icon": "04d",
            "main": "Clouds",
            "humidity": 70,
            "windSpeed": 3.5,
            "pop": 10,
        },
        {
            "dayName": "Wed",
            "dateStr": "Feb 26",
            "tempHigh": 18.0,
            "tempLow": 14.0,
            "description": "clear sky",
            "icon": "01d",
            "main": "Clear",
            "humidity": 65,
            "windSpeed": 4.0,
            "pop": 0,
        },
    ],
}

MOCK_ERROR = {
    "success": False,
    "errorMessage": 'Location not found. Try "City, Country" or a zip code.',
}


@pytest.fixture
def success_payload() -> dict:
    """Raw proxy payload for San Francisco (fresh copy per test)."""
    return copy.deepcopy(MOCK_SUCCESS)


@pytest.fixture
def success_envelope(success_payload) -> ForecastEnvelope:
    return ForecastEnvelope.model_validate(success_payload)


@pytest.fixture
def error_envelope() -> ForecastEnvelope:
    return ForecastEnvelope.model_validate(MOCK_ERROR)


@pytest.fixture
def test_settings() -> Settings:
    """Settings for widget tests: Celsius, no startup search, in-memory storage."""
    return Settings(
        default_fahrenheit=False,
        search_on_start=False,
        discard_stale_responses=False,
        recent_searches_backend="memory",
    )


@pytest.fixture
def mock_settings() -> Generator[MagicMock, None, None]:
    """Patch settings for the forecast client."""
    with patch("weather_widget.services.forecast_service.get_settings") as mock:
        settings = MagicMock()
        settings.forecast_api_base_url = "http://proxy.test/weather"
        settings.forecast_api_key = "test-api-key"
        settings.forecast_api_timeout = 5
        mock.return_value = settings
        yield settings


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def recent_search_service(memory_storage) -> RecentSearchService:
    return RecentSearchService(storage=memory_storage, key="weather_recent_searches")


@pytest.fixture
def mock_provider(success_envelope) -> AsyncMock:
    """Forecast provider that answers every lookup with San Francisco."""
    provider = AsyncMock()
    provider.get_forecast.return_value = success_envelope
    provider.get_forecast_by_coordinates.return_value = success_envelope
    return provider


@pytest.fixture
def widget(mock_provider, recent_search_service, test_settings) -> WeatherWidget:
    return WeatherWidget(
        provider=mock_provider,
        recent_searches=recent_search_service,
        settings=test_settings,
    )
