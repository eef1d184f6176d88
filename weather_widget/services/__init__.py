"""Services package exports."""

from weather_widget.services.forecast_service import ForecastService, ForecastTransportError
from weather_widget.services.logging_service import (
    configure_logging,
    get_logger,
    log_fetch_completed,
)
from weather_widget.services.recent_search_service import RecentSearchService
from weather_widget.services.widget_service import WeatherWidget

__all__ = [
    "ForecastService",
    "ForecastTransportError",
    "RecentSearchService",
    "WeatherWidget",
    "configure_logging",
    "get_logger",
    "log_fetch_completed",
]
