"""FastAPI dependencies for the widget session."""

from typing import Optional

from weather_widget.config import get_settings
from weather_widget.services.widget_service import WeatherWidget, build_geolocation

_widget: Optional[WeatherWidget] = None


def get_widget() -> WeatherWidget:
    """Get or create the process-wide widget session."""
    global _widget

    if _widget is None:
        settings = get_settings()
        _widget = WeatherWidget(
            geolocation=build_geolocation(settings),
            settings=settings,
        )
    return _widget


async def close_widget() -> None:
    """Close the widget's provider client and drop the session."""
    global _widget

    if _widget is not None:
        await _widget.close()
        _widget = None
