"""Widget endpoints: each mirrors one user action and returns the new view."""

from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from weather_widget.api.dependencies import get_widget
from weather_widget.services.view_service import WeatherView, build_view
from weather_widget.services.widget_service import WeatherWidget

router = APIRouter()
widget_router = APIRouter(prefix="/widget", tags=["Widget"])


class SearchRequest(BaseModel):
    """Search box submission; omit ``query`` to search the current text."""

    query: Optional[str] = Field(None, max_length=200)


class CoordinatesRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


def _render(widget: WeatherWidget, clock: Optional[Literal["12h", "24h"]] = None) -> WeatherView:
    if clock is None:
        return widget.view()
    return build_view(widget.state, clock == "12h", widget.view_timezone())


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Status and timestamp in ISO8601 format
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@widget_router.get("/view")
async def get_view(
    clock: Optional[Literal["12h", "24h"]] = Query(default=None, description="Sunrise/sunset clock"),
    widget: WeatherWidget = Depends(get_widget),
) -> WeatherView:
    """Current display values without changing any state."""
    return _render(widget, clock)


@widget_router.post("/search")
async def search(
    request: SearchRequest,
    widget: WeatherWidget = Depends(get_widget),
) -> WeatherView:
    """Search by free-text location; blank queries leave the view unchanged."""
    await widget.search(request.query)
    return _render(widget)


@widget_router.post("/locate")
async def locate(widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    """Search at the configured device position."""
    await widget.locate()
    return _render(widget)


@widget_router.post("/coordinates")
async def fetch_by_coordinates(
    request: CoordinatesRequest,
    widget: WeatherWidget = Depends(get_widget),
) -> WeatherView:
    await widget.fetch_by_coordinates(request.lat, request.lon)
    return _render(widget)


@widget_router.post("/days/{index}")
async def select_day(index: int, widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    """Open the detail panel for a forecast day; unknown days are ignored."""
    widget.select_day(index)
    return _render(widget)


@widget_router.delete("/days/selection")
async def clear_selection(widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    widget.clear_selection()
    return _render(widget)


@widget_router.post("/units/toggle")
async def toggle_units(widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    widget.toggle_units()
    return _render(widget)


@widget_router.get("/recent-searches")
async def list_recent_searches(widget: WeatherWidget = Depends(get_widget)) -> dict:
    return {"items": list(widget.state.recent_searches)}


@widget_router.post("/recent-searches/focus")
async def focus_search(widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    """Search box focused: show the recent-search dropdown if non-empty."""
    widget.focus_search()
    return _render(widget)


@widget_router.post("/recent-searches/dismiss")
async def dismiss_recent_searches(widget: WeatherWidget = Depends(get_widget)) -> WeatherView:
    widget.dismiss_recent_searches()
    return _render(widget)


@widget_router.post("/recent-searches/search")
async def search_recent(
    request: SearchRequest,
    widget: WeatherWidget = Depends(get_widget),
) -> WeatherView:
    """Re-run a search picked from the dropdown and close it."""
    await widget.search_recent(request.query or "")
    return _render(widget)
