"""Widget controller: runs state transitions and the provider calls they request."""

import time
from typing import Callable, Optional, Protocol
from zoneinfo import ZoneInfo

import structlog

from weather_widget.config import Settings, get_settings
from weather_widget.models.state import FetchRequest, UserPreferences, ViewState
from weather_widget.services import reducer
from weather_widget.services.forecast_service import (
    ForecastProvider,
    ForecastService,
    ForecastTransportError,
)
from weather_widget.services.logging_service import log_fetch_completed
from weather_widget.services.recent_search_service import RecentSearchService
from weather_widget.services.view_service import WeatherView, build_view

logger = structlog.get_logger(__name__)

StateListener = Callable[[ViewState], None]


class GeolocationError(Exception):
    """The position could not be determined (denied, timed out, unavailable)."""


class GeolocationSource(Protocol):
    async def current_position(self) -> tuple[float, float]: ...


class FixedGeolocation:
    """Geolocation source that always reports one configured position."""

    def __init__(self, lat: float, lon: float):
        self.lat = lat
        self.lon = lon

    async def current_position(self) -> tuple[float, float]:
        return self.lat, self.lon


def build_geolocation(settings: Settings) -> Optional[GeolocationSource]:
    """Fixed source from settings, or None when no position is configured."""
    if not settings.geolocation_supported:
        return None
    return FixedGeolocation(settings.geolocation_lat, settings.geolocation_lon)


class WeatherWidget:
    """One widget session.

    Holds the current ``ViewState`` and replaces it after every transition,
    then notifies subscribers. Provider and storage failures end up in the
    state's error field; nothing raised by a collaborator escapes.
    """

    def __init__(
        self,
        provider: Optional[ForecastProvider] = None,
        recent_searches: Optional[RecentSearchService] = None,
        geolocation: Optional[GeolocationSource] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.provider = provider if provider is not None else ForecastService()
        self.recent_searches = (
            recent_searches if recent_searches is not None else RecentSearchService()
        )
        self.geolocation = geolocation
        self._listeners: list[StateListener] = []
        self._state = ViewState(
            preferences=UserPreferences(is_fahrenheit=self.settings.default_fahrenheit),
        )

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with the new state after each transition.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, state: ViewState) -> ViewState:
        previous = self._state
        self._state = state
        if state.recent_searches != previous.recent_searches:
            self.recent_searches.save(state.recent_searches)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(
                    "widget_listener_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return state

    async def start(self) -> ViewState:
        """Load recent searches and run the default search when enabled."""
        self._state = reducer.load_recent_searches(self._state, self.recent_searches.load())
        self._apply(reducer.set_query(self._state, self.settings.default_query))
        if self.settings.search_on_start:
            await self.search()
        return self._state

    def set_query(self, query: str) -> ViewState:
        return self._apply(reducer.set_query(self._state, query))

    async def search(self, query: Optional[str] = None) -> ViewState:
        """Search for ``query`` (or the current search box text).

        Blank queries do nothing and make no provider call.
        """
        if query is not None:
            self.set_query(query)
        state, request = reducer.begin_search(self._state, self._state.search.query)
        if request is None:
            return self._state
        self._apply(state)
        logger.info("forecast_search_started", query=request.query, request_id=request.request_id)
        return await self._run_fetch(request)

    async def search_recent(self, query: str) -> ViewState:
        """Re-run a search picked from the recent-search dropdown."""
        if not query:
            return self._state
        self._apply(reducer.dismiss_recent_searches(self._state))
        return await self.search(query)

    async def fetch_by_coordinates(self, lat: float, lon: float) -> ViewState:
        state, request = reducer.begin_coordinates_fetch(self._state, lat, lon)
        self._apply(state)
        logger.info("forecast_coordinates_started", request_id=request.request_id)
        return await self._run_fetch(request)

    async def _run_fetch(self, request: FetchRequest) -> ViewState:
        """Call the provider for ``request`` and apply the outcome."""
        discard_stale = self.settings.discard_stale_responses
        started = time.perf_counter()
        try:
            if request.by_coordinates:
                envelope = await self.provider.get_forecast_by_coordinates(
                    request.lat, request.lon
                )
            else:
                envelope = await self.provider.get_forecast(request.query)
        except Exception as e:
            state = self._apply_failure(e, request)
        else:
            if request.by_coordinates:
                state = reducer.complete_coordinates_fetch(
                    self._state, envelope, request, discard_stale
                )
            else:
                state = reducer.complete_search(self._state, envelope, request, discard_stale)
            self._apply(state)
        log_fetch_completed(request, state, (time.perf_counter() - started) * 1000)
        return state

    async def locate(self) -> ViewState:
        """Look up the device position and fetch the forecast there."""
        if self.geolocation is None:
            return self._apply(reducer.locate_unsupported(self._state))

        self._apply(reducer.begin_locate(self._state))
        try:
            lat, lon = await self.geolocation.current_position()
        except Exception as e:
            logger.warning(
                "geolocation_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._apply(reducer.locate_failed(self._state))
        return await self.fetch_by_coordinates(lat, lon)

    def _apply_failure(self, error: Exception, request: FetchRequest) -> ViewState:
        message = error.message if isinstance(error, ForecastTransportError) else None
        logger.warning(
            "forecast_request_failed",
            request_id=request.request_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        return self._apply(
            reducer.fail_search(
                self._state, message, request, self.settings.discard_stale_responses
            )
        )

    def select_day(self, index: int) -> ViewState:
        return self._apply(reducer.select_day(self._state, index))

    def clear_selection(self) -> ViewState:
        return self._apply(reducer.clear_selection(self._state))

    def toggle_units(self) -> ViewState:
        return self._apply(reducer.toggle_units(self._state))

    def focus_search(self) -> ViewState:
        return self._apply(reducer.focus_search(self._state))

    def dismiss_recent_searches(self) -> ViewState:
        return self._apply(reducer.dismiss_recent_searches(self._state))

    def view_timezone(self) -> Optional[ZoneInfo]:
        """Configured display timezone, None for server local time."""
        if not self.settings.display_timezone:
            return None
        return ZoneInfo(self.settings.display_timezone)

    def view(self) -> WeatherView:
        """Current display values."""
        return build_view(self._state, self.settings.use_12_hour_clock, self.view_timezone())

    async def close(self) -> None:
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()
