"""Widget state transitions.

Every function takes the current ``ViewState`` and returns a new one; none of
them perform I/O. Transitions that need a forecast fetch also return the
``FetchRequest`` the caller must run and later hand back to the matching
completion function.

In-flight requests are never cancelled. With ``discard_stale=False`` every
completion is applied, so when two searches overlap the response that settles
last wins even if it belongs to the older request. ``discard_stale=True``
ignores completions whose request id is not the latest issued one.
"""

from typing import Optional

from weather_widget.models.state import FetchRequest, SearchState, ViewState
from weather_widget.models.weather import CURRENT_LOCATION_LABEL, ForecastEnvelope
from weather_widget.services.formatting import classify_background
from weather_widget.services.recent_search_service import add_recent_search

DOMAIN_ERROR_FALLBACK = "Something went wrong."
TRANSPORT_ERROR_FALLBACK = "Failed to fetch weather data."
GEOLOCATION_DENIED = "Unable to retrieve your location. Please check browser permissions."
GEOLOCATION_UNSUPPORTED = "Geolocation is not supported by your browser."


def _start_loading(state: ViewState, query: str) -> ViewState:
    return state.model_copy(
        update={
            "search": SearchState(query=query, loading=True, error=None),
            "preferences": state.preferences.model_copy(update={"selected_day_index": None}),
            "snapshot": None,
            "request_id": state.request_id + 1,
        }
    )


def _is_stale(state: ViewState, request: FetchRequest, discard_stale: bool) -> bool:
    return discard_stale and request.request_id != state.request_id


def _failed(state: ViewState, message: str) -> ViewState:
    return state.model_copy(
        update={
            "search": SearchState(query=state.search.query, loading=False, error=message),
            "snapshot": None,
        }
    )


def set_query(state: ViewState, query: str) -> ViewState:
    """Update the search box text without searching."""
    return state.model_copy(update={"search": state.search.model_copy(update={"query": query})})


def begin_search(state: ViewState, query: str) -> tuple[ViewState, Optional[FetchRequest]]:
    """Start a search for ``query``.

    Blank queries are ignored: the state comes back unchanged and no request
    is issued.
    """
    query = (query or "").strip()
    if not query:
        return state, None
    loading = _start_loading(state, query)
    return loading, FetchRequest(request_id=loading.request_id, query=query)


def begin_coordinates_fetch(
    state: ViewState, lat: float, lon: float
) -> tuple[ViewState, FetchRequest]:
    """Start a fetch keyed by coordinates; the search box text is kept."""
    loading = _start_loading(state, state.search.query)
    return loading, FetchRequest(request_id=loading.request_id, lat=lat, lon=lon)


def complete_search(
    state: ViewState,
    envelope: ForecastEnvelope,
    request: FetchRequest,
    discard_stale: bool = False,
) -> ViewState:
    """Apply a provider envelope for ``request``.

    On success the snapshot is replaced, the background re-classified and the
    originating query moved to the front of the recent searches. On failure
    the provider's message (or a generic one) becomes the error.
    """
    if _is_stale(state, request, discard_stale):
        return state
    query = request.query if request.query is not None else state.search.query
    if not envelope.success:
        return _failed(state, envelope.error_message or DOMAIN_ERROR_FALLBACK)

    snapshot = envelope.to_snapshot()
    current = snapshot.current
    background = (
        classify_background(current.weather_code, current.is_day)
        if current is not None
        else "default"
    )
    return state.model_copy(
        update={
            "search": SearchState(query=state.search.query, loading=False, error=None),
            "snapshot": snapshot,
            "background": background,
            "recent_searches": add_recent_search(state.recent_searches, query),
        }
    )


def complete_coordinates_fetch(
    state: ViewState,
    envelope: ForecastEnvelope,
    request: FetchRequest,
    discard_stale: bool = False,
) -> ViewState:
    """Apply a coordinates envelope.

    The resolved location name (or the current-location label) replaces the
    search box text and is used as the query for recent-search bookkeeping;
    the label itself is never recorded.
    """
    if _is_stale(state, request, discard_stale):
        return state
    query = envelope.location_name or CURRENT_LOCATION_LABEL
    named = request.model_copy(update={"query": query})
    return complete_search(set_query(state, query), envelope, named)


def fail_search(
    state: ViewState,
    message: Optional[str],
    request: FetchRequest,
    discard_stale: bool = False,
) -> ViewState:
    """Apply a transport failure (the provider call raised)."""
    if _is_stale(state, request, discard_stale):
        return state
    return _failed(state, message or TRANSPORT_ERROR_FALLBACK)


def select_day(state: ViewState, index: int) -> ViewState:
    """Select a forecast day; out-of-range indexes leave the state unchanged."""
    daily = state.snapshot.daily if state.snapshot is not None else ()
    if not 0 <= index < len(daily):
        return state
    return state.model_copy(
        update={"preferences": state.preferences.model_copy(update={"selected_day_index": index})}
    )


def clear_selection(state: ViewState) -> ViewState:
    return state.model_copy(
        update={"preferences": state.preferences.model_copy(update={"selected_day_index": None})}
    )


def toggle_units(state: ViewState) -> ViewState:
    """Flip between Fahrenheit and Celsius; display values re-derive."""
    preferences = state.preferences
    return state.model_copy(
        update={"preferences": preferences.model_copy(update={"is_fahrenheit": not preferences.is_fahrenheit})}
    )


def begin_locate(state: ViewState) -> ViewState:
    """Show the loading state while waiting for a position."""
    return state.model_copy(
        update={"search": state.search.model_copy(update={"loading": True, "error": None})}
    )


def locate_failed(state: ViewState) -> ViewState:
    return state.model_copy(
        update={"search": state.search.model_copy(update={"loading": False, "error": GEOLOCATION_DENIED})}
    )


def locate_unsupported(state: ViewState) -> ViewState:
    return state.model_copy(
        update={"search": state.search.model_copy(update={"error": GEOLOCATION_UNSUPPORTED})}
    )


def load_recent_searches(state: ViewState, searches: tuple[str, ...]) -> ViewState:
    return state.model_copy(update={"recent_searches": tuple(searches)})


def focus_search(state: ViewState) -> ViewState:
    """Open the recent-search dropdown when there is anything to show."""
    if not state.recent_searches:
        return state
    return state.model_copy(update={"show_recent_searches": True})


def dismiss_recent_searches(state: ViewState) -> ViewState:
    return state.model_copy(update={"show_recent_searches": False})
