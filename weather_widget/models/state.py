"""Widget state records.

State is immutable: reducer functions build a new ``ViewState`` with
``model_copy(update=...)`` rather than mutating fields in place.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from weather_widget.models.weather import WeatherSnapshot


class FrozenModel(BaseModel):
    """Base for immutable state records."""

    model_config = ConfigDict(frozen=True)


class SearchState(FrozenModel):
    """Search box and request status."""

    query: str = Field("", description="Current search box text")
    loading: bool = Field(False, description="Whether a fetch is outstanding")
    error: Optional[str] = Field(None, description="User-visible error message")


class UserPreferences(FrozenModel):
    """Display preferences that never trigger a fetch."""

    is_fahrenheit: bool = False
    selected_day_index: Optional[int] = Field(None, ge=0)


class FetchRequest(FrozenModel):
    """A forecast fetch the caller must run, tagged with its issue order."""

    request_id: int = Field(..., ge=1)
    query: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    @property
    def by_coordinates(self) -> bool:
        return self.query is None


class ViewState(FrozenModel):
    """Everything the widget renders from."""

    search: SearchState = Field(default_factory=SearchState)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    snapshot: Optional[WeatherSnapshot] = None
    background: str = Field("default", description="Theme tag from classify_background")
    recent_searches: tuple[str, ...] = ()
    show_recent_searches: bool = False
    request_id: int = Field(0, description="Id of the latest issued fetch")
