"""Client for the weather proxy that resolves locations and returns forecasts."""

from typing import Optional, Protocol

import httpx
import structlog
from pydantic import ValidationError

from weather_widget.config import get_settings
from weather_widget.models.weather import ForecastEnvelope

logger = structlog.get_logger(__name__)


class ForecastTransportError(Exception):
    """The proxy call itself failed (network, server error, bad payload).

    ``message`` carries the server-supplied explanation when there is one and
    is None otherwise.
    """

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "forecast request failed")
        self.message = message
        self.status_code = status_code


class ForecastProvider(Protocol):
    """Anything that can answer forecast lookups with an envelope."""

    async def get_forecast(self, location: str) -> ForecastEnvelope: ...

    async def get_forecast_by_coordinates(self, lat: float, lon: float) -> ForecastEnvelope: ...


def _extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull ``message`` (or ``body.message``) out of a JSON error body."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    body = data.get("body")
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if data.get("message"):
        return str(data["message"])
    return None


class ForecastService:
    """Forecast lookups against the configured proxy, one attempt per call."""

    def __init__(self):
        self.settings = get_settings()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {}
            if self.settings.forecast_api_key:
                headers["X-Api-Key"] = self.settings.forecast_api_key
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.forecast_api_timeout),
                headers=headers,
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _call_api(self, endpoint: str, params: dict) -> ForecastEnvelope:
        """Call the proxy and parse its envelope.

        Args:
            endpoint: Path below the base URL (e.g., 'forecast')
            params: Query parameters

        Returns:
            Parsed envelope, successful or not

        Raises:
            ForecastTransportError: On timeout, connection failure, non-2xx
                status or a payload that is not an envelope
        """
        url = f"{self.settings.forecast_api_base_url}/{endpoint}"
        client = await self._get_client()

        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("forecast_api_timeout", endpoint=endpoint)
            raise ForecastTransportError() from e
        except httpx.HTTPError as e:
            logger.error(
                "forecast_api_error",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ForecastTransportError() from e

        if response.status_code >= 400:
            message = _extract_error_message(response)
            logger.warning(
                "forecast_api_status_error",
                endpoint=endpoint,
                status_code=response.status_code,
                message=message,
            )
            raise ForecastTransportError(message, status_code=response.status_code)

        try:
            return ForecastEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                "forecast_parse_error",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ForecastTransportError() from e

    async def get_forecast(self, location: str) -> ForecastEnvelope:
        """Get current conditions and forecast for a free-text location.

        Args:
            location: City name, "City, Country" or postal code
        """
        return await self._call_api("forecast", {"location": location})

    async def get_forecast_by_coordinates(self, lat: float, lon: float) -> ForecastEnvelope:
        """Get current conditions and forecast for a coordinate pair."""
        return await self._call_api("forecast/coordinates", {"lat": lat, "lon": lon})
