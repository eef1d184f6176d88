"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # Forecast proxy
    forecast_api_base_url: str = "http://localhost:8080/weather"
    forecast_api_key: str = ""  # Sent as X-Api-Key when set
    forecast_api_timeout: int = 10  # Seconds per request, single attempt

    # Widget defaults
    default_query: str = "McKinney 75070"
    default_fahrenheit: bool = False
    search_on_start: bool = True
    discard_stale_responses: bool = False  # Fence completions by request id
    use_12_hour_clock: bool = True
    display_timezone: Optional[str] = None  # IANA name, None = server local time

    # Recent searches
    recent_searches_backend: Literal["file", "redis", "memory"] = "file"
    recent_searches_path: str = ".weather_widget/recent_searches.json"
    recent_searches_key: str = "weather_recent_searches"
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 2.0  # Seconds for connect and each command

    # Fixed geolocation source (both unset = geolocation unsupported)
    geolocation_lat: Optional[float] = None
    geolocation_lon: Optional[float] = None

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Reject timezone names the zoneinfo database does not know."""
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def geolocation_supported(self) -> bool:
        """Whether a fixed position is configured for the locate action."""
        return self.geolocation_lat is not None and self.geolocation_lon is not None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
