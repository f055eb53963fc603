"""Error taxonomy for the lookup pipeline.

Only resolution and current-weather failures abort a lookup. Forecast and
air-quality failures are soft and never surface as exceptions.
"""
from typing import Optional


class WeatherLookupError(Exception):
    """Base class for lookup failures."""


class EmptyInputError(WeatherLookupError):
    """Blank city name; raised before any upstream call."""

    def __init__(self) -> None:
        super().__init__("City name cannot be empty")


class NotFoundError(WeatherLookupError):
    """Coordinate resolution exhausted every search variant and override."""

    def __init__(self, city: str) -> None:
        super().__init__(f"City not found: {city}")
        self.city = city


class UpstreamUnavailableError(WeatherLookupError):
    """Current-weather call failed for a resolved location.

    `status_code` is the provider's HTTP status when the failure was an HTTP
    error response.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
