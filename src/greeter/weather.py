"""Current-weather lookup against weatherapi.com.

Example:
    ```python
    import asyncio
    from greeter.weather import fetch_weather

    reading = asyncio.run(fetch_weather("my-key", "Brighton"))
    print(f"{reading.temp_c}°C and {reading.condition_text} in {reading.place_name}")
    ```
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from greeter.errors import WeatherError
from greeter.logging import RequestLogger, get_logger

__all__ = [
    "DEFAULT_BASE_URL",
    "WeatherReading",
    "WeatherResponse",
    "condition_emoji",
    "fetch_weather",
]

logger = get_logger("weather")
request_logger = RequestLogger("weather.http")

DEFAULT_BASE_URL = "https://api.weatherapi.com/v1"
DEFAULT_TIMEOUT = 10.0


# =============================================================================
# Response schema
# =============================================================================


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LocationInfo(_Lenient):
    name: str
    region: str | None = None
    country: str | None = None


class ConditionInfo(_Lenient):
    text: str
    code: int | None = None


class CurrentWeather(_Lenient):
    temp_c: float
    condition: ConditionInfo
    feelslike_c: float | None = None
    humidity: int | None = None


class WeatherResponse(_Lenient):
    """The subset of ``/current.json`` the banner uses."""

    location: LocationInfo
    current: CurrentWeather


@dataclass(frozen=True)
class WeatherReading:
    temp_c: float
    condition_text: str
    place_name: str

    @classmethod
    def from_response(cls, response: WeatherResponse) -> WeatherReading:
        return cls(
            temp_c=response.current.temp_c,
            condition_text=response.current.condition.text,
            place_name=response.location.name,
        )


def condition_emoji(condition_text: str) -> str:
    condition = condition_text.lower()
    if condition == "cloudy":
        return "☁️"
    if "sunny" in condition:
        return "🌤️"
    if "rain" in condition:
        return "🌧️"
    return "🌥️"


# =============================================================================
# Client
# =============================================================================


async def fetch_weather(
    api_key: str,
    location: str,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> WeatherReading:
    """Fetch current conditions for ``location``.

    Args:
        api_key: weatherapi.com key.
        location: Any query the API accepts (city, postcode, lat,lon).
        client: Reuse an existing client; one is created otherwise.
        base_url: API root, overridable for tests.
        timeout: Seconds before the request is abandoned.

    Raises:
        WeatherError: Network failure, non-2xx status, or unexpected body.
    """
    url = f"{base_url.rstrip('/')}/current.json"
    params = {"key": api_key, "q": location, "aqi": "no"}

    log = request_logger.log_request("GET", str(httpx.URL(url, params=params)))

    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                response = await own_client.get(url, params=params, timeout=timeout)
        else:
            response = await client.get(url, params=params, timeout=timeout)
    except httpx.HTTPError as e:
        log.complete(error=type(e).__name__)
        request_logger.log_response(log)
        raise WeatherError(f"weather request failed: {e}", location=location) from e

    log.complete(status_code=response.status_code, response_size=len(response.content))
    request_logger.log_response(log)

    if response.status_code >= 400:
        raise WeatherError(
            f"weather API returned {response.status_code}",
            status_code=response.status_code,
            location=location,
        )

    try:
        parsed = WeatherResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise WeatherError(
            f"unexpected weather response: {e.error_count()} invalid field(s)",
            status_code=response.status_code,
            location=location,
        ) from e

    reading = WeatherReading.from_response(parsed)
    logger.debug("weather_fetched", place=reading.place_name, temp_c=reading.temp_c)
    return reading
