"""
Client for the upstream current-weather API (OpenWeatherMap).
"""

from typing import Any, Dict, Optional, Union

import httpx
import structlog

from api.errors import UpstreamError
from api.models import WeatherReport

logger = structlog.get_logger(__name__)


def format_temperature(value: Union[int, float]) -> str:
    """Render a Celsius temperature, dropping the fraction of whole numbers."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}°C"


class WeatherGateway:
    """
    Fetches current weather for a city and reshapes it into a WeatherReport.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the gateway.

        Args:
            api_key: Upstream API key
            api_url: Upstream current-weather endpoint
            timeout: Request timeout in seconds
            client: HTTP client to use; one is created when omitted
        """
        self.api_key = api_key
        self.api_url = api_url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, city: str) -> WeatherReport:
        """
        Get the current weather for a city.

        Args:
            city: City name as given by the caller

        Returns:
            WeatherReport with the provider's city name, temperature and condition

        Raises:
            UpstreamError: On transport failure, non-2xx status or an unexpected payload
        """
        if not self.api_key:
            raise UpstreamError("Weather API key is not configured")

        params = {"q": city, "appid": self.api_key, "units": "metric"}
        try:
            response = await self.client.get(self.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Weather API returned an error status",
                city=city,
                status_code=e.response.status_code
            )
            raise UpstreamError(f"Weather API returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Weather API request failed", city=city, error=str(e))
            raise UpstreamError("Weather API request failed") from e
        except ValueError as e:
            logger.warning("Weather API returned invalid JSON", city=city)
            raise UpstreamError("Weather API returned invalid JSON") from e

        return self._to_report(payload)

    @staticmethod
    def _to_report(payload: Dict[str, Any]) -> WeatherReport:
        """Extract name, main.temp and the first weather description."""
        try:
            city = payload["name"]
            temperature = payload["main"]["temp"]
            condition = payload["weather"][0]["description"]
        except (KeyError, IndexError, TypeError) as e:
            logger.warning("Weather API payload is missing fields", error=repr(e))
            raise UpstreamError("Weather API payload is missing fields") from e

        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise UpstreamError("Weather API temperature is not numeric")

        return WeatherReport(
            city=str(city),
            temperature=format_temperature(temperature),
            condition=str(condition)
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
