"""OpenWeather 5 day / 3 hour forecast client."""

import logging
import os
import time

import httpx

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
FORECAST_PATH = "/data/2.5/forecast"
API_KEY_ENV = "OPENWEATHER_API_KEY"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "imperial",
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_base_delay: float = 5.0,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV, "")
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def get_forecast(self, lat: float, lon: float) -> dict:
        """Fetch the 3-hourly forecast for a coordinate.

        Makes a single request unless max_retries is raised, in which case
        503/429 and transport errors are retried with exponential backoff.
        Raises httpx.HTTPStatusError for any other non-2xx response.
        """
        url = f"{self.base_url}{FORECAST_PATH}"
        params = {
            "lat": lat,
            "lon": lon,
            "units": self.units,
            "appid": self.api_key,
        }

        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(url, params=params, timeout=self.timeout)
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "OpenWeather request error, retrying in %.1fs: %s", delay, e
                    )
                    time.sleep(delay)
                    continue
                raise

            if resp.status_code in (503, 429) and attempt < self.max_retries:
                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    "OpenWeather returned %d, retrying in %.1fs (attempt %d/%d)",
                    resp.status_code, delay, attempt + 1, self.max_retries,
                )
                time.sleep(delay)
                continue
            resp.raise_for_status()
            return resp.json()

        raise AssertionError("unreachable")
