"""Forecast fetcher: retrieves and parses the forecast into a typed result."""

import logging
from dataclasses import dataclass

import httpx

from coldfront.config.schema import LocationConfig
from coldfront.ingest.openweather_client import OpenWeatherClient
from coldfront.models.common import utc_now_iso
from coldfront.models.errors import RetrievalFailure
from coldfront.models.forecast import Forecast, ForecastSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastResult:
    forecast: Forecast | None = None
    error: RetrievalFailure | None = None

    @property
    def ok(self) -> bool:
        return self.forecast is not None


class ForecastFetcher:
    def __init__(self, client: OpenWeatherClient):
        self.client = client

    def fetch(self, location: LocationConfig) -> ForecastResult:
        """Fetch and parse the forecast for a location.

        Never raises for upstream problems: HTTP errors, transport errors and
        malformed payloads all come back as a RetrievalFailure in the result.
        """
        try:
            raw = self.client.get_forecast(location.lat, location.lon)
        except httpx.HTTPStatusError as e:
            failure = RetrievalFailure(
                f"code {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            )
            logger.error("Error getting forecast: %s", failure)
            return ForecastResult(error=failure)
        except (httpx.RequestError, ValueError) as e:
            failure = RetrievalFailure(f"request failed: {e}")
            logger.error("Error getting forecast: %s", failure)
            return ForecastResult(error=failure)

        try:
            forecast = parse_forecast(raw)
        except RetrievalFailure as failure:
            logger.error("Error getting forecast: %s", failure)
            return ForecastResult(error=failure)

        logger.info(
            "Fetched %d forecast samples for %s",
            len(forecast.samples), forecast.city_name or location.name,
        )
        return ForecastResult(forecast=forecast)


def parse_forecast(raw: object) -> Forecast:
    """Parse an OpenWeather /forecast payload, raising RetrievalFailure on bad shape."""
    if not isinstance(raw, dict):
        raise RetrievalFailure(f"unexpected payload type {type(raw).__name__}")
    entries = raw.get("list")
    if not isinstance(entries, list):
        raise RetrievalFailure("payload has no 'list' of samples")

    samples: list[ForecastSample] = []
    for i, entry in enumerate(entries):
        try:
            main = entry["main"]
            samples.append(
                ForecastSample(
                    dt=int(entry["dt"]),
                    temp_min=float(main["temp_min"]),
                    temp_max=float(main["temp_max"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RetrievalFailure(f"malformed sample at index {i}: {e!r}") from e

    city = raw.get("city") or {}
    return Forecast(
        city_name=city.get("name", "") if isinstance(city, dict) else "",
        samples=samples,
        fetched_at=utc_now_iso(),
    )
