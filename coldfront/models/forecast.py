"""OpenWeather forecast data models."""

from dataclasses import dataclass

SAMPLING_INTERVAL_HOURS = 3
SAMPLES_PER_DAY = 24 // SAMPLING_INTERVAL_HOURS


@dataclass(frozen=True)
class ForecastSample:
    dt: int  # Unix seconds
    temp_min: float
    temp_max: float


@dataclass(frozen=True)
class Forecast:
    city_name: str
    samples: list[ForecastSample]
    fetched_at: str


@dataclass(frozen=True)
class DailyAggregate:
    date_key: str  # YYYY-MM-DD, observer's local date
    min_temp: float
    max_temp: float
    sample_count: int

    def is_full_day(self, samples_per_day: int = SAMPLES_PER_DAY) -> bool:
        return self.sample_count == samples_per_day
