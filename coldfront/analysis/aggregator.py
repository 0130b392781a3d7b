"""Reduce 3-hourly forecast samples to per-day temperature extremes."""

import logging
from collections.abc import Sequence
from datetime import datetime, tzinfo

from coldfront.analysis.numeric import round_half_up
from coldfront.models.forecast import SAMPLES_PER_DAY, DailyAggregate, ForecastSample

logger = logging.getLogger(__name__)


def date_key(dt: int, tz: tzinfo | None = None) -> str:
    """Local calendar date (YYYY-MM-DD) for a Unix timestamp.

    With tz=None the host's local time zone is used.
    """
    if tz is None:
        return datetime.fromtimestamp(dt).astimezone().date().isoformat()
    return datetime.fromtimestamp(dt, tz).date().isoformat()


def aggregate_daily(
    samples: Sequence[ForecastSample], tz: tzinfo | None = None
) -> dict[str, DailyAggregate]:
    """Group samples by local date.

    The returned dict is ordered by the first appearance of each date in
    the input, which is chronological for a chronological forecast.
    """
    days: dict[str, DailyAggregate] = {}
    for sample in samples:
        key = date_key(sample.dt, tz)
        current = days.get(key)
        if current is None:
            days[key] = DailyAggregate(
                date_key=key,
                min_temp=sample.temp_min,
                max_temp=sample.temp_max,
                sample_count=1,
            )
        else:
            days[key] = DailyAggregate(
                date_key=key,
                min_temp=min(current.min_temp, sample.temp_min),
                max_temp=max(current.max_temp, sample.temp_max),
                sample_count=current.sample_count + 1,
            )
    return days


def aggregate_daily_minimums(
    samples: Sequence[ForecastSample], tz: tzinfo | None = None
) -> list[int]:
    """Rounded daily minimum for every day present, partial days included."""
    return [round_half_up(day.min_temp) for day in aggregate_daily(samples, tz).values()]


def aggregate_daily_maximums(
    samples: Sequence[ForecastSample],
    tz: tzinfo | None = None,
    samples_per_day: int = SAMPLES_PER_DAY,
) -> list[int]:
    """Rounded daily maximum for full days only.

    A truncated day at either edge of the forecast window would otherwise
    look like an unusually cold high.
    """
    maxes: list[int] = []
    for day in aggregate_daily(samples, tz).values():
        if not day.is_full_day(samples_per_day):
            logger.debug(
                "Skipping partial day %s (%d/%d samples) for highs",
                day.date_key, day.sample_count, samples_per_day,
            )
            continue
        maxes.append(round_half_up(day.max_temp))
    return maxes
