"""Turn the provider's 3-hourly forecast into hourly samples and daily summaries."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from weather_lookup.data_sources.schemas import ForecastPayload
from weather_lookup.models import DailySummary, HourlySample, round_half_up
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast")


@dataclass(frozen=True)
class ForecastSeries:
    hourly: Tuple[HourlySample, ...] = ()
    daily: Tuple[DailySummary, ...] = ()


def extract_hourly_samples(payload: ForecastPayload, *, tz: Optional[dt.tzinfo] = None) -> List[HourlySample]:
    """
    Convert forecast list items into `HourlySample`s, in provider order.

    Items without a timestamp, without a `main` block, or without any weather
    condition are dropped. Sample times are local to `tz` (the system zone when
    None).
    """
    samples: List[HourlySample] = []
    dropped = 0
    for item in payload.items or []:
        if item.dt is None or item.main is None or not item.weather:
            dropped += 1
            continue
        condition = item.weather[0]
        rain = item.rain.three_hours if item.rain else None
        samples.append(
            HourlySample(
                time=dt.datetime.fromtimestamp(item.dt, tz),
                temperature=item.main.temp,
                condition=condition.description,
                icon=condition.icon,
                humidity=item.main.humidity,
                wind_speed=item.wind.speed if item.wind else None,
                precipitation=rain if rain is not None else 0,
            )
        )
    if dropped:
        logger.debug(f"Dropped {dropped} malformed forecast items")
    return samples


def _average(values: Sequence[Optional[float]]) -> float:
    # Missing values count as zero.
    if not values:
        return 0.0
    return sum(v if v is not None else 0 for v in values) / len(values)


def build_daily_summaries(hourly: Sequence[HourlySample]) -> List[DailySummary]:
    """Group samples by calendar date and summarize each day, earliest first."""
    groups: Dict[dt.date, List[HourlySample]] = {}
    for sample in hourly:
        groups.setdefault(sample.time.date(), []).append(sample)

    summaries: List[DailySummary] = []
    for day in sorted(groups):
        samples = groups[day]
        first = samples[0]
        temps = [s.temperature for s in samples if s.temperature is not None]
        summaries.append(
            DailySummary(
                date=day,
                min_temperature=min(temps) if temps else None,
                max_temperature=max(temps) if temps else None,
                condition=first.condition,
                icon=first.icon,
                humidity=round_half_up(_average([s.humidity for s in samples])),
                wind_speed=_average([s.wind_speed for s in samples]),
                precipitation=round_half_up(_average([s.precipitation for s in samples])),
            )
        )
    return summaries


def aggregate_forecast(payload: Optional[ForecastPayload], *, tz: Optional[dt.tzinfo] = None) -> ForecastSeries:
    """Hourly samples plus their daily roll-up; an empty payload gives an empty series."""
    if payload is None:
        return ForecastSeries()
    hourly = extract_hourly_samples(payload, tz=tz)
    daily = build_daily_summaries(hourly)
    return ForecastSeries(hourly=tuple(hourly), daily=tuple(daily))
