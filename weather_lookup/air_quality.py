"""AQI extraction and category classification."""
from __future__ import annotations

from typing import Optional, Tuple

from weather_lookup.data_sources.schemas import AirPollutionPayload
from weather_lookup.models import AirQuality

# (upper bound inclusive, category, display color); anything above the last
# bound is Hazardous.
AQI_BREAKPOINTS: Tuple[Tuple[int, str, str], ...] = (
    (50, "Good", "#00E400"),
    (100, "Moderate", "#FFFF00"),
    (150, "Unhealthy for Sensitive Groups", "#FF7E00"),
    (200, "Unhealthy", "#FF0000"),
    (300, "Very Unhealthy", "#8F3F97"),
)
HAZARDOUS = ("Hazardous", "#7E0023")


def classify_aqi(index: int) -> Tuple[str, str]:
    """Return (category, color) for an AQI value."""
    for upper, category, color in AQI_BREAKPOINTS:
        if index <= upper:
            return category, color
    return HAZARDOUS


def extract_air_quality(payload: Optional[AirPollutionPayload]) -> Optional[AirQuality]:
    """Classify the current (first) reading, or None when the index is missing."""
    if payload is None or not payload.items:
        return None
    current = payload.items[0]
    if current.main is None or current.main.aqi is None:
        return None

    index = current.main.aqi
    category, color = classify_aqi(index)
    components = {name: value for name, value in current.components.items() if value is not None}
    return AirQuality(index=index, category=category, color=color, components=components)
