"""Static disambiguation table for city names the geocoder gets wrong.

Each entry applies when the lower-cased user input contains `name_substring`:

- while picking among geocoding candidates, a candidate whose name contains the
  substring and whose region contains `required_region` wins over every other
  candidate;
- when every geocoding attempt fails, `location` is returned as-is.

Data only; the matching rules live in `weather_lookup.resolver`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from weather_lookup.models import Location


@dataclass(frozen=True)
class LocationOverride:
    name_substring: str
    required_region: str
    location: Location

    def applies_to(self, city_name: str) -> bool:
        return self.name_substring in city_name.strip().lower()


# Several Indian places share the name Nanded; the district seat in
# Maharashtra is the one users mean.
DEFAULT_OVERRIDES: Sequence[LocationOverride] = (
    LocationOverride(
        name_substring="nanded",
        required_region="maharashtra",
        location=Location(
            name="Nanded",
            latitude=19.1539,
            longitude=77.3021,
            country="IN",
            region="Maharashtra",
        ),
    ),
)


def find_override(city_name: str, overrides: Sequence[LocationOverride] = DEFAULT_OVERRIDES) -> Optional[LocationOverride]:
    """Return the first override entry that applies to `city_name`, if any."""
    for entry in overrides:
        if entry.applies_to(city_name):
            return entry
    return None
