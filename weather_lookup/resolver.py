"""Turn a free-text city name into a single best-match `Location`.

Resolution tries a few spellings of the query against the geocoder, picks the
most plausible candidate from the first non-empty answer, and falls back to the
static table in `weather_lookup.overrides` when the geocoder is no help at all.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from weather_lookup.data_sources.base import WeatherDataSource
from weather_lookup.data_sources.schemas import GeocodingCandidate
from weather_lookup.errors import NotFoundError
from weather_lookup.models import Location
from weather_lookup.overrides import DEFAULT_OVERRIDES, LocationOverride, find_override
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="resolver")


def _candidate_name(candidate: GeocodingCandidate) -> str:
    return (candidate.name or "").strip().lower()


class CoordinateResolver:
    """Resolve city names through a geocoding data source."""

    def __init__(
        self,
        data_source: WeatherDataSource,
        *,
        country_code: Optional[str] = "IN",
        country_name: Optional[str] = "India",
        limit: int = 5,
        overrides: Sequence[LocationOverride] = DEFAULT_OVERRIDES,
    ) -> None:
        self._data_source = data_source
        self._country_code = country_code
        self._country_name = country_name
        self._limit = limit
        self._overrides = tuple(overrides)

    def search_variants(self, city_name: str) -> List[str]:
        """Queries to try, in order: as typed, with country code, with country name."""
        variants = [city_name]
        if self._country_code:
            variants.append(f"{city_name},{self._country_code}")
        if self._country_name:
            variants.append(f"{city_name}, {self._country_name}")
        return variants

    def strip_annotations(self, city_name: str) -> str:
        """Lower-case `city_name` and drop trailing ", region" / ", country" parts.

        "Nanded, Maharashtra, India" and "Nanded,IN" both become "nanded".
        """
        annotations = [o.required_region for o in self._overrides]
        annotations += [self._country_name or "", self._country_code or ""]
        annotations = [a.strip().lower() for a in annotations if a and a.strip()]

        text = city_name.strip().lower()
        changed = True
        while changed:
            changed = False
            for annotation in annotations:
                if not text.endswith(annotation):
                    continue
                head = text[: -len(annotation)].rstrip()
                if head.endswith(","):
                    text = head[:-1].rstrip()
                    changed = True
        return text

    def select_best_match(self, candidates: Sequence[GeocodingCandidate], city_name: str) -> GeocodingCandidate:
        """Pick one candidate: override region, then exact name, then partial name, then first."""
        override = find_override(city_name, self._overrides)
        if override is not None:
            substring = override.name_substring
            region = override.required_region.lower()
            for candidate in candidates:
                state = (candidate.state or "").lower()
                if substring in _candidate_name(candidate) and region in state:
                    logger.info(f"Matched {candidate.name} in {candidate.state} for {city_name}")
                    return candidate
            for candidate in candidates:
                if substring in _candidate_name(candidate):
                    logger.warning(
                        f"No candidate for {city_name} in {override.required_region}; "
                        f"using ambiguous match {candidate.name} ({candidate.state})"
                    )
                    return candidate

        target = self.strip_annotations(city_name)
        for candidate in candidates:
            if _candidate_name(candidate) == target:
                return candidate
        for candidate in candidates:
            if target in _candidate_name(candidate):
                return candidate
        return candidates[0]

    def resolve(self, city_name: str) -> Location:
        """Return the best `Location` for `city_name` or raise `NotFoundError`."""
        for query in self.search_variants(city_name):
            try:
                candidates = self._data_source.fetch_geocoding(query, limit=self._limit)
            except Exception as exc:
                logger.warning(f"Failed to resolve coordinates for search term: {query}: {exc}")
                continue
            if not candidates:
                logger.debug(f"No geocoding candidates for search term: {query}")
                continue

            best = self.select_best_match(candidates, city_name)
            location = Location(
                name=best.name or city_name.strip(),
                latitude=best.lat,
                longitude=best.lon,
                country=best.country,
                region=best.state,
            )
            logger.info(
                f"Resolved {city_name} via {query!r}: lat={location.latitude}, lon={location.longitude}, "
                f"country={location.country}, state={location.region}"
            )
            return location

        override = find_override(city_name, self._overrides)
        if override is not None:
            logger.info(f"Using hardcoded coordinates for {city_name}")
            return override.location

        raise NotFoundError(city_name)
