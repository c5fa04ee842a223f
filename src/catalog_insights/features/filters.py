# src/catalog_insights/features/filters.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from catalog_insights.config import YEAR_MIN_DEFAULT, YEAR_MAX_DEFAULT
from catalog_insights.features.genre_consolidation import expand_genres


MOVIE = "Movie"
TV_SHOW = "TV Show"

COUNTRY_MODE_ALL = "all"
COUNTRY_MODE_PRIMARY = "primary"

# Accepted spellings for the content type filter
TYPE_ALIASES = {
    "movie": MOVIE,
    "tvshow": TV_SHOW,
    "tv show": TV_SHOW,
    "show": TV_SHOW,
}


def normalize_type(label: str) -> Optional[str]:
    key = " ".join(str(label).strip().lower().split())
    return TYPE_ALIASES.get(key) or TYPE_ALIASES.get(key.replace(" ", ""))


def split_list(value: Optional[str]) -> list[str]:
    """'a, b,,c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [v.strip() for v in str(value).split(",") if v.strip()]


def parse_int(value, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class FilterSpec:
    """
    The query contract every aggregation consumes.
    Empty sets mean "no restriction".
    """
    genres: frozenset = field(default_factory=frozenset)
    countries: frozenset = field(default_factory=frozenset)
    types: frozenset = field(default_factory=frozenset)
    year_range: tuple = (YEAR_MIN_DEFAULT, YEAR_MAX_DEFAULT)
    country_mode: str = COUNTRY_MODE_ALL

    @classmethod
    def create(
        cls,
        genres: Iterable[str] = (),
        countries: Iterable[str] = (),
        types: Iterable[str] = (),
        year_range: tuple = (YEAR_MIN_DEFAULT, YEAR_MAX_DEFAULT),
        country_mode: str = COUNTRY_MODE_ALL,
    ) -> "FilterSpec":
        normalized_types = {normalize_type(t) for t in types}
        normalized_types.discard(None)

        return cls(
            genres=frozenset(genres),
            countries=frozenset(countries),
            types=frozenset(normalized_types),
            year_range=(int(year_range[0]), int(year_range[1])),
            country_mode=COUNTRY_MODE_PRIMARY if country_mode == COUNTRY_MODE_PRIMARY else COUNTRY_MODE_ALL,
        )

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "FilterSpec":
        """
        Parse request-style string parameters.
        Malformed values degrade to "no restriction" instead of raising.
        """
        year_min = parse_int(params.get("yearMin"), YEAR_MIN_DEFAULT)
        year_max = parse_int(params.get("yearMax"), YEAR_MAX_DEFAULT)

        return cls.create(
            genres=split_list(params.get("genres")),
            countries=split_list(params.get("countries")),
            types=split_list(params.get("types")),
            year_range=(year_min, year_max),
            country_mode=str(params.get("countryMode") or COUNTRY_MODE_ALL).strip(),
        )

    @property
    def primary_only(self) -> bool:
        return self.country_mode == COUNTRY_MODE_PRIMARY


@dataclass(frozen=True)
class TitleQuery:
    """
    Immutable description of which titles to read.
    The store evaluates it; nothing here touches data.
    """
    year_min: int = YEAR_MIN_DEFAULT
    year_max: int = YEAR_MAX_DEFAULT
    types: frozenset = field(default_factory=frozenset)
    genres: frozenset = field(default_factory=frozenset)
    countries: frozenset = field(default_factory=frozenset)
    primary_only: bool = False
    name_contains: Optional[str] = None


def build_query(
    spec: FilterSpec,
    *,
    ignore_genres: bool = False,
    ignore_countries: bool = False,
    name_contains: Optional[str] = None,
) -> TitleQuery:
    genres = frozenset() if ignore_genres or not spec.genres else expand_genres(spec.genres)
    countries = frozenset() if ignore_countries else spec.countries

    return TitleQuery(
        year_min=spec.year_range[0],
        year_max=spec.year_range[1],
        types=spec.types,
        genres=genres,
        countries=countries,
        primary_only=spec.primary_only,
        name_contains=name_contains,
    )
