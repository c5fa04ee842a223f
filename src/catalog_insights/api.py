# src/catalog_insights/api.py

from __future__ import annotations
import functools
import logging
from typing import Mapping, Optional

from catalog_insights.analytics import aggregations
from catalog_insights.analytics.insights import insights
from catalog_insights.config import (
    SCATTER_LIMIT_DEFAULT,
    SEARCH_LIMIT_DEFAULT,
    SEARCH_LIMIT_MAX,
    TITLES_LIMIT_DEFAULT,
)
from catalog_insights.data.store import CatalogStore
from catalog_insights.errors import StoreUnavailable
from catalog_insights.features.filters import FilterSpec, parse_int


logger = logging.getLogger(__name__)


# ============================================================
# PARAMETER PARSING
# ============================================================

def parse_limit(value, default: int, maximum: Optional[int] = None) -> int:
    """Unparseable or non-positive -> default; capped at maximum when given."""
    limit = parse_int(value, default)
    if limit <= 0:
        limit = default
    if maximum is not None:
        limit = min(limit, maximum)
    return limit


def parse_offset(value) -> int:
    return max(parse_int(value, 0), 0)


def endpoint(error_message: str):
    """
    Wrap a handler so store failures become ({"error": ...}, 500).
    The body never carries the underlying exception text.
    """
    def decorator(handler):
        @functools.wraps(handler)
        def wrapper(store: CatalogStore, params: Optional[Mapping[str, str]] = None):
            try:
                return handler(store, params or {})
            except StoreUnavailable:
                logger.exception("%s", error_message)
                return {"error": error_message}, 500
        return wrapper
    return decorator


# ============================================================
# HANDLERS
# ============================================================

@endpoint("Failed to fetch summary data")
def get_summary(store, params):
    return aggregations.summary(store), 200


@endpoint("Failed to fetch timeline data")
def get_timeline(store, params):
    spec = FilterSpec.from_params(params)
    return aggregations.timeline(store, spec), 200


@endpoint("Failed to fetch genre data")
def get_genres(store, params):
    spec = FilterSpec.from_params(params)
    return aggregations.genre_stats(store, spec), 200


@endpoint("Failed to fetch country data")
def get_countries(store, params):
    spec = FilterSpec.from_params(params)
    return aggregations.country_stats(store, spec), 200


@endpoint("Failed to fetch scatter data")
def get_scatter(store, params):
    spec = FilterSpec.from_params(params)
    limit = parse_limit(params.get("limit"), SCATTER_LIMIT_DEFAULT)
    return aggregations.scatter(store, spec, limit=limit), 200


@endpoint("Failed to search titles")
def get_search(store, params):
    limit = parse_limit(params.get("limit"), SEARCH_LIMIT_DEFAULT, SEARCH_LIMIT_MAX)
    return aggregations.search(store, params.get("q") or "", limit=limit), 200


@endpoint("Failed to generate insights")
def get_insights(store, params):
    spec = FilterSpec.from_params(params)
    return insights(store, spec), 200


@endpoint("Failed to fetch titles")
def get_titles(store, params):
    spec = FilterSpec.from_params(params)
    limit = parse_limit(params.get("limit"), TITLES_LIMIT_DEFAULT)
    offset = parse_offset(params.get("offset"))
    return aggregations.titles_page(store, spec, limit=limit, offset=offset), 200


ENDPOINTS = {
    "summary": get_summary,
    "timeline": get_timeline,
    "genres": get_genres,
    "countries": get_countries,
    "scatter": get_scatter,
    "search": get_search,
    "insights": get_insights,
    "titles": get_titles,
}


def handle(store: CatalogStore, name: str, params: Optional[Mapping[str, str]] = None):
    """Dispatch by endpoint name -> (body, status)."""
    handler = ENDPOINTS.get(name)
    if handler is None:
        return {"error": f"Unknown endpoint '{name}'"}, 404
    return handler(store, params)
