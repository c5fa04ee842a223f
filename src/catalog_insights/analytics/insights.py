# src/catalog_insights/analytics/insights.py

from __future__ import annotations
from typing import Optional

import pandas as pd

from catalog_insights.config import RECENT_YEAR_CUTOFF, RECENT_MIN_DISTINCT_YEARS
from catalog_insights.data.store import CatalogStore
from catalog_insights.features.filters import FilterSpec, build_query, MOVIE, TV_SHOW, COUNTRY_MODE_PRIMARY
from catalog_insights.features.genre_consolidation import round_half_up


def _insight(insight_id: str, kind: str, title: str, text: str, value=None) -> dict:
    record = {"id": insight_id, "kind": kind, "title": title, "text": text}
    if value is not None:
        record["value"] = value
    return record


def most_frequent(values: pd.Series) -> Optional[tuple]:
    """
    (value, count) of the most frequent entry.
    Ties go to whichever value was encountered first.
    """
    values = values.dropna().reset_index(drop=True)
    if values.empty:
        return None
    counts = values.groupby(values, sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")
    return counts.index[0], int(counts.iloc[0])


def generate_insights(titles: pd.DataFrame, country_mode: str = "all") -> list[dict]:
    """
    Fixed battery of insights over one filtered title set.

    `titles` needs: type, release_year, genres (list), countries (list),
    primary_country. Steps run in order and never cancel each other;
    an empty set yields only the "no-data" record.
    """
    total = len(titles)
    if total == 0:
        return [_insight(
            "no-data", "info", "No Data",
            "No titles match the current filters. Try adjusting your selection.",
        )]

    records = []

    # 1) Total count
    movie_count = int((titles["type"] == MOVIE).sum())
    tv_count = int((titles["type"] == TV_SHOW).sum())
    records.append(_insight(
        "total-count", "info", "Content Overview",
        f"Showing {total:,} titles: {movie_count:,} movies and {tv_count:,} TV shows.",
        total,
    ))

    # 2) Dominant genre
    top_genre = most_frequent(titles["genres"].explode())
    if top_genre is not None:
        genre, genre_count = top_genre
        pct = round_half_up(genre_count / total * 100)
        records.append(_insight(
            "top-genre", "highlight", "Dominant Genre",
            f"{genre} is the most common genre, appearing in {pct}% of the selected titles.",
            str(genre),
        ))

    # 3) Peak year
    year, year_count = most_frequent(titles["release_year"])
    records.append(_insight(
        "peak-year", "trend", "Peak Year",
        f"{int(year)} had the highest content output with {year_count:,} titles.",
        int(year),
    ))

    # 4) Leading country
    if country_mode == COUNTRY_MODE_PRIMARY:
        counted = titles["primary_country"]
    else:
        counted = titles["countries"].explode()
    top_country = most_frequent(counted)
    if top_country is not None:
        country, country_count = top_country
        pct = round_half_up(country_count / total * 100)
        records.append(_insight(
            "top-country", "highlight", "Leading Producer",
            f"{country} leads with {pct}% of the selected content.",
            str(country),
        ))

    # 5) Type ratio; an exact tie reports TV Shows at 50%
    movie_ratio = round_half_up(movie_count / total * 100)
    dominant = "Movies" if movie_count > tv_count else "TV Shows"
    dominant_pct = movie_ratio if dominant == "Movies" else 100 - movie_ratio
    records.append(_insight(
        "type-ratio", "info", "Content Mix",
        f"{dominant} dominate the selection at {dominant_pct}% of total content.",
        f"{movie_ratio}% Movies",
    ))

    # 6) Recent trend
    years = titles["release_year"]
    recent = years[years >= RECENT_YEAR_CUTOFF]
    if recent.nunique() >= RECENT_MIN_DISTINCT_YEARS:
        recent_pct = round_half_up(len(recent) / total * 100)
        label = "significant modern growth" if recent_pct > 50 else "a mix of classic and modern titles"
        records.append(_insight(
            "recent-trend", "trend", "Recent Growth",
            f"{recent_pct}% of the selected content was released since {RECENT_YEAR_CUTOFF}, showing {label}.",
            recent_pct,
        ))

    return records


def insights(store: CatalogStore, spec: FilterSpec) -> list[dict]:
    titles = store.fetch_titles(build_query(spec))
    return generate_insights(titles, spec.country_mode)
