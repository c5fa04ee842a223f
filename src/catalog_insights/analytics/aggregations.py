# src/catalog_insights/analytics/aggregations.py

from __future__ import annotations
import datetime
import re
from typing import Optional

import pandas as pd

from catalog_insights.config import (
    SCATTER_LIMIT_DEFAULT,
    SEARCH_LIMIT_DEFAULT,
    SEARCH_LIMIT_MAX,
    SEARCH_MIN_QUERY_LENGTH,
    TITLES_LIMIT_DEFAULT,
    TOP_GENRES_PER_COUNTRY,
    SUMMARY_YEAR_FLOOR,
)
from catalog_insights.data.store import CatalogStore
from catalog_insights.features.filters import FilterSpec, TitleQuery, build_query, MOVIE, TV_SHOW
from catalog_insights.features.genre_consolidation import merge_stats, round_half_up


# --------------------------
# Helpers
# --------------------------
def _clean(value):
    """NaN / NaT -> None so rows serialize to JSON."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _iso_date(value) -> Optional[str]:
    value = _clean(value)
    if value is None:
        return None
    return pd.Timestamp(value).isoformat()


def parse_duration(duration, title_type: str) -> Optional[int]:
    """
    duration examples:
    - "90 min"    (Movie)   -> 90
    - "2 Seasons" (TV Show) -> 2
    Anything else -> None
    """
    duration = _clean(duration)
    if not duration:
        return None
    d = str(duration).strip()

    if title_type == MOVIE:
        m = re.search(r"(\d+)\s*min", d, flags=re.IGNORECASE)
    else:
        m = re.search(r"(\d+)\s*season", d, flags=re.IGNORECASE)
    return int(m.group(1)) if m else None


def flatten_title(row) -> dict:
    """One catalog row (with associations) in its list-response form."""
    return {
        "id": int(row["id"]),
        "showId": _clean(row["show_id"]),
        "type": _clean(row["type"]),
        "title": _clean(row["title"]),
        "director": _clean(row.get("director")),
        "cast": _clean(row.get("cast")),
        "dateAdded": _iso_date(row.get("date_added")),
        "releaseYear": int(row["release_year"]),
        "rating": _clean(row.get("rating")),
        "duration": _clean(row.get("duration")),
        "description": _clean(row.get("description")),
        "countries": list(row["countries"]),
        "genres": list(row["genres"]),
    }


def _type_flags(frame: pd.DataFrame) -> pd.DataFrame:
    out = frame.copy()
    out["is_movie"] = (out["type"] == MOVIE).astype(int)
    out["is_tv"] = (out["type"] == TV_SHOW).astype(int)
    return out


# --------------------------
# Summary (filter independent)
# --------------------------
def summary(store: CatalogStore) -> dict:
    total_titles = store.count_titles()
    total_movies = store.count_by_type(MOVIE)
    total_tv = store.count_by_type(TV_SHOW)
    total_genres = store.count_genres()
    total_countries = store.count_countries()

    year_min, year_max = store.year_bounds()

    top_genres = store.genre_association_counts()
    top_countries = store.country_association_counts()

    return {
        "totalTitles": total_titles,
        "totalMovies": total_movies,
        "totalTVShows": total_tv,
        "totalGenres": total_genres,
        "totalCountries": total_countries,
        "yearRange": [
            year_min if year_min else SUMMARY_YEAR_FLOOR,
            year_max if year_max else datetime.date.today().year,
        ],
        "topGenre": str(top_genres["name"].iloc[0]) if not top_genres.empty else "N/A",
        "topCountry": str(top_countries["name"].iloc[0]) if not top_countries.empty else "N/A",
    }


# --------------------------
# Timeline
# --------------------------
def timeline(store: CatalogStore, spec: FilterSpec) -> list[dict]:
    """
    Titles per release year, split by type; ascending by year.
    Years without matches are absent.
    """
    titles = store.fetch_titles(build_query(spec))
    if titles.empty:
        return []

    titles = titles[["release_year", "type"]].copy()
    titles["is_movie"] = (titles["type"] == MOVIE).astype(int)

    per_year = titles.groupby("release_year").agg(
        total=("is_movie", "size"),
        movies=("is_movie", "sum"),
    ).sort_index()

    rows = []
    for year, r in per_year.iterrows():
        movies = int(r["movies"])
        total = int(r["total"])
        rows.append({"year": int(year), "movies": movies, "tvShows": total - movies, "total": total})
    return rows


# --------------------------
# Genre stats
# --------------------------
def raw_genre_stats(store: CatalogStore, spec: FilterSpec) -> list[dict]:
    """
    Per raw genre: matching titles, split by type, plus mean release year.
    The filter's genre restriction is ignored. Zero-count genres are dropped.
    """
    titles = store.fetch_titles(build_query(spec, ignore_genres=True))
    if titles.empty:
        return []

    g = _type_flags(titles)[["release_year", "is_movie", "is_tv", "genres"]]
    g = g.explode("genres").dropna(subset=["genres"]).rename(columns={"genres": "genre"})

    agg = g.groupby("genre").agg(
        count=("genre", "size"),
        year_sum=("release_year", "sum"),
        movieCount=("is_movie", "sum"),
        tvShowCount=("is_tv", "sum"),
    )

    rows = []
    for name in store.genres()["name"]:
        if name not in agg.index:
            continue
        r = agg.loc[name]
        count = int(r["count"])
        rows.append({
            "name": name,
            "count": count,
            "avgYear": round_half_up(r["year_sum"] / count) if count else 0,
            "movieCount": int(r["movieCount"]),
            "tvShowCount": int(r["tvShowCount"]),
        })

    return sorted(rows, key=lambda r: r["count"], reverse=True)


def genre_stats(store: CatalogStore, spec: FilterSpec) -> list[dict]:
    """Raw genre stats merged into canonical buckets, most titles first."""
    return merge_stats(raw_genre_stats(store, spec))


# --------------------------
# Country stats
# --------------------------
def _country_associations(titles: pd.DataFrame, primary_only: bool) -> pd.DataFrame:
    """One row per (title, counted country) under the active country mode."""
    cols = ["id", "type", "genres"]
    if primary_only:
        assoc = titles[cols + ["primary_country"]].rename(columns={"primary_country": "country"})
    else:
        assoc = titles[cols + ["countries"]].explode("countries").rename(columns={"countries": "country"})
    return assoc.dropna(subset=["country"])


def _top_genres(assoc: pd.DataFrame, k: int) -> dict:
    """country -> k most frequent raw genres (first-seen order breaks ties)."""
    pairs = assoc[["country", "genres"]].explode("genres").dropna(subset=["genres"])
    if pairs.empty:
        return {}
    counts = pairs.groupby(["country", "genres"], sort=False).size().rename("n").reset_index()
    counts = counts.sort_values("n", ascending=False, kind="stable")
    return counts.groupby("country", sort=False)["genres"].apply(lambda s: list(s.head(k))).to_dict()


def country_stats(store: CatalogStore, spec: FilterSpec, include_top_genres: bool = True) -> list[dict]:
    """
    Per country: matching titles under the country mode, split by type.
    The filter's country restriction is ignored. Zero-count countries are dropped.
    """
    titles = store.fetch_titles(build_query(spec, ignore_countries=True))
    if titles.empty:
        return []

    assoc = _country_associations(titles, spec.primary_only)
    if assoc.empty:
        return []

    flagged = _type_flags(assoc)
    agg = flagged.groupby("country").agg(
        count=("id", "size"),
        movieCount=("is_movie", "sum"),
        tvShowCount=("is_tv", "sum"),
    )
    top = _top_genres(assoc, TOP_GENRES_PER_COUNTRY) if include_top_genres else {}

    rows = []
    for _, c in store.countries().iterrows():
        name = c["name"]
        if name not in agg.index:
            continue
        r = agg.loc[name]
        row = {
            "country": name,
            "iso": _clean(c["code"]),
            "count": int(r["count"]),
            "movieCount": int(r["movieCount"]),
            "tvShowCount": int(r["tvShowCount"]),
        }
        if include_top_genres:
            row["topGenres"] = top.get(name, [])
        rows.append(row)

    return sorted(rows, key=lambda r: r["count"], reverse=True)


# --------------------------
# Scatter / detail projection
# --------------------------
def scatter(store: CatalogStore, spec: FilterSpec, limit: int = SCATTER_LIMIT_DEFAULT) -> list[dict]:
    """
    First `limit` matching titles in catalog order, minus those without genres.
    """
    titles = store.fetch_titles(build_query(spec), limit=limit)

    rows = []
    for _, t in titles.iterrows():
        if not t["genres"]:
            continue

        if spec.primary_only:
            country = t["primary_country"]
        else:
            country = t["countries"][0] if t["countries"] else None

        rows.append({
            "id": int(t["id"]),
            "title": _clean(t["title"]),
            "type": _clean(t["type"]),
            "releaseYear": int(t["release_year"]),
            "genre": t["genres"][0],
            "country": _clean(country) or "Unknown",
            "duration": parse_duration(t["duration"], t["type"]),
        })
    return rows


# --------------------------
# Search
# --------------------------
def search(store: CatalogStore, query: str, limit: int = SEARCH_LIMIT_DEFAULT) -> dict:
    """Case-insensitive substring match on the title name, newest first."""
    q = (query or "").strip()
    if len(q) < SEARCH_MIN_QUERY_LENGTH:
        return {"results": []}

    if limit <= 0:
        limit = SEARCH_LIMIT_DEFAULT
    limit = min(limit, SEARCH_LIMIT_MAX)
    titles = store.fetch_titles(
        TitleQuery(name_contains=q),
        order_by="release_year",
        descending=True,
        limit=limit,
    )
    return {"results": [flatten_title(t) for _, t in titles.iterrows()]}


# --------------------------
# Paginated titles
# --------------------------
def titles_page(
    store: CatalogStore,
    spec: FilterSpec,
    limit: int = TITLES_LIMIT_DEFAULT,
    offset: int = 0,
) -> dict:
    if limit <= 0:
        limit = TITLES_LIMIT_DEFAULT
    offset = max(offset, 0)

    query = build_query(spec)
    titles = store.fetch_titles(query, order_by="release_year", descending=True, limit=limit, offset=offset)
    total = store.count_titles(query)

    return {
        "titles": [flatten_title(t) for _, t in titles.iterrows()],
        "total": total,
        "limit": limit,
        "offset": offset,
    }
