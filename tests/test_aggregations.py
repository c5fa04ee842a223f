# tests/test_aggregations.py

import datetime

import pytest

from catalog_insights.analytics.aggregations import (
    country_stats,
    genre_stats,
    parse_duration,
    raw_genre_stats,
    scatter,
    search,
    summary,
    timeline,
    titles_page,
)
from catalog_insights.features.filters import FilterSpec

from conftest import CATALOG, make_store


ALL = FilterSpec()


# --------------------------
# Summary
# --------------------------
def test_summary_counts(store):
    assert summary(store) == {
        "totalTitles": 6,
        "totalMovies": 3,
        "totalTVShows": 3,
        "totalGenres": 8,
        "totalCountries": 4,
        "yearRange": [2020, 2021],
        "topGenre": "Dramas",
        "topCountry": "United States",
    }


def test_summary_on_empty_catalog(empty_store):
    result = summary(empty_store)
    assert result["totalTitles"] == 0
    assert result["yearRange"] == [1900, datetime.date.today().year]
    assert result["topGenre"] == "N/A"
    assert result["topCountry"] == "N/A"


# --------------------------
# Timeline
# --------------------------
def test_timeline_groups_by_year(store):
    assert timeline(store, ALL) == [
        {"year": 2020, "movies": 2, "tvShows": 1, "total": 3},
        {"year": 2021, "movies": 1, "tvShows": 2, "total": 3},
    ]


def test_timeline_canonical_genre_matches_raw_labels(store):
    # "Drama" covers Dramas (titles 1, 3) and TV Dramas (titles 4, 5)
    spec = FilterSpec.create(genres=["Drama"])
    assert timeline(store, spec) == [
        {"year": 2020, "movies": 1, "tvShows": 1, "total": 2},
        {"year": 2021, "movies": 1, "tvShows": 1, "total": 2},
    ]


def test_timeline_year_and_type_filters(store):
    spec = FilterSpec.create(types=["TVShow"], year_range=(2021, 2021))
    assert timeline(store, spec) == [{"year": 2021, "movies": 0, "tvShows": 2, "total": 2}]


def test_timeline_country_mode(store):
    # India is only ever a secondary country
    assert timeline(store, FilterSpec.create(countries=["India"], country_mode="primary")) == []
    assert timeline(store, FilterSpec.create(countries=["India"])) == [
        {"year": 2020, "movies": 1, "tvShows": 0, "total": 1},
    ]


@pytest.mark.parametrize("spec", [
    FilterSpec(),
    FilterSpec.create(genres=["International"]),
    FilterSpec.create(countries=["United Kingdom"], country_mode="primary"),
    FilterSpec.create(types=["Movie"], year_range=(2000, 2020)),
])
def test_timeline_is_ordered_and_consistent(store, spec):
    rows = timeline(store, spec)
    years = [r["year"] for r in rows]
    assert years == sorted(set(years))
    assert all(r["movies"] + r["tvShows"] == r["total"] for r in rows)


# --------------------------
# Genre stats
# --------------------------
def test_raw_genre_stats(store):
    rows = {r["name"]: r for r in raw_genre_stats(store, ALL)}
    assert rows["Dramas"] == {"name": "Dramas", "count": 2, "avgYear": 2021, "movieCount": 2, "tvShowCount": 0}
    assert rows["Docuseries"]["count"] == 1
    assert len(rows) == 8


def test_genre_stats_consolidates(store):
    assert genre_stats(store, ALL) == [
        {"name": "Drama", "count": 4, "avgYear": 2021, "movieCount": 2, "tvShowCount": 2},
        {"name": "International", "count": 3, "avgYear": 2020, "movieCount": 1, "tvShowCount": 2},
        {"name": "Comedy", "count": 1, "avgYear": 2020, "movieCount": 1, "tvShowCount": 0},
        {"name": "Sci-Fi & Fantasy", "count": 1, "avgYear": 2021, "movieCount": 1, "tvShowCount": 0},
        {"name": "Documentary", "count": 1, "avgYear": 2021, "movieCount": 0, "tvShowCount": 1},
    ]


def test_genre_stats_ignores_genre_restriction(store):
    assert genre_stats(store, FilterSpec.create(genres=["Comedy"])) == genre_stats(store, ALL)


def test_genre_stats_drops_unmatched_genres(store):
    rows = genre_stats(store, FilterSpec.create(types=["Movie"]))
    assert [r["name"] for r in rows] == ["Drama", "International", "Comedy", "Sci-Fi & Fantasy"]
    assert all(r["count"] > 0 for r in rows)
    assert all(a["count"] >= b["count"] for a, b in zip(rows, rows[1:]))


def test_genre_stats_empty(store):
    assert genre_stats(store, FilterSpec.create(year_range=(1950, 1960))) == []


# --------------------------
# Country stats
# --------------------------
def test_country_stats_all_mode(store):
    rows = country_stats(store, ALL)
    assert [r["country"] for r in rows] == ["United States", "United Kingdom", "India", "South Korea"]

    us = rows[0]
    assert us == {
        "country": "United States",
        "iso": "USA",
        "count": 3,
        "movieCount": 3,
        "tvShowCount": 0,
        "topGenres": ["Dramas", "International Movies", "Comedies"],
    }
    uk = rows[1]
    assert (uk["movieCount"], uk["tvShowCount"]) == (1, 1)
    assert uk["topGenres"] == ["Sci-Fi & Fantasy", "Dramas", "TV Dramas"]


def test_country_stats_primary_mode_excludes_secondary_countries(store):
    rows = {r["country"]: r for r in country_stats(store, FilterSpec.create(country_mode="primary"))}
    assert "India" not in rows
    assert rows["United States"]["count"] == 2
    assert rows["United Kingdom"]["count"] == 2
    assert rows["South Korea"]["count"] == 1


def test_country_stats_without_top_genres(store):
    rows = country_stats(store, ALL, include_top_genres=False)
    assert "topGenres" not in rows[0]


def test_country_stats_ignores_country_restriction(store):
    assert country_stats(store, FilterSpec.create(countries=["India"])) == country_stats(store, ALL)


# --------------------------
# Scatter
# --------------------------
@pytest.mark.parametrize("duration,title_type,expected", [
    ("90 min", "Movie", 90),
    ("2 Seasons", "TV Show", 2),
    ("1 Season", "TV Show", 1),
    (None, "Movie", None),
    ("2 Seasons", "Movie", None),
    ("feature length", "Movie", None),
])
def test_parse_duration(duration, title_type, expected):
    assert parse_duration(duration, title_type) == expected


def test_scatter_rows(store):
    rows = scatter(store, ALL)
    assert len(rows) == 6
    assert rows[0] == {
        "id": 1,
        "title": "Midnight Drama",
        "type": "Movie",
        "releaseYear": 2020,
        "genre": "Dramas",
        "country": "United States",
        "duration": 90,
    }
    by_title = {r["title"]: r for r in rows}
    assert by_title["Crown Court"]["duration"] == 2
    assert by_title["Quiet Planet"]["country"] == "Unknown"
    assert by_title["Quiet Planet"]["duration"] is None


def test_scatter_primary_country(store):
    rows = {r["title"]: r for r in scatter(store, FilterSpec.create(country_mode="primary"))}
    assert rows["Space Saga"]["country"] == "United Kingdom"


def test_scatter_limit_and_genreless_titles():
    genreless = {"type": "Movie", "title": "Untagged", "release_year": 2019, "duration": "80 min",
                 "genres": [], "countries": ["France"]}
    store = make_store([genreless] + CATALOG)

    rows = scatter(store, ALL)
    assert "Untagged" not in [r["title"] for r in rows]
    assert len(rows) == 6

    # the cap applies before genre-less titles are dropped
    assert [r["title"] for r in scatter(store, ALL, limit=2)] == ["Midnight Drama"]


# --------------------------
# Search
# --------------------------
@pytest.mark.parametrize("query", ["", "a", "  n  "])
def test_search_short_query_is_empty(store, query):
    assert search(store, query) == {"results": []}


def test_search_is_case_insensitive_and_newest_first(store):
    results = search(store, "NIGHT")["results"]
    assert [r["title"] for r in results] == ["Seoul Nights", "Midnight Drama"]
    years = [r["releaseYear"] for r in results]
    assert years == sorted(years, reverse=True)


def test_search_limit(store):
    assert len(search(store, "night", limit=1)["results"]) == 1


def test_search_flattens_titles(store):
    result = search(store, "midnight")["results"][0]
    assert result == {
        "id": 1,
        "showId": "s1",
        "type": "Movie",
        "title": "Midnight Drama",
        "director": None,
        "cast": None,
        "dateAdded": "2021-09-25T00:00:00",
        "releaseYear": 2020,
        "rating": "PG-13",
        "duration": "90 min",
        "description": None,
        "countries": ["United States", "India"],
        "genres": ["Dramas", "International Movies"],
    }


# --------------------------
# Titles page
# --------------------------
def test_titles_page_sorted_and_paginated(store):
    page = titles_page(store, ALL, limit=2, offset=0)
    assert page["total"] == 6
    assert (page["limit"], page["offset"]) == (2, 0)
    assert [t["title"] for t in page["titles"]] == ["Space Saga", "Seoul Nights"]

    page = titles_page(store, ALL, limit=2, offset=2)
    assert [t["title"] for t in page["titles"]] == ["Quiet Planet", "Midnight Drama"]


def test_titles_page_total_respects_filter(store):
    page = titles_page(store, FilterSpec.create(types=["Movie"]), limit=1)
    assert page["total"] == 3
    assert len(page["titles"]) == 1


def test_titles_page_past_the_end(store):
    page = titles_page(store, ALL, limit=10, offset=50)
    assert page["titles"] == []
    assert page["total"] == 6


def test_aggregations_do_not_mutate_store(store):
    before = titles_page(store, ALL)
    genre_stats(store, ALL)
    country_stats(store, FilterSpec.create(country_mode="primary"))
    scatter(store, ALL)
    assert titles_page(store, ALL) == before


@pytest.mark.parametrize("limit", [0, -1])
def test_search_non_positive_limit_uses_default(store, limit):
    results = search(store, "night", limit=limit)["results"]
    assert [r["title"] for r in results] == ["Seoul Nights", "Midnight Drama"]


def test_titles_page_clamps_limit_and_offset(store):
    page = titles_page(store, ALL, limit=-1, offset=-3)
    assert (page["limit"], page["offset"]) == (500, 0)
    assert len(page["titles"]) == 6
