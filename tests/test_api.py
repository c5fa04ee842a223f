# tests/test_api.py

import logging

import pytest

from catalog_insights import api
from catalog_insights.errors import StoreUnavailable


class BrokenStore:
    """Every read fails the way an unreachable store would."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StoreUnavailable("connection refused: /var/lib/catalog/titles.csv")
        return fail


ERRORS = {
    "summary": "Failed to fetch summary data",
    "timeline": "Failed to fetch timeline data",
    "genres": "Failed to fetch genre data",
    "countries": "Failed to fetch country data",
    "scatter": "Failed to fetch scatter data",
    "search": "Failed to search titles",
    "insights": "Failed to generate insights",
    "titles": "Failed to fetch titles",
}


# --------------------------
# Parameter parsing
# --------------------------
@pytest.mark.parametrize("value,expected", [
    (None, 10),
    ("", 10),
    ("abc", 10),
    ("0", 10),
    ("-4", 10),
    ("5", 5),
    ("50", 20),
])
def test_parse_limit_with_cap(value, expected):
    assert api.parse_limit(value, 10, 20) == expected


def test_parse_limit_without_cap():
    assert api.parse_limit("100000", 500) == 100000


@pytest.mark.parametrize("value,expected", [(None, 0), ("x", 0), ("-3", 0), ("7", 7)])
def test_parse_offset(value, expected):
    assert api.parse_offset(value) == expected


# --------------------------
# Handlers
# --------------------------
def test_every_endpoint_answers(store):
    for name in ERRORS:
        body, status = api.handle(store, name, {"q": "night"})
        assert status == 200, name


def test_timeline_params(store):
    body, status = api.handle(store, "timeline", {"types": "TVShow", "yearMin": "2021", "yearMax": "abc"})
    assert status == 200
    assert body == [{"year": 2021, "movies": 0, "tvShows": 2, "total": 2}]


def test_genre_filter_uses_canonical_names(store):
    body, _ = api.handle(store, "titles", {"genres": "Documentary"})
    assert [t["title"] for t in body["titles"]] == ["Quiet Planet"]


def test_country_mode_param(store):
    body, _ = api.handle(store, "countries", {"countryMode": "primary"})
    assert "India" not in [c["country"] for c in body]

    # unknown modes count every listed country
    body, _ = api.handle(store, "countries", {"countryMode": "bogus"})
    assert "India" in [c["country"] for c in body]


def test_scatter_limit_param(store):
    body, _ = api.handle(store, "scatter", {"limit": "2"})
    assert len(body) == 2
    body, _ = api.handle(store, "scatter", {"limit": "nope"})
    assert len(body) == 6


def test_search_params(store):
    body, status = api.handle(store, "search", {"q": "NIGHT", "limit": "1"})
    assert status == 200
    assert [r["title"] for r in body["results"]] == ["Seoul Nights"]

    body, _ = api.handle(store, "search", {})
    assert body == {"results": []}


def test_titles_defaults(store):
    body, _ = api.handle(store, "titles")
    assert (body["limit"], body["offset"], body["total"]) == (500, 0, 6)

    body, _ = api.handle(store, "titles", {"limit": "1", "offset": "-9"})
    assert (body["limit"], body["offset"]) == (1, 0)
    assert len(body["titles"]) == 1


def test_unknown_endpoint(store):
    body, status = api.handle(store, "ratings")
    assert status == 404
    assert "error" in body


# --------------------------
# Failure boundary
# --------------------------
@pytest.mark.parametrize("name,message", sorted(ERRORS.items()))
def test_store_failure_is_generic(name, message, caplog):
    with caplog.at_level(logging.ERROR, logger="catalog_insights.api"):
        body, status = api.handle(BrokenStore(), name, {"q": "night"})

    assert status == 500
    assert body == {"error": message}
    assert message in caplog.text


def test_corrupt_view_surfaces_as_failure(store):
    store._view = store._view.drop(columns=["type"])
    body, status = api.handle(store, "summary")
    assert (body, status) == ({"error": "Failed to fetch summary data"}, 500)


def test_programming_errors_are_not_masked(store):
    with pytest.raises(AttributeError):
        store.count_titles("not a query")
