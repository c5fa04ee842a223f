# tests/conftest.py

import pandas as pd
import pytest

from catalog_insights.data.clean_titles import TITLE_COLUMNS, build_tables
from catalog_insights.data.store import CatalogStore


# 3 movies (2020, 2020, 2021) and 3 TV shows (2020, 2021, 2021)
CATALOG = [
    {"type": "Movie", "title": "Midnight Drama", "release_year": 2020, "duration": "90 min",
     "date_added": pd.Timestamp("2021-09-25"), "rating": "PG-13",
     "genres": ["Dramas", "International Movies"], "countries": ["United States", "India"]},
    {"type": "Movie", "title": "Laugh Track", "release_year": 2020, "duration": "100 min",
     "genres": ["Comedies"], "countries": ["United States"]},
    {"type": "Movie", "title": "Space Saga", "release_year": 2021, "duration": "120 min",
     "genres": ["Sci-Fi & Fantasy", "Dramas"], "countries": ["United Kingdom", "United States"]},
    {"type": "TV Show", "title": "Crown Court", "release_year": 2020, "duration": "2 Seasons",
     "genres": ["TV Dramas", "British TV Shows"], "countries": ["United Kingdom"]},
    {"type": "TV Show", "title": "Seoul Nights", "release_year": 2021, "duration": "1 Season",
     "genres": ["Korean TV Shows", "TV Dramas"], "countries": ["South Korea"]},
    {"type": "TV Show", "title": "Quiet Planet", "release_year": 2021, "duration": None,
     "genres": ["Docuseries"], "countries": []},
]


def make_tables(rows) -> dict:
    df = pd.DataFrame(rows)
    for c in TITLE_COLUMNS[1:]:
        if c not in df.columns:
            df[c] = None
    for c in ["genres", "countries"]:
        if c not in df.columns:
            df[c] = [[] for _ in range(len(df))]
    df["id"] = range(1, len(df) + 1)
    df["show_id"] = [f"s{i}" for i in df["id"]]
    return build_tables(df)


def make_store(rows) -> CatalogStore:
    return CatalogStore(**make_tables(rows))


@pytest.fixture
def store():
    return make_store(CATALOG)


@pytest.fixture
def empty_store():
    return make_store([])
