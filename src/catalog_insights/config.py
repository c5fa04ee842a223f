# src/catalog_insights/config.py

from __future__ import annotations
import os


DATA_DIR = os.environ.get("CATALOG_DATA_DIR", "data")

RAW_PATH = os.path.join(DATA_DIR, "raw", "netflix_titles.csv")
INTERIM_DIR = os.path.join(DATA_DIR, "interim")

# Relational tables written by the ingestion step
TABLE_FILES = {
    "titles": "titles.csv",
    "genres": "genres.csv",
    "countries": "countries.csv",
    "title_genres": "title_genres.csv",
    "title_countries": "title_countries.csv",
}

# Query parameter defaults
YEAR_MIN_DEFAULT = 0
YEAR_MAX_DEFAULT = 9999

SCATTER_LIMIT_DEFAULT = 1000
SEARCH_LIMIT_DEFAULT = 10
SEARCH_LIMIT_MAX = 20
SEARCH_MIN_QUERY_LENGTH = 2
TITLES_LIMIT_DEFAULT = 500

TOP_GENRES_PER_COUNTRY = 3
RECENT_YEAR_CUTOFF = 2015
RECENT_MIN_DISTINCT_YEARS = 3

# Fallback year range for an empty catalog
SUMMARY_YEAR_FLOOR = 1900
