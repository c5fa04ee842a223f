# src/catalog_insights/data/store.py

from __future__ import annotations
import functools
import logging
import os
from typing import Optional

import pandas as pd

from catalog_insights.config import INTERIM_DIR, TABLE_FILES
from catalog_insights.errors import StoreUnavailable
from catalog_insights.features.filters import TitleQuery


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "titles": ["id", "show_id", "type", "title", "release_year"],
    "genres": ["id", "name"],
    "countries": ["id", "name"],
    "title_genres": ["title_id", "genre_id"],
    "title_countries": ["title_id", "country_id", "is_primary"],
}

# Text columns must stay strings on reload (a title can be "1920")
TEXT_COLUMNS = ["show_id", "type", "title", "director", "cast", "rating", "duration", "description"]


def _read(method):
    """
    A missing column (KeyError) or an unparseable value (ValueError) inside
    a read means the loaded tables are broken: surface it as StoreUnavailable.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except StoreUnavailable:
            raise
        except (KeyError, ValueError) as exc:
            raise StoreUnavailable(f"{method.__name__} failed: {exc}") from exc
    return wrapper


class CatalogStore:
    """
    In-memory relational catalog (titles, genres, countries and the two
    association tables), read-only once built.

    Reads go through a denormalized view: one row per title with
      genres           raw genre names, in listing order
      countries        country names, in listing order
      primary_country  name of the is_primary association (or None)
    """

    def __init__(
        self,
        titles: pd.DataFrame,
        genres: pd.DataFrame,
        countries: pd.DataFrame,
        title_genres: pd.DataFrame,
        title_countries: pd.DataFrame,
    ):
        tables = {
            "titles": titles,
            "genres": genres,
            "countries": countries,
            "title_genres": title_genres,
            "title_countries": title_countries,
        }
        for name, cols in REQUIRED_COLUMNS.items():
            missing = [c for c in cols if c not in tables[name].columns]
            if missing:
                raise StoreUnavailable(f"Table '{name}' is missing columns: {missing}")

        self._titles = titles.copy()
        self._genres = genres.sort_values("id", kind="stable").reset_index(drop=True)
        self._countries = countries.copy()
        if "code" not in self._countries.columns:
            self._countries["code"] = None
        self._countries = self._countries.sort_values("id", kind="stable").reset_index(drop=True)
        self._title_genres = title_genres.copy()
        self._title_countries = title_countries.copy()

        self._view = self._build_view()

    def _build_view(self) -> pd.DataFrame:
        view = self._titles.copy()
        view["release_year"] = pd.to_numeric(view["release_year"], errors="coerce").fillna(0).astype(int)

        tg = self._title_genres.merge(
            self._genres.rename(columns={"id": "genre_id"}), on="genre_id", how="inner"
        )
        if "position" in tg.columns:
            tg = tg.sort_values(["title_id", "position"], kind="stable")
        genre_lists = tg.groupby("title_id", sort=False)["name"].agg(list)

        tc = self._title_countries.merge(
            self._countries[["id", "name"]].rename(columns={"id": "country_id"}), on="country_id", how="inner"
        )
        if "position" in tc.columns:
            tc = tc.sort_values(["title_id", "position"], kind="stable")
        country_lists = tc.groupby("title_id", sort=False)["name"].agg(list)
        primary = tc[tc["is_primary"].astype(bool)].drop_duplicates(subset=["title_id"])
        primary_names = dict(zip(primary["title_id"], primary["name"]))

        view["genres"] = [list(genre_lists.get(i, [])) for i in view["id"]]
        view["countries"] = [list(country_lists.get(i, [])) for i in view["id"]]
        view["primary_country"] = [primary_names.get(i) for i in view["id"]]

        return view.reset_index(drop=True)

    # --------------------------
    # Predicate evaluation
    # --------------------------
    def _mask(self, query: Optional[TitleQuery]) -> pd.Series:
        view = self._view
        mask = pd.Series(True, index=view.index)
        if query is None:
            return mask

        mask &= view["release_year"].between(query.year_min, query.year_max)

        if query.types:
            mask &= view["type"].isin(list(query.types))

        if query.genres:
            wanted = query.genres
            mask &= view["genres"].map(lambda names: any(g in wanted for g in names)).astype(bool)

        if query.countries:
            wanted = query.countries
            if query.primary_only:
                mask &= view["primary_country"].isin(list(wanted))
            else:
                mask &= view["countries"].map(lambda names: any(c in wanted for c in names)).astype(bool)

        if query.name_contains:
            mask &= view["title"].fillna("").astype(str).str.contains(
                query.name_contains, case=False, regex=False
            )

        return mask

    # --------------------------
    # Reads
    # --------------------------
    @_read
    def count_titles(self, query: Optional[TitleQuery] = None) -> int:
        return int(self._mask(query).sum())

    @_read
    def count_by_type(self, type_name: str) -> int:
        return int((self._view["type"] == type_name).sum())

    @_read
    def fetch_titles(
        self,
        query: Optional[TitleQuery] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> pd.DataFrame:
        """
        Matching titles with their associations. Without order_by rows come
        back in catalog order; sorting is stable so ties keep it too.
        """
        rows = self._view[self._mask(query)]
        if order_by:
            rows = rows.sort_values(order_by, ascending=not descending, kind="stable")
        if offset > 0:
            rows = rows.iloc[offset:]
        if limit is not None and limit >= 0:
            rows = rows.iloc[:limit]
        return rows.reset_index(drop=True)

    @_read
    def genres(self) -> pd.DataFrame:
        return self._genres[["id", "name"]].copy()

    @_read
    def countries(self) -> pd.DataFrame:
        return self._countries[["id", "name", "code"]].copy()

    @_read
    def count_genres(self) -> int:
        return len(self._genres)

    @_read
    def count_countries(self) -> int:
        return len(self._countries)

    @_read
    def year_bounds(self) -> tuple[Optional[int], Optional[int]]:
        years = self._view["release_year"]
        if years.empty:
            return None, None
        return int(years.min()), int(years.max())

    @_read
    def genre_association_counts(self) -> pd.DataFrame:
        """[name, count] per genre, most associated first; ties in association-table order."""
        counts = self._title_genres.groupby("genre_id", sort=False).size().rename("count").reset_index()
        counts = counts.merge(self._genres.rename(columns={"id": "genre_id"}), on="genre_id", how="inner")
        counts = counts.sort_values("count", ascending=False, kind="stable")
        return counts[["name", "count"]].reset_index(drop=True)

    @_read
    def country_association_counts(self) -> pd.DataFrame:
        """[name, count] per country, most associated first; ties in association-table order."""
        counts = self._title_countries.groupby("country_id", sort=False).size().rename("count").reset_index()
        counts = counts.merge(
            self._countries[["id", "name"]].rename(columns={"id": "country_id"}), on="country_id", how="inner"
        )
        counts = counts.sort_values("count", ascending=False, kind="stable")
        return counts[["name", "count"]].reset_index(drop=True)


def _read_table(path: str, **kwargs) -> pd.DataFrame:
    try:
        return pd.read_csv(path, **kwargs)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise StoreUnavailable(f"Could not read catalog table {path}: {exc}") from exc


def load_store(interim_dir: str = INTERIM_DIR) -> CatalogStore:
    """
    Build a CatalogStore from the tables written by clean_titles.
    Raises StoreUnavailable when a table is missing or unreadable.
    """
    paths = {name: os.path.join(interim_dir, filename) for name, filename in TABLE_FILES.items()}

    titles = _read_table(paths["titles"], dtype={c: str for c in TEXT_COLUMNS})
    if "date_added" in titles.columns:
        titles["date_added"] = pd.to_datetime(titles["date_added"], errors="coerce")

    countries = _read_table(paths["countries"], dtype={"name": str, "code": str})
    genres = _read_table(paths["genres"], dtype={"name": str})
    title_genres = _read_table(paths["title_genres"])
    title_countries = _read_table(paths["title_countries"])

    store = CatalogStore(titles, genres, countries, title_genres, title_countries)
    logger.info(
        "Loaded catalog from %s: %d titles, %d genres, %d countries",
        interim_dir, len(titles), len(genres), len(countries),
    )
    return store
