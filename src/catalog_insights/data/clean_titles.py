# src/catalog_insights/data/clean_titles.py

from __future__ import annotations
import os
import pandas as pd
import numpy as np

from catalog_insights.config import RAW_PATH, INTERIM_DIR, TABLE_FILES
from catalog_insights.data.country_codes import get_country_code


TITLE_COLUMNS = [
    "id", "show_id", "type", "title", "director", "cast",
    "date_added", "release_year", "rating", "duration", "description",
]


def _standardize_colnames(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = (
        df.columns
        .astype(str)
        .str.strip()
        .str.lower()
        .str.replace(r"[^\w]+", "_", regex=True)
        .str.replace(r"__+", "_", regex=True)
        .str.strip("_")
    )
    return df


def _clean_strings(df: pd.DataFrame) -> pd.DataFrame:
    """
    Strip whitespace and turn empty / "nan" tokens into NaN.
    Case is kept: genre and country labels are displayed as-is.
    """
    df = df.copy()
    obj_cols = df.select_dtypes(include=["object", "string"]).columns
    for c in obj_cols:
        df[c] = df[c].astype(str).str.strip()
        df[c] = df[c].replace({"nan": np.nan, "None": np.nan, "": np.nan})
    return df


def _parse_date_added(df: pd.DataFrame) -> pd.DataFrame:
    # "September 25, 2021"
    df = df.copy()
    if "date_added" in df.columns:
        df["date_added"] = pd.to_datetime(df["date_added"], errors="coerce")
    else:
        df["date_added"] = pd.NaT
    return df


def _parse_release_year(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    if "release_year" in df.columns:
        df["release_year"] = pd.to_numeric(df["release_year"], errors="coerce").fillna(0).astype(int)
    else:
        df["release_year"] = 0
    return df


def split_and_clean(value) -> list[str]:
    """
    "Dramas, International Movies, Dramas" -> ["Dramas", "International Movies"]
    Order is kept (the first country is the primary one); repeats are dropped.
    """
    if not isinstance(value, str) or not value.strip():
        return []
    seen = []
    for part in value.split(","):
        part = part.strip()
        if part and part not in seen:
            seen.append(part)
    return seen


def _dedupe(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per external show id. Same-named titles with different ids
    are distinct catalog entries and stay.
    """
    df = df.copy()
    if "show_id" in df.columns:
        df = df.drop_duplicates(subset=["show_id"])
    else:
        df = df.drop_duplicates()
    return df


def clean_titles_data(raw_path: str = RAW_PATH) -> pd.DataFrame:
    df = pd.read_csv(raw_path, dtype=str)

    df = _standardize_colnames(df)
    df = _clean_strings(df)
    df = _parse_date_added(df)
    df = _parse_release_year(df)
    df = _dedupe(df)

    for c in TITLE_COLUMNS[1:]:
        if c not in df.columns:
            df[c] = np.nan

    df = df.reset_index(drop=True)
    df["id"] = np.arange(1, len(df) + 1)
    df["genres"] = df["listed_in"].apply(split_and_clean) if "listed_in" in df.columns else [[] for _ in range(len(df))]
    df["countries"] = df["country"].apply(split_and_clean) if "country" in df.columns else [[] for _ in range(len(df))]

    return df


def build_tables(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """
    Split the cleaned titles frame into relational tables:
      titles, genres, countries, title_genres, title_countries
    Genre / country ids follow first-appearance order in the source file.
    """
    titles = df[TITLE_COLUMNS].copy()

    # --- genres
    tg = df[["id", "genres"]].explode("genres").dropna(subset=["genres"])
    tg = tg.rename(columns={"id": "title_id", "genres": "name"}).astype({"title_id": int})
    tg["position"] = tg.groupby("title_id").cumcount()

    genres = pd.DataFrame({"name": pd.unique(tg["name"])})
    genres["id"] = np.arange(1, len(genres) + 1)
    genre_ids = dict(zip(genres["name"], genres["id"]))
    tg["genre_id"] = tg["name"].map(genre_ids).astype(int)

    # --- countries
    tc = df[["id", "countries"]].explode("countries").dropna(subset=["countries"])
    tc = tc.rename(columns={"id": "title_id", "countries": "name"}).astype({"title_id": int})
    tc["position"] = tc.groupby("title_id").cumcount()
    tc["is_primary"] = tc["position"] == 0

    countries = pd.DataFrame({"name": pd.unique(tc["name"])})
    countries["id"] = np.arange(1, len(countries) + 1)
    countries["code"] = countries["name"].apply(get_country_code)
    country_ids = dict(zip(countries["name"], countries["id"]))
    tc["country_id"] = tc["name"].map(country_ids).astype(int)

    return {
        "titles": titles.reset_index(drop=True),
        "genres": genres[["id", "name"]],
        "countries": countries[["id", "name", "code"]],
        "title_genres": tg[["title_id", "genre_id", "position"]].reset_index(drop=True),
        "title_countries": tc[["title_id", "country_id", "is_primary", "position"]].reset_index(drop=True),
    }


def save_tables(tables: dict[str, pd.DataFrame], out_dir: str = INTERIM_DIR) -> None:
    os.makedirs(out_dir, exist_ok=True)
    for name, filename in TABLE_FILES.items():
        tables[name].to_csv(os.path.join(out_dir, filename), index=False)


def main():
    if not os.path.exists(RAW_PATH):
        print("❌ CSV file not found at:", RAW_PATH)
        print("Download netflix_titles.csv from https://www.kaggle.com/datasets/shivamb/netflix-shows")
        raise SystemExit(1)

    df_clean = clean_titles_data(RAW_PATH)
    tables = build_tables(df_clean)
    save_tables(tables)

    print("✅ Catalog tables saved to:", INTERIM_DIR)
    print("Titles:", len(tables["titles"]))
    print("Genres:", len(tables["genres"]))
    print("Countries:", len(tables["countries"]))

    # quick checks
    print("Type counts:\n", tables["titles"]["type"].value_counts())
    unmapped = tables["countries"]["code"].isna().sum()
    print("Countries without ISO code:", unmapped)


if __name__ == "__main__":
    main()
