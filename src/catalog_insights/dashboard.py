# src/catalog_insights/dashboard.py

from __future__ import annotations
import logging
import os

import pandas as pd
import streamlit as st

from catalog_insights import api
from catalog_insights.config import INTERIM_DIR
from catalog_insights.data.store import load_store
from catalog_insights.errors import StoreUnavailable
from catalog_insights.features.genre_consolidation import GENRE_CONSOLIDATION_MAP, consolidate


logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load the catalog"


# =========================================================
#                       THEME TOKENS
# =========================================================
THEMES = {
    "Light": {"fg": "#111827", "panel": "#f8fafc", "template": "plotly_white",
              "movie": "#E50914", "tv": "#221F1F", "scale": "Reds"},
    "Dark":  {"fg": "#e5e7eb", "panel": "#111827", "template": "plotly_dark",
              "movie": "#E50914", "tv": "#B3B3B3", "scale": "YlOrRd"},
}


def apply_theme(fig, theme: str = "Light"):
    t = THEMES.get(theme or "Light", THEMES["Light"])
    fig.update_layout(template=t["template"], paper_bgcolor=t["panel"], plot_bgcolor=t["panel"],
                      font_color=t["fg"], margin=dict(l=10, r=10, t=45, b=10))
    return fig


def type_colors(theme: str = "Light") -> dict:
    t = THEMES.get(theme or "Light", THEMES["Light"])
    return {"Movie": t["movie"], "TV Show": t["tv"], "movies": t["movie"], "tvShows": t["tv"]}


# =========================================================
#                    DATA + CALLS
# =========================================================
@st.cache_resource
def get_store(interim_dir: str):
    return load_store(interim_dir)


def require_catalog():
    """Stop the page with a hint when the ingestion step has not run or its tables are unreadable."""
    if not os.path.exists(INTERIM_DIR):
        st.error(f"Missing catalog tables in {INTERIM_DIR}. Run `python -m catalog_insights.data.clean_titles` first.")
        st.stop()
    try:
        return get_store(INTERIM_DIR)
    except StoreUnavailable:
        logger.exception("Could not load catalog from %s", INTERIM_DIR)
        st.error(LOAD_ERROR)
        st.stop()


def call(name: str, params: dict | None = None):
    """Run one endpoint; show its error body and stop on failure."""
    body, status = api.handle(require_catalog(), name, params or {})
    if status != 200:
        st.error(body.get("error", "Request failed"))
        st.stop()
    return body


# =========================================================
#                    SIDEBAR FILTERS
# =========================================================
def sidebar_filters(include_genres: bool = True, include_countries: bool = True) -> dict:
    """
    Render the shared filter widgets and return request-style params.
    Genre choices are canonical buckets; the query layer expands them.
    """
    summary = call("summary")
    year_lo, year_hi = summary["yearRange"]

    st.sidebar.header("Filters")
    params = {}

    if include_genres:
        canonical = sorted(set(GENRE_CONSOLIDATION_MAP.values()))
        picked = st.sidebar.multiselect("Genres", canonical)
        if picked:
            params["genres"] = ",".join(picked)

    if include_countries:
        countries = [c["country"] for c in call("countries")]
        picked = st.sidebar.multiselect("Countries", countries)
        if picked:
            params["countries"] = ",".join(picked)

    types = st.sidebar.multiselect("Type", ["Movie", "TV Show"])
    if types:
        params["types"] = ",".join(types)

    if year_lo < year_hi:
        y0, y1 = st.sidebar.slider("Release year", min_value=int(year_lo), max_value=int(year_hi),
                                   value=(int(year_lo), int(year_hi)))
        if y0 != year_lo:
            params["yearMin"] = str(y0)
        if y1 != year_hi:
            params["yearMax"] = str(y1)
    else:
        st.sidebar.caption(f"Release year: {year_lo}")

    mode = st.sidebar.radio("Country mode", ["all", "primary"], horizontal=True,
                            help="'primary' counts only the first listed country of each title.")
    if mode != "all":
        params["countryMode"] = mode

    st.sidebar.selectbox("Theme", list(THEMES), key="theme")
    return params


# =========================================================
#                    CHART FRAMES
# =========================================================
def genre_trend_frame(rows: list[dict], top_n: int = 5) -> pd.DataFrame:
    """
    Scatter rows -> [releaseYear, genre, count] for the top_n consolidated
    genres by total titles; ties keep first-seen order.
    """
    df = pd.DataFrame(rows, columns=["releaseYear", "genre"])
    if df.empty:
        return pd.DataFrame(columns=["releaseYear", "genre", "count"])

    df["genre"] = df["genre"].map(consolidate)
    totals = df.groupby("genre", sort=False).size().sort_values(ascending=False, kind="stable")
    top = list(totals.index[:top_n])

    trend = (
        df[df["genre"].isin(top)]
        .groupby(["releaseYear", "genre"])
        .size()
        .rename("count")
        .reset_index()
    )
    return trend.sort_values(["releaseYear", "genre"], kind="stable").reset_index(drop=True)
