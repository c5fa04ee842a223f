# src/app/pages/2_Country_Map.py

import streamlit as st
import pandas as pd
import plotly.express as px

from catalog_insights.dashboard import THEMES, apply_theme, call, sidebar_filters


st.set_page_config(page_title="Country Map", layout="wide")
st.title("🌍 Country Map")
st.caption("Where the catalog is produced. Switch to 'primary' to count only each title's first country.")

params = sidebar_filters(include_countries=False)
theme = st.session_state.get("theme", "Light")

countries = pd.DataFrame(call("countries", params))
if countries.empty:
    st.info("No titles match the current filters.")
    st.stop()

mapped = countries.dropna(subset=["iso"])
fig = px.choropleth(
    mapped,
    locations="iso",
    color="count",
    hover_name="country",
    hover_data={"movieCount": True, "tvShowCount": True, "iso": False},
    color_continuous_scale=THEMES[theme]["scale"],
    projection="natural earth",
    title="Titles by Production Country",
)
st.plotly_chart(apply_theme(fig, theme), use_container_width=True)

unmapped = len(countries) - len(mapped)
if unmapped:
    st.caption(f"{unmapped} countries have no ISO code and are not drawn on the map.")

st.divider()

st.subheader("📋 Country Table")
table = countries.copy()
table["topGenres"] = table["topGenres"].apply(lambda g: ", ".join(g))
st.dataframe(table, use_container_width=True)
