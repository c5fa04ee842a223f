# src/app/app.py

import streamlit as st
import pandas as pd
import plotly.express as px

from catalog_insights.dashboard import apply_theme, call, sidebar_filters, type_colors


st.set_page_config(page_title="Netflix Catalog Insights", layout="wide")

st.title("🎬 Netflix Catalog Insights")
st.caption("Timeline • Genres • Countries • Title Explorer")

params = sidebar_filters()
theme = st.session_state.get("theme", "Light")

# KPIs (whole catalog)
summary = call("summary")
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Titles", f"{summary['totalTitles']:,}")
c2.metric("Movies", f"{summary['totalMovies']:,}")
c3.metric("TV Shows", f"{summary['totalTVShows']:,}")
c4.metric("Years", f"{summary['yearRange'][0]}–{summary['yearRange'][1]}")

c5, c6, c7, c8 = st.columns(4)
c5.metric("Genres", summary["totalGenres"])
c6.metric("Countries", summary["totalCountries"])
c7.metric("Top Genre", summary["topGenre"])
c8.metric("Top Country", summary["topCountry"])

st.divider()

# --------------------------
# Insights
# --------------------------
st.subheader("💡 Insights")
for insight in call("insights", params):
    icon = {"info": "ℹ️", "trend": "📈", "highlight": "⭐"}.get(insight["kind"], "•")
    st.markdown(f"{icon} **{insight['title']}**: {insight['text']}")

st.divider()

# --------------------------
# Timeline
# --------------------------
timeline = pd.DataFrame(call("timeline", params))
if timeline.empty:
    st.info("No titles match the current filters.")
else:
    fig = px.area(
        timeline,
        x="year",
        y=["movies", "tvShows"],
        title="Titles by Release Year",
        labels={"year": "Release Year", "value": "Titles", "variable": "Type"},
        color_discrete_map=type_colors(theme),
    )
    st.plotly_chart(apply_theme(fig, theme), use_container_width=True)
