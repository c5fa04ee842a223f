# src/app/pages/1_Genre_Insights.py

import streamlit as st
import pandas as pd
import plotly.express as px

from catalog_insights.dashboard import apply_theme, call, genre_trend_frame, sidebar_filters, type_colors


st.set_page_config(page_title="Genre Insights", layout="wide")
st.title("🎭 Genre Insights")
st.caption("Consolidated genres (e.g. 'Dramas' + 'TV Dramas' → 'Drama') for the current filters.")

# genre stats span every genre, so no genre picker here
params = sidebar_filters(include_genres=False)
theme = st.session_state.get("theme", "Light")

genres = pd.DataFrame(call("genres", params))
if genres.empty:
    st.info("No titles match the current filters.")
    st.stop()

top_n = st.sidebar.slider("Top N genres", min_value=5, max_value=30, value=15, step=5)
top = genres.head(top_n)

c1, c2 = st.columns(2)

fig1 = px.bar(
    top,
    x="name",
    y=["movieCount", "tvShowCount"],
    title="Titles per Genre",
    labels={"name": "Genre", "value": "Titles", "variable": "Type"},
    color_discrete_map={"movieCount": type_colors(theme)["Movie"], "tvShowCount": type_colors(theme)["TV Show"]},
)
c1.plotly_chart(apply_theme(fig1, theme), use_container_width=True)

fig2 = px.scatter(
    top,
    x="avgYear",
    y="count",
    size="count",
    hover_name="name",
    title="Average Release Year vs. Volume",
    labels={"avgYear": "Avg Release Year", "count": "Titles"},
)
c2.plotly_chart(apply_theme(fig2, theme), use_container_width=True)

st.divider()

# --------------------------
# Genre trend over time
# --------------------------
trend = genre_trend_frame(call("scatter", params), top_n=5)
if not trend.empty:
    fig3 = px.line(
        trend,
        x="releaseYear",
        y="count",
        color="genre",
        markers=True,
        title="Top Genres by Release Year",
        labels={"releaseYear": "Release Year", "count": "Titles", "genre": "Genre"},
    )
    st.plotly_chart(apply_theme(fig3, theme), use_container_width=True)
    st.caption("Built from the first matching titles, each under its first listed genre.")

st.divider()

st.subheader("📋 Genre Summary Table")
st.dataframe(top, use_container_width=True)
