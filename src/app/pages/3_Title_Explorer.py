# src/app/pages/3_Title_Explorer.py

import streamlit as st
import pandas as pd
import plotly.express as px

from catalog_insights.dashboard import apply_theme, call, sidebar_filters, type_colors


st.set_page_config(page_title="Title Explorer", layout="wide")
st.title("🔎 Title Explorer")
st.caption("Search titles, browse the filtered catalog and compare durations.")

params = sidebar_filters()
theme = st.session_state.get("theme", "Light")

# --------------------------
# Search
# --------------------------
query = st.text_input("Search by title", placeholder="At least 2 characters")
if query:
    results = call("search", {"q": query, "limit": "8"})["results"]
    if results:
        st.dataframe(
            pd.DataFrame(results)[["title", "type", "releaseYear", "rating", "duration", "genres", "countries"]],
            use_container_width=True,
        )
    elif len(query.strip()) >= 2:
        st.write("No matching titles.")

st.divider()

# --------------------------
# Duration scatter
# --------------------------
scatter = pd.DataFrame(call("scatter", params))
if scatter.empty:
    st.info("No titles match the current filters.")
else:
    c1, c2 = st.columns(2)
    for col, type_name, unit in [(c1, "Movie", "Minutes"), (c2, "TV Show", "Seasons")]:
        part = scatter[(scatter["type"] == type_name) & scatter["duration"].notna()]
        fig = px.scatter(
            part,
            x="releaseYear",
            y="duration",
            color_discrete_sequence=[type_colors(theme)[type_name]],
            hover_name="title",
            hover_data=["genre", "country"],
            title=f"{type_name} Duration by Release Year",
            labels={"releaseYear": "Release Year", "duration": unit},
        )
        col.plotly_chart(apply_theme(fig, theme), use_container_width=True)

st.divider()

# --------------------------
# Paginated catalog
# --------------------------
st.subheader("📋 Catalog")
page_size = st.sidebar.selectbox("Rows per page", [25, 50, 100], index=1)
page = st.number_input("Page", min_value=1, value=1, step=1)

page_params = dict(params, limit=str(page_size), offset=str((int(page) - 1) * page_size))
data = call("titles", page_params)
st.write(f"Showing **{len(data['titles']):,}** of **{data['total']:,}** titles.")
if data["titles"]:
    st.dataframe(pd.DataFrame(data["titles"]), use_container_width=True)
