# src/catalog_insights/features/genre_consolidation.py

from __future__ import annotations
import math
from typing import Iterable


# Raw catalog label -> canonical genre bucket
GENRE_CONSOLIDATION_MAP = {
    # drama
    "Dramas": "Drama",
    "TV Dramas": "Drama",

    # comedy
    "Comedies": "Comedy",
    "TV Comedies": "Comedy",

    # action
    "Action & Adventure": "Action & Adventure",
    "TV Action & Adventure": "Action & Adventure",

    # thriller
    "Thrillers": "Thriller",
    "TV Thrillers": "Thriller",

    # sci-fi
    "Sci-Fi & Fantasy": "Sci-Fi & Fantasy",
    "TV Sci-Fi & Fantasy": "Sci-Fi & Fantasy",

    # horror
    "Horror Movies": "Horror",
    "TV Horror": "Horror",

    # documentary
    "Documentaries": "Documentary",
    "Docuseries": "Documentary",
    "Science & Nature TV": "Documentary",

    # international
    "International Movies": "International",
    "International TV Shows": "International",
    "British TV Shows": "International",
    "Spanish-Language TV Shows": "International",
    "Korean TV Shows": "International",

    # romance
    "Romantic Movies": "Romance",
    "Romantic TV Shows": "Romance",

    # kids
    "Children & Family Movies": "Kids & Family",
    "Kids' TV": "Kids & Family",

    # anime
    "Anime Features": "Anime",
    "Anime Series": "Anime",

    # stand-up
    "Stand-Up Comedy": "Stand-Up & Talk",
    "Stand-Up Comedy & Talk Shows": "Stand-Up & Talk",

    # crime
    "Crime TV Shows": "Crime",
    "TV Mysteries": "Crime",

    "Reality TV": "Reality",
    "Teen TV Shows": "Teen",

    # classic & cult
    "Classic Movies": "Classic & Cult",
    "Cult Movies": "Classic & Cult",
    "Classic & Cult TV": "Classic & Cult",

    "Independent Movies": "Independent",
    "Music & Musicals": "Music & Musicals",
    "Sports Movies": "Sports",
    "LGBTQ Movies": "LGBTQ",
    "Faith & Spirituality": "Faith & Spirituality",
}


def round_half_up(x: float) -> int:
    """Round .5 upwards (2015.5 -> 2016), unlike Python's banker's rounding."""
    return int(math.floor(x + 0.5))


def consolidate(raw_name: str) -> str:
    return GENRE_CONSOLIDATION_MAP.get(raw_name, raw_name)


def original_names_for(canonical_name: str) -> set[str]:
    """
    Inverse lookup: every raw label that consolidates into `canonical_name`.
    A name nothing maps to is its own sole constituent.
    """
    originals = {raw for raw, canonical in GENRE_CONSOLIDATION_MAP.items() if canonical == canonical_name}
    return originals if originals else {canonical_name}


def expand_genres(names: Iterable[str]) -> frozenset[str]:
    """
    Expand UI genre names (canonical or raw) to every raw label they cover,
    so "Drama" matches titles stored as "Dramas" or "TV Dramas".
    """
    expanded = set()
    for name in names:
        expanded.add(name)
        expanded |= original_names_for(name)
    return frozenset(expanded)


def merge_stats(rows: Iterable[dict]) -> list[dict]:
    """
    Merge per-genre rows into their canonical buckets.

    Each row looks like:
      {name, count, avgYear, movieCount, tvShowCount}

    Counts are summed. avgYear is a running weighted average, each step:
      round((existing_avg * count_before + row_avg * row_count) / count_after)

    Output is sorted by count (desc); ties keep first-seen order.
    """
    merged: dict[str, dict] = {}

    for row in rows:
        name = consolidate(row["name"])
        existing = merged.get(name)

        if existing is None:
            merged[name] = {
                "name": name,
                "count": int(row["count"]),
                "avgYear": round_half_up(row["avgYear"]),
                "movieCount": int(row["movieCount"]),
                "tvShowCount": int(row["tvShowCount"]),
            }
            continue

        count_before = existing["count"]
        total = count_before + int(row["count"])

        existing["count"] = total
        existing["movieCount"] += int(row["movieCount"])
        existing["tvShowCount"] += int(row["tvShowCount"])

        # zero-count rows on both sides leave the average untouched
        if total > 0:
            existing["avgYear"] = round_half_up(
                (existing["avgYear"] * count_before + row["avgYear"] * row["count"]) / total
            )

    # sorted() is stable, so equal counts keep insertion order
    return sorted(merged.values(), key=lambda r: r["count"], reverse=True)
