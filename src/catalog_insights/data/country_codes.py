# src/catalog_insights/data/country_codes.py

from __future__ import annotations
from typing import Optional

import pycountry


# Country names as they appear in netflix_titles.csv -> ISO 3166-1 alpha-3.
# Display only (choropleth locations); no aggregation depends on it.
COUNTRY_CODES = {
    "United States": "USA",
    "United Kingdom": "GBR",
    "India": "IND",
    "Canada": "CAN",
    "France": "FRA",
    "Japan": "JPN",
    "Spain": "ESP",
    "South Korea": "KOR",
    "Mexico": "MEX",
    "Australia": "AUS",
    "Germany": "DEU",
    "China": "CHN",
    "Brazil": "BRA",
    "Italy": "ITA",
    "Turkey": "TUR",
    "Hong Kong": "HKG",
    "Egypt": "EGY",
    "Thailand": "THA",
    "Taiwan": "TWN",
    "Nigeria": "NGA",
    "Argentina": "ARG",
    "Indonesia": "IDN",
    "Philippines": "PHL",
    "Belgium": "BEL",
    "Norway": "NOR",
    "Poland": "POL",
    "Denmark": "DNK",
    "Sweden": "SWE",
    "Netherlands": "NLD",
    "Switzerland": "CHE",
    "Ireland": "IRL",
    "New Zealand": "NZL",
    "South Africa": "ZAF",
    "Russia": "RUS",
    "Singapore": "SGP",
    "Malaysia": "MYS",
    "Israel": "ISR",
    "Pakistan": "PAK",
    "Colombia": "COL",
    "Chile": "CHL",
    "Peru": "PER",
    "United Arab Emirates": "ARE",
    "Saudi Arabia": "SAU",
    "Portugal": "PRT",
    "Greece": "GRC",
    "Czech Republic": "CZE",
    "Austria": "AUT",
    "Romania": "ROU",
    "Hungary": "HUN",
    "Finland": "FIN",
    "Vietnam": "VNM",
    "Ukraine": "UKR",
    "Kenya": "KEN",
    "Ghana": "GHA",
    "Morocco": "MAR",
    "Lebanon": "LBN",
    "Jordan": "JOR",
    "Kuwait": "KWT",
    "Qatar": "QAT",
    "Bangladesh": "BGD",
    "Sri Lanka": "LKA",
    "Nepal": "NPL",
    "Iceland": "ISL",
    "Luxembourg": "LUX",
    "Malta": "MLT",
    "Cyprus": "CYP",
    "Croatia": "HRV",
    "Serbia": "SRB",
    "Bulgaria": "BGR",
    "Slovakia": "SVK",
    "Slovenia": "SVN",
    "Estonia": "EST",
    "Latvia": "LVA",
    "Lithuania": "LTU",
    "Uruguay": "URY",
    "Venezuela": "VEN",
    "Ecuador": "ECU",
    "Bolivia": "BOL",
    "Paraguay": "PRY",
    "Cuba": "CUB",
    "Jamaica": "JAM",
    "Puerto Rico": "PRI",
    "Dominican Republic": "DOM",
    "Guatemala": "GTM",
    "Panama": "PAN",
    "Costa Rica": "CRI",
    "West Germany": "DEU",
    "Soviet Union": "RUS",
    "East Germany": "DEU",
}

_LOWER_CODES = {name.lower(): code for name, code in COUNTRY_CODES.items()}


def get_country_code(country_name: str) -> Optional[str]:
    """
    Exact match, then case-insensitive match, then pycountry (exact names, codes and official names).
    Returns None when the name is unknown.
    """
    if not isinstance(country_name, str):
        return None
    cleaned = country_name.strip()
    if not cleaned:
        return None

    if cleaned in COUNTRY_CODES:
        return COUNTRY_CODES[cleaned]

    lowered = cleaned.lower()
    if lowered in _LOWER_CODES:
        return _LOWER_CODES[lowered]

    try:
        return pycountry.countries.lookup(cleaned).alpha_3
    except LookupError:
        return None
