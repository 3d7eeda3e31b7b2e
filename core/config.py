"""
Configuration constants for the voting district KML generator.

This module contains all configuration settings, URLs, default colors, and other
constants used throughout the application.
"""

from pathlib import Path
from typing import Final

# Local data directories
FETCH_DIR: Final = Path("fetch")
"""Directory the downloaded election records are mirrored into."""

KML_DIR: Final = Path("kml")
"""Directory the generated KML documents are written to."""

# Data source URLs
VTR_BASE_URL: Final = "https://vtr.valasztas.hu/ep2024/data"
"""Base URL of the National Election Office result publication."""

VTR_REGISTER_SNAPSHOT: Final = "06091753"
"""Snapshot folder holding the register data (settlements, districts, topology)."""

VTR_REGISTER_URL: Final = f"{VTR_BASE_URL}/{VTR_REGISTER_SNAPSHOT}/ver"
"""URL prefix of the register data files."""

VTR_NATIONAL_URLS: Final = [
    f"{VTR_REGISTER_URL}/Valleir.json",
    f"{VTR_REGISTER_URL}/Megyek.json",
    f"{VTR_REGISTER_URL}/Telepulesek.json",
    f"{VTR_BASE_URL}/06091856/napkozi/ReszvetelOrszag.json",
    f"{VTR_BASE_URL}/06201531/szavossz/ReszvetelOrszag.json",
    f"{VTR_REGISTER_URL}/03/MegyeReszletes-03.json",
]
"""National-level files fetched once per run."""

SETTLEMENT_FILES: Final = [
    "TelepulesReszletes",
    "Szavazokorok",
    "SzavkorKereso",
    "Szavkor-Topo",
    "Korzethatar",
]
"""Per-settlement file stems, fetched as ``{stem}-{maz}-{taz}.json``."""

COUNTY_FILES: Final = ["Telep-Topo"]
"""Per-county file stems, fetched once per county as ``{stem}-{maz}.json``."""

SETTLEMENTS_FILE: Final = "ver-Telepulesek.json"
"""Local name of the national settlement list."""

REQUEST_TIMEOUT: Final = 45
"""Timeout in seconds for a single HTTP request."""

CACHE_TTL: Final = 30 * 24 * 3600  # 30 days
"""Age in seconds after which a fetched file is downloaded again."""

# Styling
DISTRICT_COLORS = [
    "#ff0000",  # red
    "#00ff00",  # green
    "#0000ff",  # blue
    "#ffff00",  # yellow
    "#ff00ff",  # magenta
    "#00ffff",  # cyan
    "#ff8000",  # orange
    "#800080",  # purple
    "#808000",  # teal
    "#00ff80",  # lime
    "#0080ff",  # sky blue
    "#ff0080",  # pink
]
"""Fill colors cycled over the polling districts of a settlement."""

DISTRICT_OPACITY: Final = "50"
"""Default fill opacity (0-100) for polling district polygons."""

BORDER_COLOR: Final = "ff000000"
"""KML ABGR color of the district border lines."""

OUTLINE_COLOR: Final = "#000000"
"""Line color of the settlement outline."""

OPACITY_OPTIONS = [str(i) for i in range(0, 101, 10)]
"""Available opacity options (0-100 in steps of 10)."""

# Simplification
DENSITY_OPTIONS = ["low", "med", "high", "off"]
"""Available density options for boundary simplification."""

DENSITY_MAPPING = {
    "low": 0.0001,     # ~10 m, coarser outlines
    "med": 0.00003,    # ~3 m
    "high": 0.00001,   # ~1 m, finer detail
    "off": 0.0,        # only exactly collinear points are dropped
}
"""Mapping of density options to simplification tolerance values in degrees."""

DEFAULT_DENSITY: Final = "med"
"""Density used when no tolerance is given."""

COORDINATE_PRECISION: Final = 6
"""Decimal digits written per coordinate (about 0.1 m)."""

KML_NS: Final = "http://www.opengis.net/kml/2.2"
"""KML 2.2 namespace URI."""
