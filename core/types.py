"""
Type definitions and data classes for the voting district KML generator.

This module contains type aliases and data structures used throughout the application
for representing election records, generation settings and processing tasks.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Literal

Parity = Literal["even", "odd"]
"""House number side a street segment is restricted to."""

ProgressCallback = Callable[[float, Optional[str]], None]
"""Progress reporter taking a weight increment and an optional message."""


class Point(NamedTuple):
    """A coordinate pair in decimal degrees, longitude first."""

    lon: float
    lat: float


@dataclass(frozen=True)
class SettlementRef:
    """Identifies a settlement in the national settlement list."""

    maz: str
    """County code."""

    taz: str
    """Settlement code within the county."""

    name: str
    """Settlement name (``megnev``)."""


@dataclass(frozen=True)
class StreetSegment:
    """A street, or a house number range of it, assigned to a polling district."""

    name: str
    kind: Optional[str] = None
    from_number: Optional[str] = None
    to_number: Optional[str] = None
    parity: Optional[Parity] = None


@dataclass
class PollingDistrict:
    """A voting district of a settlement with its boundary and annotations."""

    number: str
    """Polling district number (``szk``)."""

    polygon: list[Point]
    """Boundary ring as published, without the closing point."""

    address: Optional[str] = None
    """Address of the polling station."""

    voters: Optional[int] = None
    """Number of registered voters."""

    streets: list[StreetSegment] = field(default_factory=list)
    """Streets belonging to the district."""


@dataclass
class GenerationSettings:
    """Configuration for a KML generation run.

    This class holds the directories, simplification tolerance and styling
    options used when converting settlements into KML documents.
    """

    fetch_dir: Path
    """Directory holding the fetched election records."""

    output_dir: Path
    """Directory the KML documents are written to."""

    tolerance: float
    """Simplification tolerance in degrees."""

    precision: int = 6
    """Decimal digits written per coordinate."""

    simplify: bool = True
    """Whether boundary rings are simplified at all."""

    include_outline: bool = True
    """Add the settlement outline as its own placemark."""

    opacity: str = "50"
    """Fill opacity (0-100) of the district polygons."""

    settlements: Optional[list[str]] = None
    """Restrict the run to these settlement names or ``taz`` codes."""

    workers: int = 1
    """Number of threads processing settlements."""


@dataclass
class SettlementTask:
    """Represents a single settlement conversion task.

    This class encapsulates all the information needed to generate the KML
    document of one settlement.
    """

    settlement: SettlementRef
    """The settlement to convert."""

    data_dir: Path
    """Directory holding the settlement's fetched files."""

    county_dir: Path
    """Directory holding the county-level files."""

    output_path: Path
    """File path where the KML document will be saved."""

    weight: float = 1.0
    """Share of the overall progress this task accounts for."""
