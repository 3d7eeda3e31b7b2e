"""
Loaders for the fetched election records.

Reads the directory tree written by ``downloaders.valasztas``:

    fetch/ver-Telepulesek.json
    fetch/{maz}/Telep-Topo.json
    fetch/{maz}/{taz}/Szavkor-Topo.json
    fetch/{maz}/{taz}/Szavazokorok.json
    fetch/{maz}/{taz}/Korzethatar.json

and turns the JSON records into the dataclasses in ``core.types``.
"""

import json
from pathlib import Path
from typing import Optional

from core.config import SETTLEMENTS_FILE
from core.types import Parity, PollingDistrict, Point, SettlementRef, StreetSegment
from processing.geometry import parse_poligon

EVEN_MARKERS = {"páros", "paros", "even", "p"}
ODD_MARKERS = {"páratlan", "paratlan", "odd", "ptl"}


def read_json(path: Path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _field(item: dict, key: str):
    """Look a key up on a record or its ``leiro`` (descriptor) block."""
    if key in item:
        return item[key]
    leiro = item.get('leiro')
    if isinstance(leiro, dict):
        return leiro.get(key)
    return None


def district_key(value) -> str:
    """Normalize a polling district number so ``"001"``, ``"1"`` and ``1`` match."""
    text = str(value).strip()
    return str(int(text)) if text.isdigit() else text


def _parity(value) -> Optional[Parity]:
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in EVEN_MARKERS:
        return "even"
    if text in ODD_MARKERS:
        return "odd"
    return None


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def load_settlements(fetch_dir: Path) -> list[SettlementRef]:
    """Load the national settlement list.

    Raises:
        FileNotFoundError: If the settlement list has not been fetched
    """
    data = read_json(Path(fetch_dir) / SETTLEMENTS_FILE)
    settlements = []
    for record in data.get('list', []):
        leiro = record['leiro']
        settlements.append(SettlementRef(
            maz=str(leiro['maz']),
            taz=str(leiro['taz']),
            name=str(leiro['megnev']),
        ))
    return settlements


def load_voter_counts(settlement_dir: Path) -> dict[str, tuple[Optional[str], Optional[int]]]:
    """Load polling station addresses and voter counts keyed by district number.

    Returns an empty mapping when the file is missing.
    """
    path = Path(settlement_dir) / "Szavazokorok.json"
    if not path.exists():
        return {}

    counts = {}
    for item in read_json(path).get('list', []):
        number = _field(item, 'sorszam') or _field(item, 'szk')
        if number is None:
            continue
        letszam = item.get('letszam') or {}
        voters = letszam.get('indulo') if isinstance(letszam, dict) else None
        counts[district_key(number)] = (
            _optional_str(_field(item, 'cim')),
            int(voters) if voters is not None else None,
        )
    return counts


def load_street_lists(settlement_dir: Path) -> dict[str, list[StreetSegment]]:
    """Load the street boundary list keyed by district number.

    Returns an empty mapping when the file is missing.
    """
    path = Path(settlement_dir) / "Korzethatar.json"
    if not path.exists():
        return {}

    streets: dict[str, list[StreetSegment]] = {}
    for item in read_json(path).get('list', []):
        number = _field(item, 'szk')
        name = _optional_str(_field(item, 'kozterulet'))
        if number is None or name is None:
            continue
        streets.setdefault(district_key(number), []).append(StreetSegment(
            name=name,
            kind=_optional_str(_field(item, 'jelleg')),
            from_number=_optional_str(_field(item, 'tol')),
            to_number=_optional_str(_field(item, 'ig')),
            parity=_parity(_field(item, 'paros')),
        ))
    return streets


def load_polling_districts(settlement_dir: Path) -> list[PollingDistrict]:
    """Load the polling districts of a settlement with their annotations.

    The topology file is required; voter counts and street lists are attached
    when their files exist.

    Raises:
        FileNotFoundError: If ``Szavkor-Topo.json`` is missing
        ValueError: If a boundary string is malformed
    """
    settlement_dir = Path(settlement_dir)
    topo = read_json(settlement_dir / "Szavkor-Topo.json")
    counts = load_voter_counts(settlement_dir)
    streets = load_street_lists(settlement_dir)

    districts = []
    for item in topo.get('list', []):
        poligon = item.get('poligon')
        if not poligon:
            continue
        number = district_key(_field(item, 'szk'))
        address, voters = counts.get(number, (None, None))
        districts.append(PollingDistrict(
            number=number,
            polygon=parse_poligon(poligon),
            address=address,
            voters=voters,
            streets=streets.get(number, []),
        ))
    return districts


def load_settlement_outline(county_dir: Path, taz: str) -> Optional[list[Point]]:
    """Load the outline of one settlement from the county topology file.

    Returns None when the file or the settlement is not available.
    """
    path = Path(county_dir) / "Telep-Topo.json"
    if not path.exists():
        return None
    for item in read_json(path).get('list', []):
        if str(_field(item, 'taz')) == str(taz) and item.get('poligon'):
            return parse_poligon(item['poligon'])
    return None
