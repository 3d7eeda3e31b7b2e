"""
Election office data downloader.

This module mirrors the national election geography files and the
per-settlement records from vtr.valasztas.hu into a local directory tree
that ``processing.records`` reads back.
"""

import json
import os
import re
import time
from pathlib import Path

import requests

from core.config import (
    CACHE_TTL, COUNTY_FILES, REQUEST_TIMEOUT, SETTLEMENT_FILES,
    VTR_NATIONAL_URLS, VTR_REGISTER_URL
)
from core.types import ProgressCallback, SettlementRef
from processing.records import load_settlements

CODE_SUFFIX = re.compile(r'-[\d-]+\.json$')


def national_filename(url: str) -> str:
    """Local name of a national file: the last two URL path segments joined by a dash."""
    parts = url.split('/')
    return f"{parts[-2]}-{parts[-1]}"


def local_filename(url: str) -> str:
    """Strip the numeric code suffix, e.g. ``Szavazokorok-03-005.json`` -> ``Szavazokorok.json``."""
    return CODE_SUFFIX.sub('.json', url.split('/')[-1])


def settlement_urls(settlement: SettlementRef) -> list[str]:
    return [
        f"{VTR_REGISTER_URL}/{settlement.maz}/{stem}-{settlement.maz}-{settlement.taz}.json"
        for stem in SETTLEMENT_FILES
    ]


def county_urls(maz: str) -> list[str]:
    return [f"{VTR_REGISTER_URL}/{maz}/{stem}-{maz}.json" for stem in COUNTY_FILES]


def is_fresh(path: Path, ttl: float = CACHE_TTL) -> bool:
    return path.exists() and (time.time() - os.path.getmtime(path) < ttl)


def describe_error(e: Exception) -> str:
    """Turn a download exception into a short message for the progress log."""
    if isinstance(e, requests.exceptions.Timeout):
        return "Request timed out. Try again later."
    if isinstance(e, requests.exceptions.ConnectionError):
        return "Unable to connect to server. Check internet connection."
    if isinstance(e, requests.exceptions.HTTPError):
        status = e.response.status_code if e.response is not None else "?"
        return f"Server returned HTTP {status}."
    if isinstance(e, ValueError):
        return f"Response is not valid JSON: {e}"
    return f"{type(e).__name__}: {e!r}"


def fetch_json(url: str, output_path: Path, report_progress: ProgressCallback,
               force: bool = False, session=None) -> bool:
    """Download one JSON file and save it pretty-printed.

    Args:
        url: Source URL
        output_path: Local file to write
        report_progress: Progress reporting function
        force: Download even if a fresh copy exists
        session: Optional requests session to reuse connections

    Returns:
        True if the file is available locally, False otherwise
    """
    output_path = Path(output_path)
    if not force and is_fresh(output_path):
        report_progress(0, f"Using cached {output_path}")
        return True

    report_progress(0, f"Fetching {url}...")
    try:
        getter = session.get if session is not None else requests.get
        response = getter(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except Exception as e:
        report_progress(0, f"-> Download failed for {url}: {describe_error(e)}")
        return False

    tmp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, output_path)
    except OSError as e:
        report_progress(0, f"-> Could not save {output_path}: {e}")
        return False
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    report_progress(0, f"Saved to {output_path}")
    return True


def fetch_national(fetch_dir: Path, report_progress: ProgressCallback,
                   force: bool = False, session=None) -> bool:
    """Fetch the national-level files into ``fetch_dir``."""
    fetch_dir = Path(fetch_dir)
    ok = True
    for url in VTR_NATIONAL_URLS:
        ok = fetch_json(url, fetch_dir / national_filename(url), report_progress, force, session) and ok
    return ok


def fetch_settlements(settlements: list[SettlementRef], fetch_dir: Path,
                      report_progress: ProgressCallback, force: bool = False,
                      session=None) -> bool:
    """Fetch per-settlement files, and the county files once per county.

    Settlement files go to ``fetch_dir/{maz}/{taz}/``, county files to
    ``fetch_dir/{maz}/``. Failures are reported and the loop continues.
    """
    fetch_dir = Path(fetch_dir)
    fetched_counties = set()
    ok = True
    weight = 100.0 / len(settlements) if settlements else 0.0

    for settlement in settlements:
        settlement_dir = fetch_dir / settlement.maz / settlement.taz
        for url in settlement_urls(settlement):
            ok = fetch_json(url, settlement_dir / local_filename(url), report_progress, force, session) and ok

        if settlement.maz not in fetched_counties:
            fetched_counties.add(settlement.maz)
            county_dir = fetch_dir / settlement.maz
            for url in county_urls(settlement.maz):
                ok = fetch_json(url, county_dir / local_filename(url), report_progress, force, session) and ok

        report_progress(weight, None)
    return ok


def process(fetch_dir: Path, report_progress: ProgressCallback, force: bool = False) -> bool:
    """Fetch everything needed to generate the settlement documents.

    Returns:
        True if every file was fetched, False if any failed
    """
    with requests.Session() as session:
        ok = fetch_national(fetch_dir, report_progress, force, session)
        try:
            settlements = load_settlements(fetch_dir)
        except (OSError, ValueError, KeyError) as e:
            report_progress(0, f"-> Cannot read settlement list: {e}")
            return False

        report_progress(0, f"Fetching records for {len(settlements)} settlements...")
        return fetch_settlements(settlements, fetch_dir, report_progress, force, session) and ok
