"""
Generation worker for settlement KML documents.

This module coordinates the conversion of fetched election records into one
KML document per settlement: it builds the task list, skips documents whose
settings have not changed, and runs the remaining tasks sequentially or on a
thread pool.
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from core.config import DISTRICT_COLORS
from core.types import GenerationSettings, ProgressCallback, SettlementRef, SettlementTask
from core.utils import hex_to_kml_abgr, safe_filename
from processing.kml_document import build_settlement_kml, write_kml
from processing.records import load_polling_districts, load_settlement_outline, load_settlements

META_SUBFOLDER = "_metadata"


def build_tasks(settings: GenerationSettings, settlements: list[SettlementRef]) -> list[SettlementTask]:
    """Build list of SettlementTask objects based on settings."""
    selected = None
    if settings.settlements:
        selected = {s.strip().lower() for s in settings.settlements}

    tasks = []
    for settlement in settlements:
        if selected is not None and settlement.name.lower() not in selected and settlement.taz not in selected:
            continue
        county_dir = Path(settings.fetch_dir) / settlement.maz
        tasks.append(SettlementTask(
            settlement=settlement,
            data_dir=county_dir / settlement.taz,
            county_dir=county_dir,
            output_path=Path(settings.output_dir) / f"{safe_filename(settlement.name)}.kml",
        ))

    # Settlements sharing a name (in different counties) get the county code appended
    seen = {}
    for task in tasks:
        seen.setdefault(task.output_path, []).append(task)
    for same_name in seen.values():
        if len(same_name) > 1:
            for task in same_name:
                task.output_path = task.output_path.with_name(
                    f"{task.output_path.stem}_{task.settlement.maz}.kml")

    if tasks:
        weight = 100.0 / len(tasks)
        for task in tasks:
            task.weight = weight
    return tasks


def meta_path_for(output_path: Path) -> Path:
    output_path = Path(output_path)
    return output_path.parent / META_SUBFOLDER / (output_path.name + ".meta")


INPUT_FILES = ["Szavkor-Topo.json", "Szavazokorok.json", "Korzethatar.json"]
COUNTY_INPUT_FILES = ["Telep-Topo.json"]


def input_versions(task: SettlementTask) -> dict:
    """Modification times of the records a document is built from, None if missing."""
    paths = [Path(task.data_dir) / name for name in INPUT_FILES]
    paths += [Path(task.county_dir) / name for name in COUNTY_INPUT_FILES]
    versions = {}
    for path in paths:
        versions[f"{path.parent.name}/{path.name}"] = os.path.getmtime(path) if path.exists() else None
    return versions


def meta_settings(task: SettlementTask, settings: GenerationSettings) -> dict:
    """Settings and input versions that affect the content of a generated document."""
    return {
        "tolerance": settings.tolerance if settings.simplify else None,
        "precision": settings.precision,
        "opacity": settings.opacity,
        "outline": settings.include_outline,
        "inputs": input_versions(task),
    }


def is_up_to_date(task: SettlementTask, settings: GenerationSettings) -> bool:
    """True if the document exists and was generated with the same settings from the same records."""
    meta_path = meta_path_for(task.output_path)
    if not os.path.exists(task.output_path) or not meta_path.exists():
        return False
    try:
        with open(meta_path, 'r', encoding='utf-8') as f:
            return json.load(f) == meta_settings(task, settings)
    except (OSError, ValueError):
        return False


def write_meta(task: SettlementTask, settings: GenerationSettings, report_progress: ProgressCallback):
    meta_path = meta_path_for(task.output_path)
    try:
        meta_path.parent.mkdir(parents=True, exist_ok=True)
        with open(meta_path, 'w', encoding='utf-8') as f:
            json.dump(meta_settings(task, settings), f, indent=2)
    except OSError as e:
        report_progress(0, f"Warning: Could not write meta file: {e}")


def process_settlement(task: SettlementTask, settings: GenerationSettings,
                       report_progress: ProgressCallback) -> bool:
    """Generate the KML document of one settlement.

    Args:
        task: Settlement task
        settings: Generation settings
        report_progress: Progress reporting function

    Returns:
        True if the document was written, False otherwise
    """
    name = task.settlement.name
    try:
        districts = load_polling_districts(task.data_dir)
    except FileNotFoundError as e:
        report_progress(0, f"-> Failed to read {e.filename}: no polling district topology for {name}")
        return False
    except ValueError as e:
        report_progress(0, f"-> Invalid polling district data for {name}: {e}")
        return False

    outline = None
    if settings.include_outline:
        try:
            outline = load_settlement_outline(task.county_dir, task.settlement.taz)
        except ValueError as e:
            report_progress(0, f"Warning: Ignoring invalid outline for {name}: {e}")

    palette = [hex_to_kml_abgr(color, settings.opacity) for color in DISTRICT_COLORS]
    tolerance = settings.tolerance if settings.simplify else None
    tree = build_settlement_kml(name, districts, tolerance=tolerance, precision=settings.precision,
                                outline=outline, palette=palette)
    try:
        write_kml(tree, task.output_path)
    except OSError as e:
        report_progress(0, f"-> Could not write {task.output_path}: {e}")
        return False

    write_meta(task, settings, report_progress)
    report_progress(0, f"Created {task.output_path}")
    return True


def run_task(task: SettlementTask, settings: GenerationSettings,
             report_progress: ProgressCallback) -> bool:
    """Run one settlement task, reporting an unexpected error as a failure."""
    try:
        return process_settlement(task, settings, report_progress)
    except Exception as e:
        report_progress(0, f"-> {task.settlement.name} failed with exception: {type(e).__name__}: {e}")
        return False


def worker(settings: GenerationSettings, report_progress: ProgressCallback,
           force: bool = False) -> tuple[int, int]:
    """Generate the KML documents of all selected settlements.

    Args:
        settings: Generation settings
        report_progress: Progress reporting callback function
        force: Regenerate documents even when their settings are unchanged

    Returns:
        Number of succeeded and failed settlements; an unreadable settlement
        list counts as one failure
    """
    try:
        settlements = load_settlements(settings.fetch_dir)
    except (OSError, ValueError, KeyError) as e:
        report_progress(0, f"-> Cannot read settlement list: {e}")
        return 0, 1

    tasks = build_tasks(settings, settlements)
    report_progress(0, f"Created {len(tasks)} tasks to process.")
    if not tasks:
        report_progress(0, "No settlements selected.")
        report_progress(100, "\nDone!")
        return 0, 0

    Path(settings.output_dir).mkdir(parents=True, exist_ok=True)

    skipped = []
    tasks_to_process = []
    for task in tasks:
        if not force and is_up_to_date(task, settings):
            skipped.append(task.settlement.name)
            report_progress(task.weight, None)
        else:
            tasks_to_process.append(task)

    if skipped:
        report_progress(0, f"Skipping {len(skipped)} settlements with matching settings.")

    succeeded = 0
    failed = 0
    if settings.workers > 1:
        with ThreadPoolExecutor(max_workers=settings.workers) as executor:
            futures = {executor.submit(run_task, task, settings, report_progress): task
                       for task in tasks_to_process}
            for future in as_completed(futures):
                task = futures[future]
                ok = future.result()
                succeeded += ok
                failed += not ok
                report_progress(task.weight, None)
    else:
        for task in tasks_to_process:
            ok = run_task(task, settings, report_progress)
            succeeded += ok
            failed += not ok
            report_progress(task.weight, None)

    report_progress(0, f"\n{succeeded}/{len(tasks_to_process)} documents generated, "
                       f"{len(skipped)} up to date, {failed} failed.")
    report_progress(0, f"Files saved to: {settings.output_dir}")
    report_progress(0, "\nDone!")
    return succeeded, failed
