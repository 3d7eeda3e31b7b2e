import json
from pathlib import Path

import pytest

SQUARE = "47.0 19.0,47.0 19.01,47.01 19.01,47.01 19.0"
TRIANGLE = "47.0 19.0,47.0 19.01,47.01 19.0"


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)
    return path


@pytest.fixture
def fetch_tree(tmp_path):
    """A fetched record tree with two settlements in county 03; only the first has annotations."""
    root = tmp_path / "fetch"
    write_json(root / "ver-Telepulesek.json", {"list": [
        {"leiro": {"maz": "03", "taz": "005", "megnev": "Baja"}},
        {"leiro": {"maz": "03", "taz": "010", "megnev": "Bácsalmás"}},
    ]})
    write_json(root / "03" / "Telep-Topo.json", {"list": [
        {"taz": "005", "poligon": SQUARE},
    ]})
    write_json(root / "03" / "005" / "Szavkor-Topo.json", {"list": [
        {"szk": "001", "poligon": SQUARE},
        {"szk": "002", "poligon": TRIANGLE},
    ]})
    write_json(root / "03" / "005" / "Szavazokorok.json", {"list": [
        {"leiro": {"sorszam": "1", "cim": "Fő tér 1."}, "letszam": {"indulo": 1234}},
    ]})
    write_json(root / "03" / "005" / "Korzethatar.json", {"list": [
        {"szk": 1, "kozterulet": "Fő", "jelleg": "utca", "tol": "1", "ig": "99", "paros": "páratlan"},
        {"szk": 1, "kozterulet": "Kossuth", "jelleg": "tér"},
        {"szk": 2, "kozterulet": "Petőfi", "jelleg": "utca", "tol": "2", "paros": "páros"},
    ]})
    write_json(root / "03" / "010" / "Szavkor-Topo.json", {"list": [
        {"szk": "001", "poligon": TRIANGLE},
    ]})
    return root
