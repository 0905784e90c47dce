"""
Snapshot files of fetched diplomas.

A snapshot is the same JSON array the API returns, written to disk so the
mentor summary can be rebuilt without logging in again.
Only records are stored here, never cookies or credentials.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from diplomas.model import Diploma


def load_diplomas(path: str | Path) -> List[Diploma]:
    """
    Load diplomas from a snapshot file.

    Returns an empty list if the file does not exist or is invalid.
    Entries that are not JSON objects are skipped.
    """
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        return []

    try:
        data = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return []

    if not isinstance(data, list):
        return []

    return [Diploma.from_dict(item) for item in data if isinstance(item, dict)]


def save_diplomas(diplomas: Iterable[Diploma], path: str | Path) -> None:
    """
    Write diplomas as a JSON array. Creates parent directories if needed.
    """
    snapshot_path = Path(path)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)

    payload = [d.to_dict() for d in diplomas]
    snapshot_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
