"""Snapshot persistence: one full-state JSON record per key."""
from __future__ import annotations

import copy
import json
import re
from pathlib import Path
from typing import Dict, Optional

from logger import setup_logger

logger = setup_logger(__name__)


class SnapshotStore:
    def load(self, key: str) -> Optional[dict]:
        raise NotImplementedError

    def save(self, key: str, snapshot: dict) -> None:
        raise NotImplementedError


class MemoryStore(SnapshotStore):

    def __init__(self):
        self.snapshots: Dict[str, dict] = {}

    def load(self, key: str) -> Optional[dict]:
        snap = self.snapshots.get(key)
        return copy.deepcopy(snap) if snap is not None else None

    def save(self, key: str, snapshot: dict) -> None:
        self.snapshots[key] = copy.deepcopy(snapshot)


class JsonFileStore(SnapshotStore):
    """Each key maps to `<directory>/<key>.json`; saves overwrite in full."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def load(self, key: str) -> Optional[dict]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Unreadable snapshot %s: %s", path, exc)
            return None

    def save(self, key: str, snapshot: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(snapshot), encoding="utf-8")
