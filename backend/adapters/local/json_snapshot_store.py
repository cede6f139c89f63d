"""JsonFileSnapshotStore - keeps the group snapshot in a JSON file.

The file holds the plain snapshot array, so it can be imported by any client
that reads exports. The active group id goes to a sidecar file next to it.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from ports.snapshot_store import SnapshotStorePort

logger = logging.getLogger(__name__)


class JsonFileSnapshotStore(SnapshotStorePort):
    def __init__(self, path: str = "/data/textdiff-snapshot.json"):
        self._path = Path(path)
        self._active_path = self._path.with_name(self._path.name + ".active")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Could not load snapshot file {self._path}: {e}")
            return None

    def active_group_id(self) -> Optional[str]:
        try:
            return self._active_path.read_text(encoding="utf-8").strip() or None
        except FileNotFoundError:
            return None

    def save(self, groups: list, active_group_id: Optional[str] = None) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so a crash never leaves half a snapshot behind
        tmp = self._path.with_name(self._path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(groups, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)
        if active_group_id:
            self._active_path.write_text(active_group_id, encoding="utf-8")
        logger.debug(f"Saved {len(groups)} groups to {self._path}")
