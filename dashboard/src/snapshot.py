"""
Snapshot writer for the rendered dashboard.

Writes the current DashboardView as a JSON file at a configurable path.
The file is replaced atomically on every render (write to a sibling
temporary file, then ``os.replace``), so a reader such as a static web
page or a monitoring probe never sees a partially written snapshot.

CHANGELOG:
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from dashboard.src.view import DashboardView


class SnapshotWriter:
    """Writes dashboard views to a JSON file.

    Args:
        path: Filesystem path for the snapshot file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._renders = 0

    @property
    def renders(self) -> int:
        """Number of snapshots written so far."""
        return self._renders

    def render(self, view: DashboardView) -> None:
        """Replace the snapshot file with *view*.

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(
            json.dumps(view.to_dict(), ensure_ascii=False, allow_nan=False),
            encoding="utf-8",
        )
        os.replace(tmp, self.path)
        self._renders += 1
