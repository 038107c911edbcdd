"""Backup the local snapshot.

Copies ``DATA_DIR/absensi_app_data.json`` into ``backups/`` with a timestamp.
The spreadsheet backup is done by the app itself (sync push); this one is for
keeping a file copy before risky operations such as a manual pull.
"""

from __future__ import annotations

import importlib
import shutil
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_attendance.school_attendance.persistence.snapshot import JsonFileSnapshotRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    source = JsonFileSnapshotRepository(getattr(settings, "DATA_DIR", "data")).path
    if not source.exists():
        raise SystemExit(f"Belum ada snapshot lokal: {source}")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{source.stem}_{ts}.json"
    shutil.copy2(source, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
