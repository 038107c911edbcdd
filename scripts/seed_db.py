from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_attendance.school_attendance.persistence.snapshot import JsonFileSnapshotRepository
from src.school_attendance.school_attendance.store.seed import build_seed_state


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the demo data as the local snapshot.")
    parser.add_argument("--force", action="store_true", help="overwrite an existing snapshot")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    snapshots = JsonFileSnapshotRepository(getattr(settings, "DATA_DIR", "data"))
    if snapshots.path.exists() and not args.force:
        raise SystemExit(f"Snapshot sudah ada: {snapshots.path} (pakai --force untuk menimpa)")

    state = build_seed_state(remote_endpoint=getattr(settings, "REMOTE_ENDPOINT", "") or "")
    snapshots.save(state)
    print(f"OK: Seeded snapshot -> {snapshots.path} ({len(state.students)} siswa, {len(state.teachers)} guru)")


if __name__ == "__main__":
    main()
