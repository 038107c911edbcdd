from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from ..core.constants import SNAPSHOT_KEY
from ..core.exceptions import PayloadError, SnapshotError
from ..store.state import StoreState
from .codec import decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)


class SnapshotRepository(Protocol):
    """Durable copy of the whole store.

    Note: the store depends on this interface, not on a concrete backend.
    """

    def save(self, state: StoreState) -> None:
        raise NotImplementedError

    def load(self, *, fallback: StoreState) -> Optional[StoreState]:
        """Return the stored state, ``None`` when nothing was stored yet.

        Raises :class:`SnapshotError` when a document exists but is unusable.
        """

        raise NotImplementedError


class JsonFileSnapshotRepository(SnapshotRepository):
    """One JSON document, ``<directory>/<SNAPSHOT_KEY>.json``."""

    def __init__(self, directory, *, key: str = SNAPSHOT_KEY):
        self._directory = Path(directory)
        self._key = key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._key}.json"

    def save(self, state: StoreState) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(encode_snapshot(state), ensure_ascii=False, indent=2)

        # Write beside the target then swap, so readers never see half a file.
        fd, tmp = tempfile.mkstemp(dir=self._directory, prefix=f".{self._key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def load(self, *, fallback: StoreState) -> Optional[StoreState]:
        if not self.path.exists():
            return None
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
            return decode_snapshot(doc, fallback=fallback)
        except (OSError, ValueError, PayloadError) as e:
            raise SnapshotError(f"Snapshot {self.path} is unreadable: {e}") from e


class InMemorySnapshotRepository(SnapshotRepository):
    """Keeps the encoded document in memory (tests, scripts)."""

    def __init__(self, document: Optional[dict] = None):
        self.document = document
        self.saves = 0

    def save(self, state: StoreState) -> None:
        # Round-trip through JSON so this behaves like the file backend.
        self.document = json.loads(json.dumps(encode_snapshot(state)))
        self.saves += 1

    def load(self, *, fallback: StoreState) -> Optional[StoreState]:
        if self.document is None:
            return None
        try:
            return decode_snapshot(self.document, fallback=fallback)
        except PayloadError as e:
            raise SnapshotError(f"In-memory snapshot is unusable: {e}") from e
