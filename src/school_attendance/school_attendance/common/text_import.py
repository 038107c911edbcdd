from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped: int

    @property
    def message(self) -> str:
        return f"Berhasil import {self.imported} data ({self.skipped} baris dilewati)."


def iter_tab_rows(text: str) -> Iterator[list[str]]:
    """Yield the tab-separated fields of each non-blank line (as pasted from a spreadsheet)."""

    for line in (text or "").strip().splitlines():
        if not line.strip():
            continue
        yield [part.strip() for part in line.split("\t")]
