from __future__ import annotations

import re
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.ids import new_id
from ..common.text_import import ImportResult, iter_tab_rows
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..store.store import DomainStore
from .model import AcademicYear, Holiday

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AcademicCalendarService:
    """Use case: academic years (tahun pelajaran) and holidays (hari libur)."""

    def __init__(self, store: DomainStore):
        self._store = store

    # ---- academic years ----

    def list_years(self) -> list[AcademicYear]:
        return self._store.academic_years()

    def active_year(self) -> Optional[AcademicYear]:
        return self._store.active_academic_year()

    def add_year(self, name: str) -> AcademicYear:
        return self._store.add_academic_year(require_non_empty(name, "Nama tahun"))

    def activate_year(self, year_id: str) -> bool:
        return self._store.set_active_academic_year(year_id)

    def delete_year(self, year_id: str) -> bool:
        return self._store.delete_academic_year(year_id)

    # ---- holidays ----

    def list_holidays(self) -> list[Holiday]:
        """Holidays by date; duplicates for the same date are kept."""

        return sorted(self._store.holidays(), key=lambda h: h.date)

    def add_holiday(self, *, day, description: str) -> Holiday:
        try:
            parsed = parse_iso_date(day)
        except ValueError:
            raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")
        holiday = Holiday(id=new_id(), date=parsed, description=require_non_empty(description, "Keterangan"))
        return self._store.add_holiday(holiday)

    def delete_holiday(self, holiday_id: str) -> bool:
        return self._store.delete_holiday(holiday_id)

    def import_text(self, text: str) -> ImportResult:
        """Bulk add from ``YYYY-MM-DD<TAB>description`` lines."""

        imported = skipped = 0
        for parts in iter_tab_rows(text):
            if len(parts) < 2 or not _ISO_DAY.match(parts[0]) or not parts[1]:
                skipped += 1
                continue
            try:
                day = parse_iso_date(parts[0])
            except ValueError:
                skipped += 1
                continue
            self._store.add_holiday(Holiday(id=new_id(), date=day, description=parts[1]))
            imported += 1
        return ImportResult(imported=imported, skipped=skipped)
