from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..academic.model import AcademicYear, Holiday
from ..attendance.model import AttendanceRecord
from ..staff.model import Headmaster, Teacher
from ..students.model import Alumni, Student


@dataclass
class StoreState:
    """Every entity collection plus sync metadata.

    Entities are frozen, so copying the lists is enough to detach a snapshot
    from the live state.
    """

    students: list[Student] = field(default_factory=list)
    teachers: list[Teacher] = field(default_factory=list)
    attendance: list[AttendanceRecord] = field(default_factory=list)
    alumni: list[Alumni] = field(default_factory=list)
    academic_years: list[AcademicYear] = field(default_factory=list)
    holidays: list[Holiday] = field(default_factory=list)
    headmaster: Headmaster = field(default_factory=lambda: Headmaster(name="", nip=""))
    remote_endpoint: str = ""
    last_sync: str = ""

    def copy(self) -> "StoreState":
        return replace(
            self,
            students=list(self.students),
            teachers=list(self.teachers),
            attendance=list(self.attendance),
            alumni=list(self.alumni),
            academic_years=list(self.academic_years),
            holidays=list(self.holidays),
        )

    def collections(self) -> dict:
        """Entity collections only (no sync metadata), for value comparison."""

        return {
            "students": list(self.students),
            "teachers": list(self.teachers),
            "attendance": list(self.attendance),
            "alumni": list(self.alumni),
            "academic_years": list(self.academic_years),
            "holidays": list(self.holidays),
            "headmaster": self.headmaster,
        }
