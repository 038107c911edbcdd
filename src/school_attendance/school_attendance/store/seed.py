"""Built-in data used when no usable local snapshot exists."""

from __future__ import annotations

from datetime import date

from werkzeug.security import generate_password_hash

from ..academic.model import AcademicYear, Holiday
from ..core.enums import Gender
from ..staff.model import Headmaster, Teacher
from ..students.model import Student
from .state import StoreState


def build_seed_state(*, remote_endpoint: str = "") -> StoreState:
    return StoreState(
        students=[
            Student(id="s1", nisn="0012345678", name="Ahmad Dani", gender=Gender.LAKI_LAKI, class_id="1", parent_phone="628123456789"),
            Student(id="s2", nisn="0012345679", name="Bunga Citra", gender=Gender.PEREMPUAN, class_id="1", parent_phone="628123456780"),
            Student(id="s3", nisn="0012345680", name="Candra Wijaya", gender=Gender.LAKI_LAKI, class_id="2"),
            Student(id="s4", nisn="0012345681", name="Dewi Persik", gender=Gender.PEREMPUAN, class_id="6"),
        ],
        teachers=[
            Teacher(
                id="t1",
                name="Budi Santoso, S.Pd",
                nip="19850101 201001 1 001",
                class_id="1",
                username="guru1",
                password=generate_password_hash("123"),
            ),
            Teacher(
                id="t2",
                name="Siti Aminah, S.Pd",
                nip="19880202 201101 2 002",
                class_id="2",
                username="guru2",
                password=generate_password_hash("123"),
            ),
        ],
        academic_years=[
            AcademicYear(id="1", name="2023/2024", is_active=True),
            AcademicYear(id="2", name="2024/2025", is_active=False),
        ],
        holidays=[
            Holiday(id="h1", date=date(2024, 5, 1), description="Hari Buruh"),
            Holiday(id="h2", date=date(2024, 8, 17), description="Kemerdekaan RI"),
        ],
        headmaster=Headmaster(name="Drs. H. Ahmad Fauzi, M.Pd", nip="19700101 199503 1 002"),
        remote_endpoint=remote_endpoint,
    )
