from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AlumniReason, AttendanceStatus, Gender
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.store.store import DomainStore
from src.school_attendance.school_attendance.students.model import Student

MONDAY = date(2024, 5, 20)


def _rec(student_id, status, day=MONDAY):
    return AttendanceRecord.create(student_id=student_id, day=day, status=status, academic_year="2023/2024")


def test_mark_attendance_keeps_one_record_per_student_and_day(store):
    store.mark_attendance([_rec("s1", AttendanceStatus.HADIR), _rec("s2", AttendanceStatus.HADIR)])
    store.mark_attendance([_rec("s1", AttendanceStatus.ALPA), _rec("s1", AttendanceStatus.SAKIT)])

    s1 = [a for a in store.attendance() if a.key == ("s1", MONDAY)]
    assert len(s1) == 1
    assert s1[0].status == AttendanceStatus.SAKIT
    assert len(store.attendance()) == 2


def test_mark_attendance_with_nothing_does_not_save(store, snapshots):
    assert store.mark_attendance([]) == 0
    assert snapshots.saves == 0


def test_every_mutation_is_written_through(store, snapshots):
    store.add_student(Student(id="s9", nisn="9", name="Eka", gender=Gender.PEREMPUAN, class_id="3"))
    assert snapshots.saves == 1
    assert any(row["id"] == "s9" for row in snapshots.document["students"])

    store.set_remote_endpoint("  https://x.test/exec ")
    assert snapshots.saves == 2
    assert snapshots.document["remoteEndpoint"] == "https://x.test/exec"


def test_snapshot_is_detached_from_live_state(store):
    snap = store.snapshot()
    store.add_student(Student(id="s9", nisn="9", name="Eka", gender=Gender.PEREMPUAN, class_id="3"))

    assert len(snap.students) == 4
    assert len(store.students()) == 5


def test_transfer_to_alumni_moves_student_in_one_step(store):
    alumni = store.transfer_to_alumni("s1", AlumniReason.PINDAH, date(2024, 5, 21))

    assert store.get_student("s1") is None
    assert [a.id for a in store.alumni()].count("s1") == 1
    assert alumni.academic_year == "2023/2024"
    assert alumni.last_class_id == "1"
    assert alumni.reason == AlumniReason.PINDAH


def test_transfer_stamps_the_year_active_at_that_time(store):
    store.set_active_academic_year("2")
    alumni = store.transfer_to_alumni("s4", AlumniReason.TAMAT, date(2025, 6, 20))

    assert alumni.academic_year == "2024/2025"


def test_transfer_without_active_year_uses_unknown(store):
    store.replace_collections(academic_years=[])

    assert store.transfer_to_alumni("s2", AlumniReason.PINDAH, MONDAY).academic_year == "Unknown"


def test_missing_references_change_nothing(store, snapshots):
    before = store.snapshot()

    assert store.transfer_to_alumni("ghost", AlumniReason.PINDAH, MONDAY) is None
    assert store.promote_student("ghost", "2") is False
    assert store.delete_student("ghost") is False
    assert store.set_active_academic_year("ghost") is False
    assert store.delete_academic_year("ghost") is False
    assert store.delete_holiday("ghost") is False
    assert store.delete_teacher("ghost") is False

    assert store.snapshot() == before
    assert snapshots.saves == 0


def test_missing_reference_is_logged(store, caplog):
    caplog.set_level("INFO", logger="src.school_attendance.school_attendance")

    store.promote_student("ghost", "2")

    assert "promote_student: student 'ghost' not found" in caplog.text


def test_promote_student_changes_only_the_class(store):
    store.mark_attendance([_rec("s1", AttendanceStatus.HADIR)])

    assert store.promote_student("s1", "2") is True
    assert store.get_student("s1").class_id == "2"
    assert store.get_attendance("s1", MONDAY) is not None


def test_activating_a_year_leaves_exactly_one_active(store):
    assert store.set_active_academic_year("2") is True

    active = [y for y in store.academic_years() if y.is_active]
    assert len(active) == 1
    assert active[0].name == "2024/2025"
    assert store.active_academic_year().name == "2024/2025"


def test_new_academic_year_starts_inactive(store):
    year = store.add_academic_year("2025/2026")

    assert year.is_active is False
    assert store.active_academic_year().name == "2023/2024"


def test_active_year_cannot_be_deleted(store):
    with pytest.raises(ValidationError):
        store.delete_academic_year("1")

    assert store.delete_academic_year("2") is True
    assert [y.id for y in store.academic_years()] == ["1"]


def test_replace_collections_leaves_missing_ones_alone(store):
    teachers = store.teachers()

    store.replace_collections(students=[], last_sync="20/05/2024 08:00:00")

    assert store.students() == []
    assert store.teachers() == teachers
    assert store.last_sync == "20/05/2024 08:00:00"


def test_failed_save_leaves_the_store_unchanged(seed_state):
    def disk_full(_state):
        raise OSError("disk full")

    store = DomainStore(seed_state, on_change=disk_full)
    before = store.snapshot()

    with pytest.raises(OSError):
        store.add_student(Student(id="s9", nisn="9", name="Eka", gender=Gender.PEREMPUAN, class_id="3"))
    with pytest.raises(OSError):
        store.transfer_to_alumni("s1", AlumniReason.PINDAH, date(2024, 5, 21))
    with pytest.raises(OSError):
        store.mark_attendance([_rec("s1", AttendanceStatus.HADIR)])

    assert store.get_student("s9") is None
    assert store.get_student("s1") is not None
    assert store.alumni() == []
    assert store.snapshot() == before


def test_store_saves_again_after_a_failed_save(seed_state, snapshots):
    failures = [OSError("disk full")]

    def flaky(state):
        if failures:
            raise failures.pop()
        snapshots.save(state)

    store = DomainStore(seed_state, on_change=flaky)

    with pytest.raises(OSError):
        store.delete_student("s2")
    assert store.delete_student("s2") is True

    assert store.get_student("s2") is None
    assert [row["id"] for row in snapshots.document["students"]] == ["s1", "s3", "s4"]


def test_homeroom_teacher_is_the_first_teacher_of_the_class(store):
    assert store.homeroom_teacher("2").username == "guru2"
    assert store.homeroom_teacher("5") is None
