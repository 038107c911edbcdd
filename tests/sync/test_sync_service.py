from __future__ import annotations

import pytest
import requests

from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.constants import REMOTE_COLLECTIONS
from src.school_attendance.school_attendance.core.enums import Gender
from src.school_attendance.school_attendance.persistence.snapshot import InMemorySnapshotRepository
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.sync.service import SyncService

REMOTE_STUDENTS = [
    {"id": 101, "nisn": 5550001, "name": "Fajar", "gender": "L", "classId": 3, "isActive": "TRUE", "parentPhone": ""},
    {"id": "r2", "nisn": "5550002", "name": "Gita", "gender": "P", "classId": "4", "isActive": True},
]


@pytest.fixture
def sync(store, remote, endpoint, fixed_now) -> SyncService:
    store.set_remote_endpoint(endpoint)
    return SyncService(store, session=remote, clock=lambda: fixed_now)


def test_push_sends_the_whole_store_as_text_plain(sync, remote, store, endpoint):
    assert sync.push() is True

    sent = remote.requests[-1]
    assert sent["url"] == endpoint
    assert sent["headers"]["Content-Type"].startswith("text/plain")
    assert sent["body"]["action"] == "write"
    assert set(sent["body"]["data"]) == set(REMOTE_COLLECTIONS)
    assert len(sent["body"]["data"]["Students"]) == len(store.students())
    assert sync.last_sync == "20/05/2024 08:00:00"
    assert sync.is_syncing is False


def test_push_reads_state_at_call_time(sync, remote, store):
    store.add_student(Student(id="late", nisn="1", name="Late", gender=Gender.LAKI_LAKI, class_id="1"))

    sync.push()

    assert "late" in [row["id"] for row in remote.document["Students"]]


class _BrokenAnswer:
    status_code = 500

    def json(self):
        raise ValueError("html error page")

    def raise_for_status(self):
        raise requests.HTTPError("500 Server Error")


def test_push_ignores_the_remote_answer(sync, remote, monkeypatch):
    monkeypatch.setattr(remote, "post", lambda *a, **kw: _BrokenAnswer())

    assert sync.push() is True


def test_without_endpoint_nothing_is_sent(store, remote):
    sync = SyncService(store, session=remote)

    assert sync.push() is False
    assert sync.pull() is False
    assert remote.requests == []


@pytest.mark.parametrize("error", [requests.ConnectionError("down"), requests.Timeout("slow")])
def test_transport_failure_is_a_false_result(sync, remote, store, error):
    remote.fail_with = error
    before = store.snapshot()

    assert sync.push() is False
    assert sync.pull() is False
    assert store.snapshot() == before
    assert sync.last_sync == ""
    assert sync.is_syncing is False


def test_pull_replaces_only_collections_present(sync, remote, store):
    teachers = store.teachers()
    remote.document = {"Students": REMOTE_STUDENTS}

    assert sync.pull() is True

    assert [s.id for s in store.students()] == ["101", "r2"]
    assert store.students()[0].nisn == "5550001"
    assert store.students()[0].class_id == "3"
    assert store.teachers() == teachers
    assert store.last_sync == "20/05/2024 08:00:00"


def test_push_then_pull_drops_unsynced_local_students(sync, remote, store):
    sync.push()
    remote.document["Students"] = REMOTE_STUDENTS
    store.add_student(Student(id="local", nisn="7", name="Lokal", gender=Gender.PEREMPUAN, class_id="1"))

    assert sync.pull() is True

    assert [(s.id, s.name) for s in store.students()] == [("101", "Fajar"), ("r2", "Gita")]


def test_pull_twice_gives_the_same_state(sync, remote, store):
    sync.push()
    remote.document["Students"] = REMOTE_STUDENTS

    sync.pull()
    first = store.snapshot().collections()
    sync.pull()

    assert store.snapshot().collections() == first


def test_pull_rejects_a_document_with_one_bad_row(sync, remote, store):
    before = store.snapshot()
    remote.document = {"Students": REMOTE_STUDENTS + [{"id": "bad"}], "Holidays": []}

    assert sync.pull() is False
    assert store.snapshot() == before


@pytest.mark.parametrize(
    "payload, status",
    [({"Students": []}, 500), (ValueError("not json"), 200), (["a", "b"], 200)],
)
def test_pull_rejects_unusable_answers(sync, remote, store, payload, status):
    before = store.snapshot()
    remote.read_payload = payload
    remote.read_status = status

    assert sync.pull() is False
    assert store.snapshot() == before


def test_trigger_push_respects_auto_push(store, remote, endpoint):
    store.set_remote_endpoint(endpoint)

    assert SyncService(store, session=remote, auto_push=False).trigger_push() is False
    assert remote.requests == []
    assert SyncService(store, session=remote, auto_push=True).trigger_push() is True
    assert len(remote.requests) == 1


def test_startup_pull_installs_remote_data(remote, endpoint):
    remote.document = {"Students": REMOTE_STUDENTS}

    container = build_container(
        snapshots=InMemorySnapshotRepository(), remote_endpoint=endpoint, auto_pull=True, session=remote
    )

    assert [s.name for s in container.store.students()] == ["Fajar", "Gita"]


def test_failed_startup_pull_keeps_local_data(remote, endpoint):
    remote.fail_with = requests.ConnectionError("offline")

    container = build_container(
        snapshots=InMemorySnapshotRepository(), remote_endpoint=endpoint, auto_pull=True, session=remote
    )

    assert len(container.store.students()) == 4
    assert container.sync_service.last_sync == ""
