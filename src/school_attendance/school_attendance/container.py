from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .academic.service import AcademicCalendarService
from .attendance.service import AttendanceService
from .core.exceptions import SnapshotError
from .persistence.snapshot import JsonFileSnapshotRepository, SnapshotRepository
from .reports.service import ReportService
from .staff.service import TeacherService
from .store.seed import build_seed_state
from .store.state import StoreState
from .store.store import DomainStore
from .students.service import StudentService
from .sync.service import SyncService
from .users.service import AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: DomainStore
    snapshots: SnapshotRepository

    sync_service: SyncService
    auth_service: AuthService
    student_service: StudentService
    teacher_service: TeacherService
    calendar_service: AcademicCalendarService
    attendance_service: AttendanceService
    report_service: ReportService


def load_initial_state(snapshots: SnapshotRepository, *, seed: StoreState) -> tuple[StoreState, bool]:
    """Last local snapshot, or the seed when there is none or it is unusable.

    Returns ``(state, from_snapshot)``.
    """

    try:
        state = snapshots.load(fallback=seed)
    except SnapshotError as e:
        logger.warning("%s; starting from built-in data", e)
        return seed, False

    if state is None:
        logger.info("No local snapshot yet; starting from built-in data")
        return seed, False
    logger.info("Local snapshot loaded (%d students, %d attendance records)", len(state.students), len(state.attendance))
    return state, True


def build_container(
    *,
    data_dir: str = "data",
    snapshots: Optional[SnapshotRepository] = None,
    remote_endpoint: str = "",
    admin_username: str = "admin",
    admin_password: str = "admin",
    auto_pull: bool = False,
    auto_push: bool = False,
    sync_timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Container:
    snapshots = snapshots or JsonFileSnapshotRepository(data_dir)

    # Load happens once, before anything else touches the store.
    state, from_snapshot = load_initial_state(snapshots, seed=build_seed_state(remote_endpoint=remote_endpoint))
    store = DomainStore(state, on_change=snapshots.save)
    if not from_snapshot:
        snapshots.save(store.snapshot())

    sync_service = SyncService(store, session=session, timeout=sync_timeout, auto_push=auto_push)
    if auto_pull:
        sync_service.startup_pull()

    return Container(
        store=store,
        snapshots=snapshots,
        sync_service=sync_service,
        auth_service=AuthService(store, admin_username=admin_username, admin_password=admin_password),
        student_service=StudentService(store),
        teacher_service=TeacherService(store),
        calendar_service=AcademicCalendarService(store),
        attendance_service=AttendanceService(store),
        report_service=ReportService(store),
    )
