from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

import pytest
import requests

from src.school_attendance.school_attendance.persistence.snapshot import InMemorySnapshotRepository
from src.school_attendance.school_attendance.store.seed import build_seed_state
from src.school_attendance.school_attendance.store.store import DomainStore

ENDPOINT = "https://script.example.test/macros/s/abc/exec"


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)


class FakeRemote:
    """Stand-in for the spreadsheet web-app, used as the ``requests`` session.

    ``write`` replaces the whole document, ``read`` returns it.
    """

    def __init__(self, document: Optional[dict] = None):
        self.document: dict = document or {}
        self.requests: list[dict] = []
        self.fail_with: Optional[Exception] = None
        self.read_status = 200
        self.read_payload: Any = None

    def post(self, url, data=None, headers=None, timeout=None):
        body = json.loads(data)
        self.requests.append({"url": url, "body": body, "headers": headers, "timeout": timeout})
        if self.fail_with is not None:
            raise self.fail_with

        if body["action"] == "write":
            self.document = json.loads(json.dumps(body["data"]))
            return FakeResponse({"status": "success", "message": "Data saved"})

        if self.read_payload is not None:
            return FakeResponse(self.read_payload, self.read_status)
        return FakeResponse(json.loads(json.dumps(self.document)), self.read_status)


@pytest.fixture
def endpoint() -> str:
    return ENDPOINT


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2024, 5, 20, 8, 0, 0)


@pytest.fixture
def seed_state():
    return build_seed_state()


@pytest.fixture
def snapshots() -> InMemorySnapshotRepository:
    return InMemorySnapshotRepository()


@pytest.fixture
def store(seed_state, snapshots) -> DomainStore:
    return DomainStore(seed_state, on_change=snapshots.save)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()
