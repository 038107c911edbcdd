from __future__ import annotations

import json

import pytest

from src.school_attendance.school_attendance.main import create_app


@pytest.fixture
def app(tmp_path, monkeypatch, remote):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(DATA_DIR=str(tmp_path), SESSION=remote)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, role, username="", password=""):
    return client.post("/api/login", json={"role": role, "username": username, "password": password})


def test_login_and_me(client):
    res = login(client, "admin", "admin", "admin")

    assert res.status_code == 200
    assert res.get_json()["data"]["role"] == "ADMIN"
    assert client.get("/api/me").get_json()["data"]["name"] == "Administrator"

    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_wrong_password(client):
    res = login(client, "WALI_KELAS", "guru1", "salah")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_endpoints_need_login_and_role(client):
    assert client.get("/api/students").status_code == 401

    login(client, "ORANG_TUA", "0012345678")
    assert client.get("/api/students").status_code == 403


def test_homeroom_teacher_sees_only_own_class(client):
    login(client, "WALI_KELAS", "guru1", "123")

    rows = client.get("/api/students?class_id=2").get_json()["data"]
    assert {r["classId"] for r in rows} == {"1"}
    assert client.get("/api/attendance/2?date=2024-05-20").status_code == 403


def test_homeroom_teacher_cannot_change_other_class_students(client):
    login(client, "WALI_KELAS", "guru1", "123")

    assert client.put("/api/students/s3", json={"name": "Ganti"}).status_code == 403
    assert client.post("/api/students/s3/promote", json={"targetClass": "1"}).status_code == 403
    assert client.post("/api/students/s4/alumni", json={"reason": "Pindah", "date": "2024-05-21"}).status_code == 403
    assert client.put("/api/students/s1", json={"classId": "2"}).status_code == 403
    assert client.post("/api/students/s2/promote", json={"targetClass": "3"}).status_code == 403

    login(client, "admin", "admin", "admin")
    rows = {r["id"]: r for r in client.get("/api/students").get_json()["data"]}
    assert rows["s3"]["name"] == "Candra Wijaya"
    assert rows["s3"]["classId"] == "2"
    assert rows["s1"]["classId"] == "1"
    assert rows["s2"]["classId"] == "1"
    assert "s4" in rows
    assert client.get("/api/alumni").get_json()["data"] == []


def test_homeroom_teacher_promotes_own_student_to_next_class(client):
    login(client, "WALI_KELAS", "guru1", "123")

    res = client.post("/api/students/s1/promote", json={})

    assert res.status_code == 200
    assert res.get_json()["data"] == {"targetClass": "2"}


def test_saturday_marking_is_refused(client):
    login(client, "admin", "admin", "admin")

    res = client.post("/api/attendance/1", json={"date": "2024-05-18", "statuses": {"s1": "H"}})

    assert res.status_code == 400
    body = res.get_json()
    assert body["success"] is False
    assert body["data"] == {"date": "2024-05-18", "reason": "weekend"}


def test_mark_and_read_day_sheet(client, app, tmp_path):
    login(client, "WALI_KELAS", "guru1", "123")

    res = client.post("/api/attendance/1", json={"date": "2024-05-20", "statuses": {"s1": "H", "s2": "S"}})
    assert res.status_code == 200
    assert res.get_json()["data"] == {"saved": 2}

    sheet = client.get("/api/attendance/1?date=2024-05-20").get_json()["data"]
    assert [(r["name"], r["status"]) for r in sheet["rows"]] == [("Ahmad Dani", "H"), ("Bunga Citra", "S")]
    assert sheet["day"]["blocked"] is False

    saved = json.loads((tmp_path / "absensi_app_data.json").read_text(encoding="utf-8"))
    assert len(saved["attendance"]) == 2


def test_whatsapp_links(client):
    login(client, "admin", "admin", "admin")
    client.post("/api/attendance/1", json={"date": "2024-05-20", "statuses": {"s1": "H"}})

    data = client.get("/api/attendance/1/whatsapp?date=2024-05-20").get_json()["data"]

    assert data["students"]["s1"].startswith("https://wa.me/628123456789?text=")
    assert data["students"]["s2"] is None
    assert "Belum Absen: 1 Siswa" in data["recap"]


def test_student_crud_and_alumni(client):
    login(client, "admin", "admin", "admin")

    res = client.post("/api/students", json={"name": "Eka", "nisn": "0099", "gender": "P", "classId": "3"})
    assert res.status_code == 201
    new_id = res.get_json()["data"]["id"]

    assert client.put(f"/api/students/{new_id}", json={"classId": "4"}).status_code == 200
    res = client.post(f"/api/students/{new_id}/alumni", json={"reason": "Pindah", "date": "2024-05-21"})
    assert res.get_json()["data"]["lastClassId"] == "4"

    alumni = client.get("/api/alumni").get_json()["data"]
    assert [a["id"] for a in alumni] == [new_id]
    assert client.delete("/api/students/ghost").status_code == 400


def test_bad_student_input_is_400(client):
    login(client, "admin", "admin", "admin")

    res = client.post("/api/students", json={"name": "Eka", "nisn": "1", "gender": "L", "classId": "9"})

    assert res.status_code == 400


def test_teacher_list_hides_passwords(client):
    login(client, "admin", "admin", "admin")

    rows = client.get("/api/teachers").get_json()["data"]

    assert [r["username"] for r in rows] == ["guru1", "guru2"]
    assert all("password" not in r for r in rows)


def test_academic_year_activation(client):
    login(client, "admin", "admin", "admin")

    assert client.post("/api/academic-years/2/activate").status_code == 200
    years = client.get("/api/academic-years").get_json()["data"]
    assert [y["name"] for y in years if y["isActive"]] == ["2024/2025"]
    assert client.delete("/api/academic-years/2").status_code == 400


def test_monthly_csv_download(client):
    login(client, "admin", "admin", "admin")

    res = client.get("/api/reports/monthly.csv?year=2024&month=5&class_id=1")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "Absensi_Kelas_1_Mei_2024.csv" in res.headers["Content-Disposition"]


def test_parent_view(client):
    login(client, "admin", "admin", "admin")
    client.post("/api/attendance/1", json={"date": "2024-05-20", "statuses": {"s1": "I"}})
    client.post("/api/logout")

    login(client, "ORANG_TUA", "0012345678")
    data = client.get("/api/parent/attendance?year=2024&month=5").get_json()["data"]

    assert data["student"]["name"] == "Ahmad Dani"
    assert [r["status"] for r in data["records"]] == ["I"]


def test_sync_endpoints(client, remote, endpoint):
    login(client, "admin", "admin", "admin")

    assert client.post("/api/sync/push").status_code == 502

    client.put("/api/sync/endpoint", json={"url": endpoint})
    res = client.post("/api/sync/push")
    assert res.status_code == 200
    assert res.get_json()["data"]["lastSync"] != ""
    assert len(remote.document["Students"]) == 4

    remote.document["Students"] = remote.document["Students"][:1]
    assert client.post("/api/sync/pull").status_code == 200
    assert len(client.get("/api/students").get_json()["data"]) == 1


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nope")

    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_dashboard_shows_active_year(client):
    login(client, "admin", "admin", "admin")
    client.post("/api/academic-years/2/activate")

    data = client.get("/api/dashboard").get_json()["data"]

    assert data["academicYear"] == "2024/2025"
    assert data["totalStudents"] == 4
