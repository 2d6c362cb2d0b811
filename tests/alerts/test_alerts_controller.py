from __future__ import annotations

import pytest

from src.attendance_alerts.attendance_alerts.container import Container
from src.attendance_alerts.attendance_alerts.main import create_app


@pytest.fixture
def client(monkeypatch, service, students, attendance, alerts_repo, configs, notifier):
    monkeypatch.setenv("APP_ENV", "testing")
    container = Container(
        conn=None,
        students_repo=students,
        attendance_repo=attendance,
        alerts_repo=alerts_repo,
        alert_config_repo=configs,
        notifier=notifier,
        alert_service=service,
    )
    app = create_app(container=container)
    return app.test_client()


def test_summary_shape_when_empty(client):
    res = client.get("/alerts/summary")

    assert res.status_code == 200
    assert res.get_json()["data"] == {
        "total": 0,
        "critical": 0,
        "warning": 0,
        "unacknowledged": 0,
        "byType": {"consecutive_absence": 0, "low_attendance": 0, "pattern_warning": 0},
    }


def test_scan_then_list(client):
    res = client.post("/alerts/scan")
    assert res.status_code == 200
    assert res.get_json()["data"] == {"newAlerts": 2, "scannedStudents": 2}

    res = client.get("/alerts?type=consecutive_absence&acknowledged=false&studentId=1")
    data = res.get_json()["data"]
    assert len(data) == 2
    overall = next(a for a in data if a["subjectId"] is None)
    assert overall["severity"] == "critical"
    assert overall["details"] == {
        "consecutiveDays": 3,
        "threshold": 3,
        "startDate": "2024-01-08",
        "endDate": "2024-01-10",
    }
    assert overall["createdAt"] == "2024-01-10T15:30:00"


def test_invalid_filter_is_bad_request(client):
    res = client.get("/alerts?type=bogus")

    assert res.status_code == 400
    assert "type" in res.get_json()["error"]


def test_acknowledge_and_dismiss(client, alerts_repo):
    client.post("/alerts/scan")
    alert_id = alerts_repo.list_alerts()[0].alert_id

    res = client.put(f"/alerts/{alert_id}/acknowledge", json={"acknowledgedBy": "registrar"})
    assert res.status_code == 200
    assert alerts_repo.get_by_id(alert_id).acknowledged_by == "registrar"

    res = client.delete(f"/alerts/{alert_id}")
    assert res.status_code == 200
    assert client.delete(f"/alerts/{alert_id}").status_code == 404


def test_acknowledge_unknown_is_not_found(client):
    res = client.put("/alerts/999/acknowledge")

    assert res.status_code == 404


def test_acknowledge_multiple(client, alerts_repo):
    client.post("/alerts/scan")
    ids = [a.alert_id for a in alerts_repo.list_alerts()]

    res = client.put("/alerts/acknowledge-multiple", json={"alertIds": ids})

    assert res.get_json()["data"] == {"acknowledged": 2}
    assert client.put("/alerts/acknowledge-multiple", json={"alertIds": "1"}).status_code == 400


def test_config_get_and_update(client):
    res = client.get("/alerts/config")
    assert res.get_json()["data"]["consecutiveAbsenceThreshold"] == 3
    assert res.get_json()["data"]["emailRecipients"] == ["guardian"]

    res = client.put("/alerts/config", json={"lowAttendanceThreshold": 75, "emailRecipients": ["guardian", "admin"]})
    assert res.status_code == 200
    assert res.get_json()["data"]["lowAttendanceThreshold"] == 75
    assert res.get_json()["data"]["emailRecipients"] == ["guardian", "admin"]

    assert client.put("/alerts/config", json={"lowAttendanceThreshold": -5}).status_code == 400
    assert client.put("/alerts/config", json=[1, 2]).status_code == 400


def test_analyze_student(client):
    res = client.get("/alerts/analyze/student/1")

    data = res.get_json()["data"]
    assert data["overallRate"] == 25
    assert data["consecutiveAbsences"] == 3
    assert data["lastPresentDate"] == "2024-01-05"
    assert data["subjects"] == [
        {"subjectId": 10, "subjectName": "Math", "attendanceRate": 25, "consecutiveAbsences": 3}
    ]
    assert client.get("/alerts/analyze/student/77").status_code == 404


def test_reports_use_query_threshold(client):
    res = client.get("/alerts/consecutive-absences?threshold=3")
    assert res.get_json()["data"][0]["consecutiveDays"] == 3
    assert res.get_json()["data"][0]["subjects"] == ["Math"]

    assert client.get("/alerts/consecutive-absences?threshold=5").get_json()["data"] == []

    res = client.get("/alerts/low-attendance")
    assert res.get_json()["data"] == [
        {"studentId": 1, "studentName": "Ana Cruz", "attendanceRate": 25, "totalClasses": 4, "attendedClasses": 1}
    ]
    assert client.get("/alerts/low-attendance?threshold=abc").status_code == 400


def test_notify(client, alerts_repo, notifier):
    client.post("/alerts/scan")
    alert_id = alerts_repo.list_alerts()[0].alert_id

    res = client.post(f"/alerts/{alert_id}/notify", json={"recipients": ["guardian"]})

    assert res.status_code == 200
    assert res.get_json()["data"] == {"sentTo": ["parent.cruz@mail.test"]}
    assert len(notifier.sent) == 1
    assert client.post(f"/alerts/{alert_id}/notify", json={}).status_code == 400
