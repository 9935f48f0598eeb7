import csv
import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from guardops.application import get_payroll_service, reset_state


@pytest.fixture(autouse=True)
def reset_services():
    reset_state()
    yield
    reset_state()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("GUARDOPS_EXPORTS_ROOT", str(tmp_path))
    monkeypatch.delenv("GUARDOPS_WEIGHT_POLICY", raising=False)
    from guardops.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _seed_guard(client: TestClient) -> None:
    response = client.post(
        "/api/payroll/configs",
        json={
            "guard_id": "guard1",
            "guard_name": "Rajesh Kumar",
            "base_salary": 25000,
            "hourly_rate": 150,
            "overtime_multiplier": 1.5,
            "night_shift_allowance": 200,
            "weekend_allowance": 300,
            "holiday_allowance": 500,
            "effective_from": "2024-01-01",
        },
    )
    assert response.status_code == 200

    response = client.post(
        "/api/payroll/attendance",
        json={
            "guard_id": "guard1",
            "guard_name": "Rajesh Kumar",
            "period_month": "2024-01",
            "total_days": 26,
            "present_days": 24,
            "absent_days": 2,
            "late_days": 3,
            "overtime_hours": 12,
            "night_shift_hours": 40,
            "weekend_hours": 8,
            "holiday_hours": 4,
        },
    )
    assert response.status_code == 200
    assert response.json()["warnings"] == []


def test_payroll_end_to_end(client):
    _seed_guard(client)

    # 1. preview
    response = client.post("/api/payroll/calculate", json={"guard_id": "guard1", "month": 1, "year": 2024})
    assert response.status_code == 200
    preview = response.json()
    assert preview["status"] == "pending"
    assert float(preview["net_salary"]) == pytest.approx(25226.92)
    assert float(preview["night_shift_amount"]) == pytest.approx(1000)

    # 2. process the month
    response = client.post("/api/payroll/process", json={"month": 1, "year": 2024})
    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["status"] == "processed"
    assert items[0]["processed_at"]

    # 3. mark paid, a second confirmation is rejected
    response = client.post("/api/payroll/records/guard1/2024-01/paid")
    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    response = client.post("/api/payroll/records/guard1/2024-01/paid")
    assert response.status_code == 409

    # 4. listing and stats
    response = client.get("/api/payroll/records", params={"period": "2024-01", "status": "paid"})
    assert [item["guard_id"] for item in response.json()["items"]] == ["guard1"]

    stats = client.get("/api/payroll/stats", params={"period": "2024-01"}).json()
    assert stats["record_count"] == 1
    assert stats["processed_count"] == 1
    assert float(stats["total_payroll"]) == pytest.approx(25226.92)

    # 5. export
    response = client.get("/api/payroll/export", params={"period": "2024-01", "format": "csv"})
    assert response.status_code == 200
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert rows[0]["guard_id"] == "guard1"
    assert rows[0]["status"] == "paid"

    service = get_payroll_service()
    assert len(service.list_records("2024-01")) == 1


def test_payroll_errors(client):
    response = client.post("/api/payroll/calculate", json={"guard_id": "guard1", "month": 1, "year": 2024})
    assert response.status_code == 400

    _seed_guard(client)

    response = client.post("/api/payroll/calculate", json={"guard_id": "guard9", "month": 1, "year": 2024})
    assert response.status_code == 404

    response = client.post("/api/payroll/calculate", json={"guard_id": "guard1", "month": 13, "year": 2024})
    assert response.status_code == 400

    response = client.post("/api/payroll/calculate", json={"guard_id": "guard1", "year": 2024})
    assert response.status_code == 400

    response = client.post(
        "/api/payroll/configs",
        json={"guard_id": "guard1", "base_salary": 30000, "effective_from": "2024-03-01"},
    )
    assert response.status_code == 409

    response = client.post("/api/payroll/records/guard1/2024-01/cancel")
    assert response.status_code == 409

    response = client.get("/api/payroll/export", params={"format": "pdf"})
    assert response.status_code == 400


def test_export_rejects_malformed_period_without_creating_folders(client, tmp_path, monkeypatch):
    exports_root = tmp_path / "exports"
    exports_root.mkdir()
    monkeypatch.setenv("GUARDOPS_EXPORTS_ROOT", str(exports_root))

    for period in ("../escaped/dir", str(tmp_path / "absolute"), "2024-13"):
        response = client.get("/api/payroll/export", params={"period": period, "format": "csv"})
        assert response.status_code == 400

    assert not (tmp_path / "escaped").exists()
    assert not (tmp_path / "absolute").exists()
    assert list(exports_root.iterdir()) == []


def test_process_requires_a_list_of_guard_ids(client):
    _seed_guard(client)

    response = client.post("/api/payroll/process", json={"month": 1, "year": 2024, "selected": "guard1"})
    assert response.status_code == 400
    response = client.post("/api/payroll/process", json={"month": 1, "year": 2024, "selected": ["guard1", 7]})
    assert response.status_code == 400
    assert get_payroll_service().list_records("2024-01") == []

    response = client.post("/api/payroll/process", json={"month": 1, "year": 2024, "selected": ["guard1"]})
    assert response.status_code == 200
    assert [item["guard_id"] for item in response.json()["items"]] == ["guard1"]


def test_health_endpoint(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert client.get("/").json()["health"] == "/api/health"


def test_attendance_warnings_are_reported(client):
    response = client.post(
        "/api/payroll/attendance",
        json={"guard_id": "guard2", "period_month": "2024-01", "total_days": 20, "present_days": 20, "absent_days": 3},
    )
    assert response.status_code == 200
    assert response.json()["warnings"]


def _category_payload() -> list[dict]:
    return [
        {
            "id": "licenses",
            "name": "Guard Licenses",
            "score": 85,
            "weight": 0.3,
            "items": [
                {"id": "lic1", "name": "Active Licenses", "status": "compliant", "score": 25, "max_score": 25},
                {
                    "id": "lic2",
                    "name": "License Renewals",
                    "status": "partial",
                    "score": 15,
                    "max_score": 25,
                    "due_date": "2024-02-15",
                    "action_required": "Submit renewal applications",
                },
            ],
        },
        {
            "id": "training",
            "name": "Training Records",
            "score": 72,
            "weight": 0.25,
            "items": [
                {
                    "id": "train2",
                    "name": "Advanced Training",
                    "status": "partial",
                    "score": 12,
                    "max_score": 20,
                    "action_required": "Schedule training sessions",
                }
            ],
        },
        {"id": "agreements", "name": "Client Agreements", "score": 80, "weight": 0.2, "items": []},
        {
            "id": "wages",
            "name": "Wage Compliance",
            "score": 75,
            "weight": 0.25,
            "items": [{"id": "wage1", "name": "Salary Payments", "status": "compliant", "score": 25, "max_score": 25}],
        },
    ]


def test_compliance_end_to_end(client):
    response = client.put("/api/compliance/categories", json=_category_payload())
    assert response.status_code == 200

    score = client.get("/api/compliance/score").json()
    assert score["overall"] == 78
    assert score["level"] == "Good"
    assert score["trend"] == "stable"
    assert score["recommendations"] == ["Submit renewal applications", "Schedule training sessions"]
    assert any("agreements" in warning for warning in score["warnings"])

    limited = client.get("/api/compliance/score", params={"limit": 1}).json()
    assert limited["recommendations"] == ["Submit renewal applications"]

    snapshot = client.post("/api/compliance/history", json={"date": "2024-01-22"})
    assert snapshot.status_code == 200
    assert snapshot.json()["score"] == 78

    payload = _category_payload()
    payload[0]["score"] = 95
    client.put("/api/compliance/categories", json=payload)
    score = client.get("/api/compliance/score").json()
    assert score["overall"] == 81
    assert score["trend"] == "improving"
    assert score["categories"][0]["trend"] == "up"

    history = client.get("/api/compliance/history").json()["items"]
    assert [entry["date"] for entry in history] == ["2024-01-22"]


def test_compliance_weight_policy_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GUARDOPS_EXPORTS_ROOT", str(tmp_path))
    monkeypatch.setenv("GUARDOPS_WEIGHT_POLICY", "reject")
    from guardops.app import create_app

    with TestClient(create_app()) as client:
        payload = _category_payload()
        payload[0]["weight"] = 0.5
        client.put("/api/compliance/categories", json=payload)
        response = client.get("/api/compliance/score")
        assert response.status_code == 422


def test_deduction_score(client):
    response = client.post(
        "/api/compliance/deduction-score",
        json={"expiring_licenses": 3, "expiring_trainings": 5, "expiring_agreements": 2, "pending_wages": 4},
    )
    assert response.status_code == 200
    assert response.json()["score"] == 52

    response = client.post("/api/compliance/deduction-score", json={"expiring_licenses": -1})
    assert response.status_code == 400
