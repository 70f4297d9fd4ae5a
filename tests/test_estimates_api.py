"""
/api/estimates endpoint tests.

Tests:
1-4.   Create: 201, cubic yards computed, defaults, round trip
5-8.   Create validation (zero/negative dims, strings, unknown job)
9-12.  Update: dimension recompute, client cubicYards ignored, 404, bad jobId
13-14. Delete
15-17. List filters (jobId, range, sort) + per-job listing
18-20. Breakdown and live preview
21-23. Very large and overflowing volumes, boolean numbers on update
"""

from datetime import datetime, timedelta

import pytest

from excavation_tracker import models


def test_create_estimate_computes_cubic_yards(estimate, job):
    assert estimate["jobId"] == job["id"]
    assert estimate["cubicYards"] == 22.22
    assert estimate["createdAt"] is not None


def test_create_estimate_applies_defaults(client, job):
    response = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 27, "trenchWidth": 1, "trenchDepth": 1,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["materialWeight"] == 145
    assert data["importUnitCost"] == 24.5
    assert data["estimatedHours"] == 0
    assert data["cubicYards"] == 1.0


def test_create_estimate_ignores_client_cubic_yards(client, job):
    response = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 100, "trenchWidth": 2, "trenchDepth": 3,
        "cubicYards": 5000, "id": 77,
    })
    assert response.status_code == 201
    assert response.json()["cubicYards"] == 22.22
    assert response.json()["id"] != 77


def test_create_then_fetch_round_trip(client, job):
    payload = {
        "jobId": job["id"],
        "description": "Storm lateral",
        "pipeLength": 64.5,
        "trenchWidth": 2.5,
        "trenchDepth": 5,
        "materialWeight": 120,
        "importUnitCost": 18.75,
        "estimatedHours": 6.5,
        "notes": "Shoring required",
    }
    created = client.post("/api/estimates", json=payload).json()
    fetched = client.get(f"/api/estimates/{created['id']}")
    assert fetched.status_code == 200
    data = fetched.json()
    for key, value in payload.items():
        assert data[key] == value
    assert data["id"] == created["id"]
    assert data["createdAt"] == created["createdAt"]
    assert data["cubicYards"] == 29.86  # 806.25 / 27


def test_create_estimate_zero_pipe_length_rejected(client, job, db):
    response = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 0, "trenchWidth": 2, "trenchDepth": 3,
    })
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid estimate data"
    assert body["errors"][0]["field"] == "pipeLength"
    assert db.query(models.Estimate).count() == 0


@pytest.mark.parametrize("field,value", [
    ("trenchWidth", -2),
    ("trenchDepth", "deep"),
    ("trenchDepth", ""),
    ("materialWeight", 0),
    ("importUnitCost", None),
    ("estimatedHours", -1),
    ("pipeLength", True),
    ("trenchWidth", False),
    ("jobId", True),
])
def test_create_estimate_rejects_invalid_numbers(client, job, field, value):
    payload = {"jobId": job["id"], "pipeLength": 10, "trenchWidth": 2, "trenchDepth": 3}
    payload[field] = value
    response = client.post("/api/estimates", json=payload)
    assert response.status_code == 400
    assert field in {err["field"] for err in response.json()["errors"]}


def test_create_estimate_accepts_numeric_strings(client, job):
    response = client.post("/api/estimates", json={
        "jobId": str(job["id"]), "pipeLength": "100", "trenchWidth": "2", "trenchDepth": "3",
        "materialWeight": "130.5",
    })
    assert response.status_code == 201
    assert response.json()["cubicYards"] == 22.22
    assert response.json()["materialWeight"] == 130.5


def test_create_estimate_unknown_job_is_400(client, db):
    response = client.post("/api/estimates", json={
        "jobId": 404, "pipeLength": 10, "trenchWidth": 2, "trenchDepth": 3,
    })
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "jobId"
    assert db.query(models.Estimate).count() == 0


def test_update_pipe_length_recomputes_with_stored_dims(client, estimate):
    response = client.put(f"/api/estimates/{estimate['id']}", json={"pipeLength": 54})
    assert response.status_code == 200
    data = response.json()
    assert data["pipeLength"] == 54
    assert data["trenchWidth"] == 2
    assert data["trenchDepth"] == 3
    assert data["cubicYards"] == 12.0  # 54 x 2 x 3 / 27
    assert data["createdAt"] == estimate["createdAt"]


def test_update_ignores_client_cubic_yards(client, estimate):
    response = client.put(f"/api/estimates/{estimate['id']}", json={
        "cubicYards": 1.23, "description": "Revised",
    })
    assert response.status_code == 200
    assert response.json()["cubicYards"] == 22.22
    assert response.json()["description"] == "Revised"


def test_update_validation_and_missing(client, estimate):
    bad = client.put(f"/api/estimates/{estimate['id']}", json={"trenchDepth": 0})
    assert bad.status_code == 400
    assert client.get(f"/api/estimates/{estimate['id']}").json()["trenchDepth"] == 3

    missing = client.put("/api/estimates/999", json={"notes": "x"})
    assert missing.status_code == 404
    assert missing.json() == {"message": "Estimate not found"}


def test_update_to_unknown_job_is_400(client, estimate):
    response = client.put(f"/api/estimates/{estimate['id']}", json={"jobId": 999})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "jobId"


def test_delete_estimate(client, estimate):
    response = client.delete(f"/api/estimates/{estimate['id']}")
    assert response.status_code == 204
    assert client.get(f"/api/estimates/{estimate['id']}").status_code == 404


def test_delete_missing_estimate_404(client):
    assert client.delete("/api/estimates/999").status_code == 404


def test_list_estimates_filtered_by_job(client, job, estimate):
    other = client.post("/api/jobs", json={"name": "Other", "location": "L", "client": "C"}).json()
    other_estimate = client.post("/api/estimates", json={
        "jobId": other["id"], "pipeLength": 10, "trenchWidth": 1, "trenchDepth": 1,
    }).json()

    everything = client.get("/api/estimates").json()
    assert [e["id"] for e in everything] == [estimate["id"], other_estimate["id"]]

    filtered = client.get("/api/estimates", params={"jobId": other["id"]}).json()
    assert [e["id"] for e in filtered] == [other_estimate["id"]]

    per_job = client.get(f"/api/jobs/{job['id']}/estimates")
    assert per_job.status_code == 200
    assert [e["id"] for e in per_job.json()] == [estimate["id"]]
    assert client.get("/api/jobs/999/estimates").status_code == 404


def test_list_estimates_range_and_sort(client, db, job, estimate):
    bigger = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 400, "trenchWidth": 2, "trenchDepth": 3,
    }).json()
    stale = db.query(models.Estimate).filter(models.Estimate.id == estimate["id"]).first()
    stale.created_at = datetime.utcnow() - timedelta(days=45)
    db.commit()

    month = client.get("/api/estimates", params={"range": "last-month"}).json()
    assert [e["id"] for e in month] == [bigger["id"]]
    quarter = client.get("/api/estimates", params={"range": "last-quarter"}).json()
    assert {e["id"] for e in quarter} == {estimate["id"], bigger["id"]}

    by_volume = client.get("/api/estimates", params={"sort": "volume-asc"}).json()
    assert [e["id"] for e in by_volume] == [estimate["id"], bigger["id"]]
    newest = client.get("/api/estimates", params={"sort": "date-desc"}).json()
    assert newest[0]["id"] == bigger["id"]

    assert client.get("/api/estimates", params={"range": "yesterday"}).status_code == 400


def test_estimate_breakdown(client, estimate, job):
    response = client.get(f"/api/estimates/{estimate['id']}/breakdown")
    assert response.status_code == 200
    data = response.json()
    assert data["estimateId"] == estimate["id"]
    assert data["jobId"] == job["id"]
    assert data["cubicYards"] == 22.22
    assert data["tonsPerCubicYard"] == 1.9575
    assert data["haulOffCost"] == 833.25
    assert data["equipment"] == {"excavator250": 2000, "excavator200": 1600, "loader": 1600, "total": 5200}
    assert data["crew"] == {"pipeGuy": 360, "topGuy": 320, "total": 680}
    assert data["combinedLaborTotal"] == 5880


def test_estimate_breakdown_missing_404(client):
    assert client.get("/api/estimates/999/breakdown").status_code == 404


def test_preview_calculates_without_persisting(client, db):
    response = client.post("/api/estimates/preview", json={
        "pipeLength": 100, "trenchWidth": 2, "trenchDepth": 3, "estimatedHours": 8,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["cubicFeet"] == 600
    assert data["cubicYards"] == 22.22
    assert data["importCost"] == 1065.64
    assert data["equipment"]["total"] == 5200
    assert db.query(models.Estimate).count() == 0

    bad = client.post("/api/estimates/preview", json={"pipeLength": 0, "trenchWidth": 2, "trenchDepth": 3})
    assert bad.status_code == 400


def test_create_estimate_with_very_long_trench(client, job):
    response = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 1e30, "trenchWidth": 1, "trenchDepth": 1,
    })
    assert response.status_code == 201
    assert response.json()["cubicYards"] == pytest.approx(1e30 / 27)


def test_create_estimate_rejects_overflowing_volume(client, job, db):
    response = client.post("/api/estimates", json={
        "jobId": job["id"], "pipeLength": 1e200, "trenchWidth": 1e200, "trenchDepth": 1,
    })
    assert response.status_code == 400
    assert db.query(models.Estimate).count() == 0


def test_update_estimate_rejects_boolean_numbers(client, estimate):
    response = client.put(f"/api/estimates/{estimate['id']}", json={"trenchDepth": True})
    assert response.status_code == 400
    assert "trenchDepth" in {err["field"] for err in response.json()["errors"]}
    assert client.get(f"/api/estimates/{estimate['id']}").json()["trenchDepth"] == 3
