import io

import pytest
from openpyxl import load_workbook

NEW_OFFICIAL = {
    "official_id": "OFF010",
    "first_name": "Liya",
    "last_name": "Mekonnen",
    "role": "department_official",
    "department": "Finance",
    "profession": "Accountant",
    "education": "BA Accounting",
    "email": "liya.mekonnen@bdu.edu.et",
    "phone": "0911000010",
    "username": "finance",
    "password": "finance123",
}


# ------------------------------------------------------------
# RISK REGISTRY
# ------------------------------------------------------------
@pytest.mark.asyncio
async def test_official_manages_risk_entries(client, official_headers):
    created = await client.post(
        "/api/risks/",
        json={"student_id": "STU001", "department": "Library", "case_description": "Lost book"},
        headers=official_headers,
    )
    assert created.status_code == 201
    entry = created.json()
    assert entry["added_by"] == "OFF001"
    assert entry["is_blocking"] is True

    listed = await client.get("/api/risks/?q=lost", headers=official_headers)
    assert [r["id"] for r in listed.json()] == [entry["id"]]

    updated = await client.put(
        f"/api/risks/{entry['id']}",
        json={"student_id": "STU001", "department": "Library", "case_description": "Lost book", "status": "resolved"},
        headers=official_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["is_blocking"] is False

    unconfirmed = await client.delete(f"/api/risks/{entry['id']}", headers=official_headers)
    assert unconfirmed.status_code == 400

    deleted = await client.delete(f"/api/risks/{entry['id']}?confirm=true", headers=official_headers)
    assert deleted.status_code == 200

    again = await client.delete(f"/api/risks/{entry['id']}?confirm=true", headers=official_headers)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_risk_validation_error_shape(client, official_headers):
    res = await client.post(
        "/api/risks/", json={"student_id": "STU001", "department": ""}, headers=official_headers
    )

    assert res.status_code == 400
    assert set(res.json()["detail"]["errors"]) == {"department", "case_description"}


@pytest.mark.asyncio
async def test_add_from_student_flow(client, official_headers):
    eligible = await client.get("/api/risks/eligible-students", headers=official_headers)
    ids = [s["student_id"] for s in eligible.json()]
    assert "STU002" not in ids

    dup = await client.post(
        "/api/risks/from-student",
        json={"student_id": "STU002", "department": "Finance", "case_description": "Tuition"},
        headers=official_headers,
    )
    assert dup.status_code == 409

    ok = await client.post(
        "/api/risks/from-student",
        json={"student_id": "STU001", "department": "Finance", "case_description": "Tuition"},
        headers=official_headers,
    )
    assert ok.status_code == 201
    assert ok.json()["student_name"] == "Abebe Kebede"


@pytest.mark.asyncio
async def test_risk_export(client, official_headers):
    csv_res = await client.get("/api/risks/export?format=csv&q=library", headers=official_headers)
    assert csv_res.status_code == 200
    assert "students_at_risk.csv" in csv_res.headers["content-disposition"]
    assert csv_res.text.splitlines()[0].startswith("id,student_id")

    xlsx_res = await client.get("/api/risks/export?format=xlsx", headers=official_headers)
    sheet = load_workbook(io.BytesIO(xlsx_res.content)).active
    assert sheet.max_row == 4

    empty = await client.get("/api/risks/export?q=nothing-matches", headers=official_headers)
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_students_cannot_touch_registry(client, student_headers):
    res = await client.get("/api/risks/", headers=student_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_use_registry(client, admin_headers):
    res = await client.get("/api/risks/", headers=admin_headers)
    assert res.status_code == 200
    assert len(res.json()) == 3


# ------------------------------------------------------------
# OFFICIALS
# ------------------------------------------------------------
@pytest.mark.asyncio
async def test_admin_creates_and_updates_official(client, admin_headers, login):
    created = await client.post("/api/officials/", json=NEW_OFFICIAL, headers=admin_headers)
    assert created.status_code == 201
    assert "password" not in created.json()
    assert "password_hash" not in created.json()

    # New official can log in straight away
    await login("finance", "finance123")

    payload = dict(NEW_OFFICIAL, phone="0911999999", password="")
    updated = await client.put("/api/officials/OFF010", json=payload, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["phone"] == "0911999999"

    await login("finance", "finance123")


@pytest.mark.asyncio
async def test_official_with_empty_email_is_rejected(client, admin_headers):
    res = await client.post("/api/officials/", json=dict(NEW_OFFICIAL, email=""), headers=admin_headers)
    assert res.status_code == 400
    assert "email" in res.json()["detail"]["errors"]

    listed = await client.get("/api/officials/", headers=admin_headers)
    assert len(listed.json()) == 3


@pytest.mark.asyncio
async def test_duplicate_official_conflicts(client, admin_headers):
    res = await client.post(
        "/api/officials/", json=dict(NEW_OFFICIAL, username="library"), headers=admin_headers
    )
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_official_search_get_delete(client, admin_headers):
    found = await client.get("/api/officials/?q=laboratories", headers=admin_headers)
    assert [o["official_id"] for o in found.json()] == ["OFF002"]

    one = await client.get("/api/officials/off002", headers=admin_headers)
    assert one.json()["username"] == "labs"

    assert (await client.delete("/api/officials/OFF002", headers=admin_headers)).status_code == 400
    assert (await client.delete("/api/officials/OFF002?confirm=true", headers=admin_headers)).status_code == 200
    assert (await client.get("/api/officials/OFF002", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_officials_export(client, admin_headers):
    res = await client.get("/api/officials/export?format=csv", headers=admin_headers)

    assert res.status_code == 200
    lines = res.text.splitlines()
    assert lines[0].startswith("official_id,first_name")
    assert len(lines) == 4
    assert "password" not in lines[0]


@pytest.mark.asyncio
async def test_officials_are_admin_only(client, official_headers):
    res = await client.get("/api/officials/", headers=official_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_summary(client, admin_headers):
    res = await client.get("/api/admin/summary", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["students_at_risk"] == 2
    assert res.json()["total_officials"] == 3


@pytest.mark.asyncio
async def test_edit_form_without_role_keeps_admin(client, admin_headers):
    payload = {k: v for k, v in NEW_OFFICIAL.items() if k != "role"}
    payload.update(official_id="OFF003", username="registrar", password="")

    res = await client.put("/api/officials/OFF003", json=payload, headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["role"] == "admin"
