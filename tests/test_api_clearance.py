import pytest

from app.services import certificate_service

FORM = {
    "academic_year": "2024/2025",
    "semester": "2nd",
    "year_of_study": "IV",
    "reason": "Graduation",
    "other_reason": None,
    "date": "2025-07-01T09:30",
}


@pytest.fixture
def fake_pdf(monkeypatch):
    monkeypatch.setattr(certificate_service.pdfkit, "from_string", lambda *a, **kw: b"%PDF-1.4 fake")
    monkeypatch.setattr(certificate_service, "get_pdf_config", lambda: None)


@pytest.mark.asyncio
async def test_reasons(client, student_headers):
    res = await client.get("/api/clearance/reasons", headers=student_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["reasons"][-1] == "Other"
    assert "Withdrawing for Health/Family Reasons" in body["reasons"]
    assert body["semesters"] == ["1st", "2nd"]


@pytest.mark.asyncio
async def test_form_is_prefilled_and_locked(client, student_headers):
    res = await client.get("/api/clearance/form", headers=student_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["state"] == "Draft"
    assert body["request"]["student_id"] == "STU001"
    assert body["request"]["grandfather_name"] == "Alemu Tesfaye"
    assert "student_id" in body["locked_fields"]
    assert "reason" in body["editable_fields"]


@pytest.mark.asyncio
async def test_submit_approved_then_preview_and_download(client, student_headers, fake_pdf):
    res = await client.post("/api/clearance/submit", json=FORM, headers=student_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["outcome"] == "Approved"
    token = body["certificate_token"]
    assert token

    html = await client.get(f"/api/clearance/certificates/{token}/preview?format=html", headers=student_headers)
    assert html.status_code == 200
    assert "STU001" in html.text

    preview = await client.get(f"/api/clearance/certificates/{token}/preview", headers=student_headers)
    assert preview.headers["content-type"] == "application/pdf"
    assert preview.headers["content-disposition"].startswith("inline")

    download = await client.get(f"/api/clearance/certificates/{token}/download", headers=student_headers)
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4 fake"
    assert "STU001_ClearanceCertificate.pdf" in download.headers["content-disposition"]


@pytest.mark.asyncio
async def test_identity_fields_cannot_be_overridden(client, student_headers):
    payload = dict(FORM, student_id="STU002")
    res = await client.post("/api/clearance/submit", json=payload, headers=student_headers)

    assert res.json()["student_id"] == "STU001"
    assert res.json()["outcome"] == "Approved"


@pytest.mark.asyncio
async def test_submit_denied_includes_registrar_contact(client, login):
    headers = await login("selam", "selam123")
    res = await client.post("/api/clearance/submit", json=dict(FORM, year_of_study="III"), headers=headers)

    body = res.json()
    assert res.status_code == 200
    assert body["outcome"] == "Denied"
    assert "Unpaid library fine" in body["message"]
    assert body["certificate_token"] is None
    assert body["registrar_contact"]


@pytest.mark.asyncio
async def test_submit_rejected_lists_field_errors(client, student_headers):
    payload = dict(FORM, reason="Other", other_reason="  ")
    res = await client.post("/api/clearance/submit", json=payload, headers=student_headers)

    body = res.json()
    assert body["outcome"] == "Rejected"
    assert "other_reason" in body["errors"]
    assert "Checking" not in body["trail"]


@pytest.mark.asyncio
async def test_omitted_fields_are_rejected(client, student_headers):
    res = await client.post("/api/clearance/submit", json={"reason": "Graduation"}, headers=student_headers)

    body = res.json()
    assert body["outcome"] == "Rejected"
    assert {"academic_year", "semester", "year_of_study", "date"} <= set(body["errors"])


@pytest.mark.asyncio
async def test_certificate_of_another_student_is_not_served(client, student_headers, login, fake_pdf):
    res = await client.post("/api/clearance/submit", json=FORM, headers=student_headers)
    token = res.json()["certificate_token"]

    other = await login("dawit", "dawit123")
    stolen = await client.get(f"/api/clearance/certificates/{token}/download", headers=other)
    assert stolen.status_code == 404


@pytest.mark.asyncio
async def test_clearance_is_student_only(client, admin_headers):
    res = await client.post("/api/clearance/submit", json=FORM, headers=admin_headers)
    assert res.status_code == 403
