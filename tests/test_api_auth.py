from datetime import timedelta

import pytest

from app.core.security import create_access_token


@pytest.mark.asyncio
async def test_root_reports_storage_mode(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["storage_mode"] in ("database", "memory")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,password,role,dashboard",
    [
        ("abebe", "abebe123", "student", "/clearance-dashboard"),
        ("library", "library123", "department_official", "/department-admin"),
        ("admin", "admin123", "admin", "/main-admin"),
    ],
)
async def test_login_routes_to_dashboard(client, username, password, role, dashboard):
    res = await client.post("/api/auth/login", json={"username": username, "password": password})

    assert res.status_code == 200
    body = res.json()
    assert body["identity"]["role"] == role
    assert body["dashboard"] == dashboard
    assert body["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_failure_is_uniform(client):
    unknown = await client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
    wrong = await client.post("/api/auth/login", json={"username": "abebe", "password": "x"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["detail"] == wrong.json()["detail"] == "Invalid username or password"


@pytest.mark.asyncio
async def test_login_requires_username(client):
    res = await client.post("/api/auth/login", json={"username": "", "password": "x"})
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_me_returns_identity(client, student_headers):
    res = await client.get("/api/auth/me", headers=student_headers)

    assert res.status_code == 200
    assert res.json()["identity"]["subject_id"] == "STU001"
    assert res.json()["dashboard"] == "/clearance-dashboard"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client):
    token = create_access_token("STU001", expires_delta=timedelta(seconds=-5), data={"role": "student"})
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert "expired" in res.json()["detail"].lower()


@pytest.mark.asyncio
async def test_token_with_unknown_role_is_rejected(client):
    token = create_access_token("STU001", data={"role": "janitor"})
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_student_profile(client, student_headers):
    res = await client.get("/api/students/me", headers=student_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["student_name"] == "Abebe Kebede"
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_student_profile_is_student_only(client, official_headers):
    res = await client.get("/api/students/me", headers=official_headers)
    assert res.status_code == 403
