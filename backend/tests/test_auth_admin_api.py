"""
API tests for /auth, /universities, /superadmin/universities and /admin/users.
"""
from alumni_connect.models.enums import UserRole
from conftest import PASSWORD, auth_headers, make_university, make_user


def test_register_login_me(client, db):
    make_university(db, "mit", name="MIT")
    r = client.post(
        "/auth/register",
        json={"email": "New@Example.com", "password": PASSWORD, "name": "Newbie", "university_id": "mit"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "alumni"
    assert body["university"]["name"] == "MIT"

    r = client.post("/auth/register", json={"email": "new@example.com", "password": PASSWORD, "name": "X", "university_id": "mit"})
    assert r.status_code == 409

    r = client.post("/auth/login", json={"email": "new@example.com", "password": PASSWORD})
    assert r.status_code == 200
    token = r.json()["access_token"]
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.json()["name"] == "Newbie"

    r = client.post("/auth/login", json={"email": "new@example.com", "password": "wrong-pass"})
    assert (r.status_code, r.json()["code"]) == (401, "unauthorized")


def test_register_rejects_long_password(client, db):
    make_university(db, "mit")
    r = client.post(
        "/auth/register",
        json={"email": "a@example.com", "password": "x" * 73, "name": "A", "university_id": "mit"},
    )
    assert r.status_code == 422


def test_superadmin_login_lists_universities(client, db):
    make_university(db, "mit")
    make_university(db, "cmu")
    make_user(db, None, role=UserRole.SUPERADMIN.value, email="boss@example.com")
    r = client.post("/auth/login", json={"email": "boss@example.com", "password": PASSWORD})
    assert r.status_code == 200
    assert {u["id"] for u in r.json()["universities"]} == {"mit", "cmu"}


def test_university_console(client, db):
    make_university(db, "mit")
    boss = make_user(db, None, role=UserRole.SUPERADMIN.value)
    alum = make_user(db, "mit")
    h = auth_headers(boss)

    assert client.get("/superadmin/universities", headers=auth_headers(alum)).status_code == 403

    r = client.post("/superadmin/universities", json={"id": "Stanford", "name": "Stanford"}, headers=h)
    assert r.status_code == 201, r.text
    assert r.json()["id"] == "stanford"
    assert r.json()["colors"]["light"]["primary"]
    assert client.post("/superadmin/universities", json={"id": "stanford", "name": "Dup"}, headers=h).status_code == 409

    r = client.put("/superadmin/universities/stanford", json={"name": "Stanford University"}, headers=h)
    assert r.json()["name"] == "Stanford University"

    r = client.post("/superadmin/universities/mit/toggle-status", headers=h)
    assert r.json()["is_enabled"] is False
    assert [u["id"] for u in client.get("/universities").json()] == ["stanford"]
    r = client.post("/auth/login", json={"email": alum.email, "password": PASSWORD})
    assert r.status_code == 401

    assert client.delete("/superadmin/universities/mit", headers=h).status_code == 409
    assert client.delete("/superadmin/universities/stanford", headers=h).status_code == 204
    assert client.get("/universities/stanford").status_code == 404

    rows = {u["id"]: u["user_count"] for u in client.get("/superadmin/universities", headers=h).json()}
    assert rows == {"mit": 1}


def test_admin_user_console(client, db):
    make_university(db, "mit")
    make_university(db, "cmu")
    admin = make_user(db, "mit", role=UserRole.ADMIN.value)
    alum = make_user(db, "mit", name="Target")
    other = make_user(db, "cmu")
    h = auth_headers(admin)

    r = client.get("/admin/users", params={"search": "targ"}, headers=h)
    assert [u["id"] for u in r.json()["items"]] == [str(alum.id)]
    assert client.get("/admin/users", params={"university_id": "cmu"}, headers=h).status_code == 403
    assert client.get("/admin/users", headers=auth_headers(alum)).status_code == 403

    r = client.post(f"/admin/users/{alum.id}/deactivate", headers=h)
    assert r.json()["status"] == "deactivated"
    assert client.get("/auth/me", headers=auth_headers(alum)).status_code == 401
    r = client.post(f"/admin/users/{alum.id}/activate", headers=h)
    assert r.json()["status"] == "active"

    assert client.post(f"/admin/users/{other.id}/deactivate", headers=h).status_code == 403
    assert client.post(f"/admin/users/{admin.id}/deactivate", headers=h).status_code == 400


def test_health_reports_counters(client, db):
    r = client.get("/health")
    assert r.status_code == 200
    assert "request_transition_conflicts_total" in r.json()["metrics"]
