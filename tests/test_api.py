from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.clock import utcnow
from app.main import app
from app.db import models

from conftest import PASSWORD, auth_headers


def signup(client, company="Acme", email="boss@acme.com"):
    return client.post("/auth/signup", json={
        "username": "Boss",
        "email": email,
        "password": PASSWORD,
        "company": company,
    })


def future(days):
    return (utcnow() + timedelta(days=days)).isoformat()


# --- Auth ---

def test_signup_login_and_me(client):
    response = signup(client)
    assert response.status_code == 201
    assert response.json()["role"] == "admin"
    assert response.json()["company"] == "Acme"

    token = client.post("/auth/token", data={"username": "boss@acme.com", "password": PASSWORD})
    assert token.status_code == 200
    headers = {"Authorization": f"Bearer {token.json()['access_token']}"}

    me = client.get("/api/v1/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "boss@acme.com"


def test_second_admin_for_company_is_rejected(client):
    assert signup(client).status_code == 201

    response = signup(client, email="other@acme.com")
    assert response.status_code == 400
    assert response.json()["detail"] == "An admin already exists for this company."

    assert signup(client, company="Globex", email="boss@globex.com").status_code == 201


def test_duplicate_email_is_rejected(client):
    signup(client)
    response = signup(client, company="Globex")
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_wrong_password(client):
    signup(client)
    response = client.post("/auth/token", data={"username": "boss@acme.com", "password": "nope"})
    assert response.status_code == 401


def test_missing_or_invalid_token(client):
    assert client.get("/api/v1/shifts").status_code == 401
    response = client.get("/api/v1/shifts", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_change_password(client, acme_employee):
    headers = auth_headers(acme_employee)
    bad = client.put("/api/v1/users/me/password", headers=headers,
                     json={"current_password": "wrong", "new_password": "new-pass"})
    assert bad.status_code == 400

    ok = client.put("/api/v1/users/me/password", headers=headers,
                    json={"current_password": PASSWORD, "new_password": "new-pass"})
    assert ok.status_code == 204
    login = client.post("/auth/token", data={"username": acme_employee.email, "password": "new-pass"})
    assert login.status_code == 200


# --- Employees ---

def test_admin_creates_employee_in_own_company(client, acme_admin):
    response = client.post("/api/v1/employees", headers=auth_headers(acme_admin), json={
        "username": "Ann",
        "email": "Ann@Acme.com",
        "password": PASSWORD,
        "designation": "Engineer",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["company"] == "Acme"
    assert body["role"] == "employee"
    assert body["email"] == "ann@acme.com"


def test_employee_directory_is_admin_only_and_scoped(client, acme_admin, acme_employee, globex_employee):
    assert client.get("/api/v1/employees", headers=auth_headers(acme_employee)).status_code == 403

    listing = client.get("/api/v1/employees", headers=auth_headers(acme_admin))
    assert {e["id"] for e in listing.json()} == {acme_admin.id, acme_employee.id}

    other = client.get(f"/api/v1/employees/{globex_employee.id}", headers=auth_headers(acme_admin))
    assert other.status_code == 403


def test_update_employee(client, acme_admin, acme_employee):
    response = client.put(f"/api/v1/employees/{acme_employee.id}", headers=auth_headers(acme_admin),
                          json={"department": "Support"})
    assert response.status_code == 200
    assert response.json()["department"] == "Support"


def test_delete_employee_cascades(client, db, acme_admin, acme_employee):
    headers = auth_headers(acme_admin)
    employee_id = acme_employee.id
    client.post("/api/v1/tasks/assign", headers=headers, json={
        "title": "Inventory", "assigned_to": acme_employee.id, "due_date": future(2),
    })
    client.post("/api/v1/shifts/start", headers=auth_headers(acme_employee))

    assert client.delete(f"/api/v1/employees/{acme_admin.id}", headers=headers).status_code == 400
    assert client.delete(f"/api/v1/employees/{employee_id}", headers=headers).status_code == 204

    db.expire_all()
    assert db.query(models.Task).count() == 0
    assert db.query(models.Shift).count() == 0
    assert client.get(f"/api/v1/employees/{employee_id}", headers=headers).status_code == 404


# --- Tasks ---

def test_task_flow_over_http(client, acme_admin, acme_employee):
    admin_headers = auth_headers(acme_admin)
    employee_headers = auth_headers(acme_employee)

    created = client.post("/api/v1/tasks/assign", headers=admin_headers, json={
        "title": "Ship release",
        "description": "v2.1",
        "assigned_to": acme_employee.id,
        "due_date": future(5),
    })
    assert created.status_code == 201
    task = created.json()
    assert task["status"] == "assigned"
    assert task["is_scheduled"] is False

    mine = client.get("/api/v1/tasks/my", headers=employee_headers)
    assert [t["id"] for t in mine.json()] == [task["id"]]
    assert client.get(f"/api/v1/tasks/{task['id']}", headers=employee_headers).status_code == 200

    invalid = client.put(f"/api/v1/tasks/update/{task['id']}", headers=employee_headers, json={"status": "completed"})
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == 'Cannot change status from "assigned" to "completed".'

    started = client.put(f"/api/v1/tasks/update/{task['id']}", headers=employee_headers, json={"status": "in-progress"})
    assert started.status_code == 200
    assert started.json()["task"]["started_at"] is not None

    again = client.put(f"/api/v1/tasks/update/{task['id']}", headers=employee_headers, json={"status": "in-progress"})
    assert again.json()["message"] == "Task is already in-progress"

    done = client.put(f"/api/v1/tasks/update/{task['id']}", headers=employee_headers, json={"status": "completed"})
    assert done.json()["task"]["status"] == "completed"
    assert done.json()["task"]["completed_at"] is not None

    bogus = client.put(f"/api/v1/tasks/update/{task['id']}", headers=employee_headers, json={"status": "archived"})
    assert bogus.status_code == 400
    assert bogus.json()["detail"] == "Invalid status provided."

    assert client.get("/api/v1/tasks", headers=employee_headers).status_code == 403
    assert [t["id"] for t in client.get("/api/v1/tasks", headers=admin_headers).json()] == [task["id"]]

    assert client.delete(f"/api/v1/tasks/{task['id']}", headers=employee_headers).status_code == 403
    deleted = client.delete(f"/api/v1/tasks/{task['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.delete(f"/api/v1/tasks/{task['id']}", headers=admin_headers).status_code == 404


def test_scheduled_task_is_hidden_from_assignee(client, acme_admin, acme_employee):
    created = client.post("/api/v1/tasks/assign", headers=auth_headers(acme_admin), json={
        "title": "Next sprint",
        "assigned_to": acme_employee.id,
        "due_date": future(7),
        "scheduled_for": future(3),
    })
    assert created.status_code == 201
    assert created.json()["status"] == "pending"
    assert created.json()["is_scheduled"] is True

    assert client.get("/api/v1/tasks/my", headers=auth_headers(acme_employee)).json() == []


def test_cross_company_assignment_over_http(client, acme_admin, globex_employee):
    response = client.post("/api/v1/tasks/assign", headers=auth_headers(acme_admin), json={
        "title": "Spy", "assigned_to": globex_employee.id, "due_date": future(1),
    })
    assert response.status_code == 403

    missing = client.post("/api/v1/tasks/assign", headers=auth_headers(acme_admin), json={
        "title": "Ghost", "assigned_to": 9999, "due_date": future(1),
    })
    assert missing.status_code == 404


# --- Shifts ---

def test_shift_flow_over_http(client, acme_admin, acme_employee):
    headers = auth_headers(acme_employee)

    started = client.post("/api/v1/shifts/start", headers=headers)
    assert started.status_code == 201
    shift_id = started.json()["id"]
    assert started.json()["end_time"] is None

    again = client.post("/api/v1/shifts/start", headers=headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "Shift already in progress"

    assert client.get("/api/v1/shifts/current", headers=headers).json()["id"] == shift_id

    missing_summary = client.put(f"/api/v1/shifts/end/{shift_id}", headers=headers, json={})
    assert missing_summary.status_code == 400

    ended = client.put(f"/api/v1/shifts/end/{shift_id}", headers=headers, json={"work_summary": "Stocked shelves"})
    assert ended.status_code == 200
    assert ended.json()["work_summary"] == "Stocked shelves"
    assert ended.json()["total_hours"] is not None

    already = client.put(f"/api/v1/shifts/end/{shift_id}", headers=headers, json={"work_summary": "x"})
    assert already.status_code == 400
    assert already.json()["detail"] == "Shift already ended"

    assert client.get("/api/v1/shifts/current", headers=headers).status_code == 404
    assert client.get(f"/api/v1/shifts/{shift_id}", headers=auth_headers(acme_admin)).status_code == 200
    assert [s["id"] for s in client.get("/api/v1/shifts", headers=auth_headers(acme_admin)).json()] == [shift_id]


def test_shift_access_checks_over_http(client, acme_admin, acme_employee, globex_admin):
    shift_id = client.post("/api/v1/shifts/start", headers=auth_headers(acme_employee)).json()["id"]

    assert client.post("/api/v1/shifts/start", headers=auth_headers(acme_admin)).status_code == 403
    assert client.get(f"/api/v1/shifts/{shift_id}", headers=auth_headers(globex_admin)).status_code == 403
    assert client.put(f"/api/v1/shifts/end/{shift_id}", headers=auth_headers(acme_admin),
                      json={"work_summary": "x"}).status_code == 403
    assert client.get("/api/v1/shifts/999", headers=auth_headers(acme_employee)).status_code == 404


# --- Lifespan ---

def test_startup_and_shutdown_are_logged(caplog):
    with caplog.at_level("INFO", logger="app.main"):
        with TestClient(app) as client:
            assert client.get("/").status_code == 200
    assert "Starting Employee Tracker API" in caplog.text
    assert "Shutting down Employee Tracker API" in caplog.text
